"""Configuration helpers for season windows."""

from .season import SeasonConfig, get_season_config, iter_season_configs

__all__ = [
    "SeasonConfig",
    "get_season_config",
    "iter_season_configs",
]
