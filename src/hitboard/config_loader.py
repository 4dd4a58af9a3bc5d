"""Load service settings from JSON files and the environment."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from hitboard.config import SeasonConfig, get_season_config


logger = logging.getLogger(__name__)

_ENV_PREFIX = "HITBOARD_"

DEFAULT_STATS_API_URL = "https://statsapi.mlb.com/api/v1"


def _env_float(name: str, default: float, *, clamp_min: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    return value


def _env_int(name: str, default: Optional[int], *, min_value: int | None = None) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %s", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    text = raw.strip().lower()
    if text in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if text in {"0", "false", "f", "no", "n", "off"}:
        return False
    logger.warning("Invalid bool for %s: %s; using default %s", name, raw, default)
    return default


@dataclass
class Settings:
    stats_api_url: str = DEFAULT_STATS_API_URL
    roster_path: Path = field(default_factory=lambda: Path("data/predictions.csv"))
    season: int = 2025
    team_id: Optional[int] = None
    max_concurrency: int = 16
    highlight_count: int = 5
    request_timeout: float = 10.0
    fallback_on_zero_games: bool = True

    def season_config(self) -> SeasonConfig:
        return get_season_config(self.season).with_overrides(team_id=self.team_id)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Settings":
        known = {item.name for item in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown settings keys: %s", ", ".join(unknown))
        values = {key: value for key, value in data.items() if key in known}
        if "roster_path" in values:
            values["roster_path"] = Path(values["roster_path"])
        return cls(**values)

    @classmethod
    def load(cls, path: Path) -> "Settings":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls.from_mapping(data)

    @classmethod
    def from_env(cls, base: "Settings | None" = None) -> "Settings":
        base = base or cls()
        roster = os.getenv(f"{_ENV_PREFIX}ROSTER_PATH")
        return replace(
            base,
            stats_api_url=os.getenv(f"{_ENV_PREFIX}STATS_API_URL", base.stats_api_url),
            roster_path=Path(roster) if roster else base.roster_path,
            season=_env_int(f"{_ENV_PREFIX}SEASON", base.season) or base.season,
            team_id=_env_int(f"{_ENV_PREFIX}TEAM_ID", base.team_id, min_value=1),
            max_concurrency=_env_int(f"{_ENV_PREFIX}MAX_CONCURRENCY", base.max_concurrency, min_value=1)
            or base.max_concurrency,
            highlight_count=_env_int(f"{_ENV_PREFIX}HIGHLIGHT_COUNT", base.highlight_count, min_value=0)
            or 0,
            request_timeout=_env_float(f"{_ENV_PREFIX}REQUEST_TIMEOUT", base.request_timeout, clamp_min=0.1),
            fallback_on_zero_games=_env_bool(
                f"{_ENV_PREFIX}FALLBACK_ON_ZERO_GAMES", base.fallback_on_zero_games
            ),
        )

    def save(self, path: Path) -> None:
        payload = asdict(self)
        payload["roster_path"] = str(self.roster_path)
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
