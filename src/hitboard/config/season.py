"""Season windows for supported MLB seasons."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Dict, Iterable, Union


@dataclass(frozen=True)
class SeasonConfig:
    season: int
    start_date: date
    length_days: int
    schedule_end: date
    team_id: int = 137
    sport_id: int = 1

    def __post_init__(self) -> None:
        if self.length_days <= 0:
            raise ValueError(f"length_days must be positive, got {self.length_days}")
        if self.schedule_end < self.start_date:
            raise ValueError("schedule_end must not precede start_date")

    @property
    def end_date(self) -> date:
        return self.start_date + timedelta(days=self.length_days)

    def with_overrides(self, **changes: object) -> "SeasonConfig":
        """Return a copy with the given fields replaced (``None`` values are ignored)."""

        updates = {key: value for key, value in changes.items() if value is not None}
        return replace(self, **updates) if updates else self


_SEASONS: Dict[int, SeasonConfig] = {
    2024: SeasonConfig(
        season=2024,
        start_date=date(2024, 3, 20),
        length_days=194,
        schedule_end=date(2024, 5, 31),
    ),
    2025: SeasonConfig(
        season=2025,
        start_date=date(2025, 3, 27),
        length_days=186,
        schedule_end=date(2025, 5, 31),
    ),
}


def iter_season_configs() -> Iterable[SeasonConfig]:
    """Return an iterator of all configured seasons."""

    return _SEASONS.values()


def get_season_config(season: Union[int, str]) -> SeasonConfig:
    """Fetch the window for a season, raising KeyError if missing."""

    try:
        key = int(season)
    except (TypeError, ValueError):
        raise KeyError(f"No season configured for {season!r}") from None
    if key not in _SEASONS:
        raise KeyError(f"No season configured for {season!r}")
    return _SEASONS[key]
