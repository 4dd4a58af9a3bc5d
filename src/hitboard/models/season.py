"""Season progress snapshot consumed by the accuracy calculator."""

from __future__ import annotations

import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict


class NextGame(BaseModel):
    date: dt.date
    home_team: str = "TBD"
    away_team: str = "TBD"
    game_time: Optional[dt.datetime] = None
    venue: str = "TBD"

    model_config = ConfigDict(frozen=True)


class SeasonProgress(BaseModel):
    """Fraction of the season complete, plus the counts it came from."""

    fraction: float = Field(..., ge=0.0, le=1.0)
    source: Literal["games", "calendar"]
    as_of: dt.datetime
    games_completed: Optional[int] = Field(default=None, ge=0)
    total_games: Optional[int] = Field(default=None, ge=0)
    next_game: Optional[NextGame] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_counts(self) -> "SeasonProgress":
        if (
            self.games_completed is not None
            and self.total_games is not None
            and self.games_completed > self.total_games
        ):
            raise ValueError("games_completed cannot exceed total_games")
        return self

    @property
    def percent(self) -> float:
        return self.fraction * 100.0
