"""Player payloads shared by the resolver, stat fetcher and team views."""

from __future__ import annotations

import datetime as dt
from typing import List

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class PlayerIdentity(BaseModel):
    """Display name mapped to the upstream person id."""

    player_id: int = Field(..., ge=1)
    full_name: str

    model_config = ConfigDict(frozen=True)


class GameHits(BaseModel):
    date: dt.date
    hits: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)


class Hitter(BaseModel):
    """Season-to-date hitting line for one rostered player."""

    player_id: int
    name: str
    position: str = "N/A"
    hits: int = Field(default=0, ge=0)
    games: int = Field(default=0, ge=0)
    at_bats: int = Field(default=0, ge=0)
    avg: str = ".000"
    hits_by_date: List[GameHits] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)
