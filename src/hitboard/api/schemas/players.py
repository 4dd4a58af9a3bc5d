from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field

from hitboard.models import Hitter


class PlayerIdResponse(BaseModel):
    id: int


class HitsResponse(BaseModel):
    hits: int = Field(..., ge=0)


class TeamHittersResponse(BaseModel):
    team_id: int
    season: int
    top_hitters: List[Hitter] = Field(default_factory=list)
    cumulative_hits: List[Dict[str, object]] = Field(
        default_factory=list,
        description="Running hit totals per game date, one key per hitter",
    )
