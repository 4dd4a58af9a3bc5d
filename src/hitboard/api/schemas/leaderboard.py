from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field

from hitboard.models import GameHits, PredictionRecord, SeasonProgress


class HighlightResponse(BaseModel):
    record: PredictionRecord
    hits_by_date: List[GameHits] = Field(default_factory=list)


class LeaderboardResponse(BaseModel):
    progress: SeasonProgress
    records: List[PredictionRecord]
    highlights: List[HighlightResponse] = Field(default_factory=list)
    diagnostics: Dict[str, int] = Field(default_factory=dict)


class SummaryCard(BaseModel):
    label: str
    first_name: str
    delta: str
    record: PredictionRecord


class SummaryResponse(BaseModel):
    progress: SeasonProgress
    cards: List[SummaryCard]
