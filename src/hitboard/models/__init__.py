"""Canonical models shared across ingestion, pipeline and API layers."""

from .player import GameHits, Hitter, PlayerIdentity
from .prediction import (
    Deviation,
    FiniteDeviation,
    PredictionRecord,
    RecordStatus,
    RosterEntry,
    UnboundedDeviation,
)
from .season import NextGame, SeasonProgress

__all__ = [
    "Deviation",
    "FiniteDeviation",
    "GameHits",
    "Hitter",
    "NextGame",
    "PlayerIdentity",
    "PredictionRecord",
    "RecordStatus",
    "RosterEntry",
    "SeasonProgress",
    "UnboundedDeviation",
]
