"""Prorate season guesses and score them against actual hits."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from hitboard.models import (
    Deviation,
    FiniteDeviation,
    PredictionRecord,
    RecordStatus,
    RosterEntry,
    SeasonProgress,
    UnboundedDeviation,
)


_TENTH = Decimal("0.1")
_HUNDREDTH = Decimal("0.01")


def _round_half_up(value: float, quantum: Decimal) -> float:
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round1(value: float) -> float:
    return _round_half_up(value, _TENTH)


def round2(value: float) -> float:
    return _round_half_up(value, _HUNDREDTH)


def prorate(predicted_hits: int, fraction: float) -> float:
    """Expected hits so far for a full-season guess."""

    if fraction <= 0.0 or predicted_hits <= 0:
        return 0.0
    return round1(predicted_hits * min(fraction, 1.0))


def compute_deviation(predicted_to_date: float, actual_hits: int) -> Deviation:
    if actual_hits == 0:
        if predicted_to_date > 0:
            return UnboundedDeviation()
        return FiniteDeviation(percent=0.0)
    diff = abs(predicted_to_date - actual_hits)
    return FiniteDeviation(percent=round2(diff / actual_hits * 100.0))


def compute_record(
    entry: RosterEntry,
    actual_hits: int,
    progress: SeasonProgress,
    *,
    player_id: Optional[int] = None,
    status: RecordStatus = "ok",
) -> PredictionRecord:
    actual = max(0, int(actual_hits))
    predicted = entry.predicted_hits_value
    to_date = prorate(predicted, progress.fraction)
    return PredictionRecord(
        id=entry.seq,
        student=entry.student,
        player=entry.player,
        predicted_hits=predicted,
        predicted_hits_to_date=to_date,
        actual_hits=actual,
        deviation=compute_deviation(to_date, actual),
        player_id=player_id,
        status=status,
    )
