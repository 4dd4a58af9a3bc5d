"""Order computed records from most to least accurate."""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from hitboard.models import FiniteDeviation, PredictionRecord, UnboundedDeviation


_FINITE = 0
_UNBOUNDED = 1
_MISSING = 2


def badness_key(record: PredictionRecord) -> Tuple[int, float, str, str, int]:
    deviation = record.deviation
    if isinstance(deviation, FiniteDeviation):
        return (
            _FINITE,
            abs(deviation.percent),
            record.student.casefold(),
            record.player.casefold(),
            record.id,
        )
    if isinstance(deviation, UnboundedDeviation):
        return (
            _UNBOUNDED,
            record.predicted_hits_to_date,
            record.student.casefold(),
            record.player.casefold(),
            record.id,
        )
    # No deviation at all: keep input order among these.
    return (_MISSING, 0.0, "", "", 0)


def rank(records: Iterable[PredictionRecord]) -> List[PredictionRecord]:
    """Sort ascending by badness.

    Finite deviations come first by magnitude, then unbounded ones (a larger
    expected-to-date is worse), then any record without a deviation. Ties
    break on student name, player name, then row id; records without a
    deviation keep their relative input order.
    """

    return sorted(records, key=badness_key)


def top(records: Iterable[PredictionRecord], n: int) -> List[PredictionRecord]:
    if n <= 0:
        return []
    return rank(records)[:n]


def worst(records: Iterable[PredictionRecord]) -> Optional[PredictionRecord]:
    ranked = rank(records)
    return ranked[-1] if ranked else None


def podium(records: Iterable[PredictionRecord], *, places: int = 3) -> List[Tuple[str, PredictionRecord]]:
    """Labelled summary cards: the ``places`` most accurate plus the furthest guess."""

    ranked = [record for record in rank(records) if record.deviation is not None]
    labels = ["1st Place", "2nd Place", "3rd Place"] + [f"{n}th Place" for n in range(4, places + 1)]
    cards = [(labels[index], record) for index, record in enumerate(ranked[:places])]
    if len(ranked) > places:
        cards.append(("Furthest Prediction", ranked[-1]))
    return cards
