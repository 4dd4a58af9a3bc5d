from datetime import datetime, timezone

import pytest
from pydantic import TypeAdapter, ValidationError

from hitboard.models import (
    Deviation,
    FiniteDeviation,
    PredictionRecord,
    RosterEntry,
    SeasonProgress,
    UnboundedDeviation,
)


def _record(**overrides) -> PredictionRecord:
    data = dict(
        id=1,
        student="Ana Torres",
        player="Aaron Judge",
        predicted_hits=100,
        predicted_hits_to_date=50.0,
        actual_hits=40,
        deviation=FiniteDeviation(percent=25.0),
    )
    data.update(overrides)
    return PredictionRecord(**data)


def test_prediction_record_is_frozen():
    record = _record()

    with pytest.raises((TypeError, ValidationError)):
        record.actual_hits = 3  # type: ignore[misc]


def test_unbounded_deviation_serializes_as_tag_not_number():
    record = _record(actual_hits=0, deviation=UnboundedDeviation())

    payload = record.model_dump(mode="json")
    assert payload["deviation"] == {"kind": "unbounded"}
    assert record.is_unbounded


def test_deviation_union_discriminates_on_kind():
    adapter = TypeAdapter(Deviation)

    assert isinstance(adapter.validate_python({"kind": "unbounded"}), UnboundedDeviation)
    finite = adapter.validate_python({"kind": "finite", "percent": 12.5})
    assert isinstance(finite, FiniteDeviation)
    assert finite.percent == pytest.approx(12.5)
    with pytest.raises(ValidationError):
        adapter.validate_python({"kind": "finite", "percent": -1})


def test_record_rejects_negative_actual_hits():
    with pytest.raises(ValidationError):
        _record(actual_hits=-1)


def test_roster_entry_malformed_hits_count_as_zero():
    entry = RosterEntry(seq=1, student="Ana", player="X", predicted_hits=None, raw_predicted_hits="lots")
    assert entry.predicted_hits_value == 0


def test_season_progress_fraction_bounds():
    now = datetime(2025, 4, 26, tzinfo=timezone.utc)
    with pytest.raises(ValidationError):
        SeasonProgress(fraction=1.2, source="games", as_of=now)
    with pytest.raises(ValidationError):
        SeasonProgress(fraction=0.5, source="games", as_of=now, games_completed=5, total_games=4)


def test_first_name_from_student():
    assert _record(student="Ana Maria Torres").first_name == "Ana"
