from datetime import datetime, timezone

import pytest

from hitboard.leaderboard import compute_deviation, compute_record, prorate, round1, round2
from hitboard.models import FiniteDeviation, RosterEntry, SeasonProgress, UnboundedDeviation


NOW = datetime(2025, 4, 26, tzinfo=timezone.utc)


def _progress(fraction: float) -> SeasonProgress:
    return SeasonProgress(fraction=fraction, source="games", as_of=NOW)


def _entry(predicted: int | None = 100) -> RosterEntry:
    return RosterEntry(seq=1, student="Ana", player="X", predicted_hits=predicted)


def test_half_way_scenario():
    record = compute_record(_entry(100), 40, _progress(0.5))

    assert record.predicted_hits_to_date == pytest.approx(50.0)
    assert record.deviation == FiniteDeviation(percent=25.0)
    assert record.id == 1
    assert record.status == "ok"


def test_zero_actual_hits_is_unbounded():
    record = compute_record(_entry(100), 0, _progress(0.5))

    assert isinstance(record.deviation, UnboundedDeviation)
    assert record.is_unbounded


def test_zero_prediction_and_zero_hits_is_perfect():
    record = compute_record(_entry(0), 0, _progress(0.5))

    assert record.predicted_hits_to_date == 0.0
    assert record.deviation == FiniteDeviation(percent=0.0)


def test_zero_fraction_gives_zero_to_date():
    record = compute_record(_entry(180), 0, _progress(0.0))

    assert record.predicted_hits_to_date == 0.0
    assert record.deviation == FiniteDeviation(percent=0.0)


def test_malformed_prediction_counts_as_zero():
    record = compute_record(_entry(None), 12, _progress(0.5))

    assert record.predicted_hits == 0
    assert record.deviation == FiniteDeviation(percent=100.0)


@pytest.mark.parametrize("predicted", [0, 1, 7, 99, 162, 250])
@pytest.mark.parametrize("fraction", [0.0, 0.001, 0.1613, 1 / 3, 0.5, 0.999, 1.0])
def test_prorate_stays_within_bounds(predicted: int, fraction: float):
    value = prorate(predicted, fraction)

    assert value == round1(predicted * fraction)
    assert 0.0 <= value <= predicted


def test_rounding_is_half_up():
    assert round1(0.25) == pytest.approx(0.3)
    assert round1(16.129) == pytest.approx(16.1)
    assert round2(33.335) == pytest.approx(33.34)
    assert round2(12.5) == pytest.approx(12.5)


def test_deviation_uses_absolute_difference():
    over = compute_deviation(60.0, 40)
    under = compute_deviation(20.0, 40)

    assert over == FiniteDeviation(percent=50.0)
    assert under == FiniteDeviation(percent=50.0)
    assert compute_deviation(16.1, 15) == FiniteDeviation(percent=7.33)


def test_compute_record_is_deterministic():
    entry = _entry(137)
    progress = _progress(0.4217)

    assert compute_record(entry, 51, progress) == compute_record(entry, 51, progress)
