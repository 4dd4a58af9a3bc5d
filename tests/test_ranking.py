import random

from hitboard.leaderboard import badness_key, podium, rank, top, worst
from hitboard.models import FiniteDeviation, PredictionRecord, UnboundedDeviation


def _record(seq: int, student: str, deviation, to_date: float = 10.0, actual: int = 5) -> PredictionRecord:
    return PredictionRecord(
        id=seq,
        student=student,
        player=f"Player {seq}",
        predicted_hits=100,
        predicted_hits_to_date=to_date,
        actual_hits=actual,
        deviation=deviation,
    )


def _sample() -> list[PredictionRecord]:
    return [
        _record(1, "Ana", FiniteDeviation(percent=25.0)),
        _record(2, "Ben", UnboundedDeviation(), to_date=30.0, actual=0),
        _record(3, "Cal", FiniteDeviation(percent=3.5)),
        _record(4, "Dee", UnboundedDeviation(), to_date=12.0, actual=0),
        _record(5, "Eve", FiniteDeviation(percent=900.0)),
        _record(6, "Fay", FiniteDeviation(percent=0.0), to_date=0.0, actual=0),
    ]


def test_rank_orders_finite_then_unbounded():
    ranked = rank(_sample())

    assert [record.student for record in ranked] == ["Fay", "Cal", "Ana", "Eve", "Dee", "Ben"]


def test_unbounded_is_worse_than_any_finite_value():
    records = [
        _record(1, "Huge", FiniteDeviation(percent=1e12)),
        _record(2, "Zero", UnboundedDeviation(), to_date=0.1, actual=0),
    ]

    assert [record.student for record in rank(records)] == ["Huge", "Zero"]


def test_larger_expected_unbounded_sorts_later():
    ranked = rank([_record(1, "Big", UnboundedDeviation(), to_date=40.0, actual=0),
                   _record(2, "Small", UnboundedDeviation(), to_date=4.0, actual=0)])

    assert [record.student for record in ranked] == ["Small", "Big"]


def test_missing_deviation_sorts_last_in_input_order():
    records = [
        _record(1, "Nobody", None),
        _record(2, "Ben", UnboundedDeviation(), to_date=30.0, actual=0),
        _record(3, "Anybody", None),
        _record(4, "Ana", FiniteDeviation(percent=25.0)),
    ]

    ranked = rank(records)
    assert [record.student for record in ranked] == ["Ana", "Ben", "Nobody", "Anybody"]


def test_rank_is_independent_of_input_order():
    records = _sample() + [_record(7, "Gus", FiniteDeviation(percent=25.0))]
    expected = [record.id for record in rank(records)]

    rng = random.Random(7)
    for _ in range(10):
        shuffled = list(records)
        rng.shuffle(shuffled)
        assert [record.id for record in rank(shuffled)] == expected


def test_top_and_worst():
    records = _sample()

    assert [record.student for record in top(records, 2)] == ["Fay", "Cal"]
    assert top(records, 0) == []
    assert worst(records).student == "Ben"
    assert worst([]) is None


def test_podium_labels_top_three_and_furthest():
    cards = podium(_sample())

    assert [label for label, _ in cards] == ["1st Place", "2nd Place", "3rd Place", "Furthest Prediction"]
    assert cards[-1][1].student == "Ben"


def test_podium_with_few_records_has_no_furthest_card():
    cards = podium(_sample()[:2])

    assert [label for label, _ in cards] == ["1st Place", "2nd Place"]


def test_badness_key_uses_magnitude():
    assert badness_key(_record(1, "A", FiniteDeviation(percent=5.0)))[:2] == (0, 5.0)


def test_duplicate_rows_order_by_row_id():
    first = _record(9, "Ana", FiniteDeviation(percent=5.0)).model_copy(update={"player": "Aaron Judge"})
    second = _record(4, "Ana", FiniteDeviation(percent=5.0)).model_copy(update={"player": "Aaron Judge"})

    assert [record.id for record in rank([first, second])] == [4, 9]
    assert [record.id for record in rank([second, first])] == [4, 9]
