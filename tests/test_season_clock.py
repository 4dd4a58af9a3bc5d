from datetime import date, datetime, timezone

import pytest

from hitboard.config import get_season_config
from hitboard.errors import MalformedDataError
from hitboard.leaderboard import calendar_progress, compute_season_progress, games_progress
from hitboard.leaderboard.season import calendar_fraction


SEASON = get_season_config(2025)


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_calendar_fraction_thirty_days_in():
    fraction = calendar_fraction(SEASON, _utc(2025, 4, 26))

    assert fraction == pytest.approx(30 / 186)
    assert round(fraction, 4) == 0.1613


def test_calendar_fraction_clamps_outside_the_season():
    assert calendar_fraction(SEASON, _utc(2025, 1, 1)) == 0.0
    assert calendar_fraction(SEASON, _utc(2025, 12, 1)) == 1.0


def test_calendar_progress_treats_naive_times_as_utc():
    progress = calendar_progress(SEASON, datetime(2025, 4, 26))

    assert progress.source == "calendar"
    assert progress.as_of.tzinfo is not None
    assert progress.fraction == pytest.approx(30 / 186)


def test_games_progress_counts_dates_before_today(fake_api):
    completed, total, upcoming = games_progress(fake_api.schedule, _utc(2025, 4, 2))

    assert (completed, total) == (4, 5)
    assert upcoming is not None
    assert upcoming.date == date(2025, 5, 30)
    assert upcoming.home_team == "San Francisco Giants"
    assert upcoming.venue == "Oracle Park"


def test_games_progress_rejects_non_numeric_counts():
    with pytest.raises(MalformedDataError):
        games_progress({"totalGames": "many", "dates": []}, _utc(2025, 4, 2))


@pytest.mark.anyio
async def test_progress_uses_games_when_schedule_available(stats_client, fake_api):
    progress = await compute_season_progress(stats_client, SEASON, _utc(2025, 4, 2))

    assert progress.source == "games"
    assert progress.fraction == pytest.approx(0.8)
    assert progress.games_completed == 4
    assert progress.total_games == 5
    assert progress.next_game is not None

    request = fake_api.requests[-1]
    assert request.url.params["teamId"] == "137"
    assert request.url.params["startDate"] == "2025-03-27"
    assert request.url.params["endDate"] == "2025-05-31"


@pytest.mark.anyio
async def test_progress_falls_back_to_calendar_when_schedule_down(stats_client, fake_api):
    fake_api.schedule_status = 500

    progress = await compute_season_progress(stats_client, SEASON, _utc(2025, 4, 26))

    assert progress.source == "calendar"
    assert progress.fraction == pytest.approx(30 / 186)
    assert progress.total_games is None


@pytest.mark.anyio
async def test_progress_falls_back_on_malformed_schedule(stats_client, fake_api):
    fake_api.schedule = {"totalGames": "lots", "dates": []}

    progress = await compute_season_progress(stats_client, SEASON, _utc(2025, 4, 26))

    assert progress.source == "calendar"


@pytest.mark.anyio
async def test_zero_games_switches_to_calendar_while_season_under_way(stats_client):
    now = _utc(2025, 3, 27, 18)

    progress = await compute_season_progress(stats_client, SEASON, now)

    assert progress.source == "calendar"
    assert progress.fraction == pytest.approx(0.75 / 186)
    assert progress.games_completed == 0
    assert progress.total_games == 5
    assert progress.next_game is not None
    assert progress.next_game.date == date(2025, 3, 27)


@pytest.mark.anyio
async def test_zero_games_kept_when_fallback_disabled(stats_client):
    progress = await compute_season_progress(
        stats_client, SEASON, _utc(2025, 3, 27, 18), fallback_on_zero_games=False
    )

    assert progress.source == "games"
    assert progress.fraction == 0.0


@pytest.mark.anyio
async def test_zero_games_before_opening_day_stays_games_based(stats_client):
    progress = await compute_season_progress(stats_client, SEASON, _utc(2025, 3, 1))

    assert progress.source == "games"
    assert progress.fraction == 0.0
    assert progress.next_game is not None
