"""Season progress as of a given instant.

Games completed against the team schedule is the authoritative measure. When
the schedule cannot be fetched or parsed, elapsed calendar time over the
configured season length stands in for it.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from typing import Any, Mapping, Optional, Tuple

from hitboard.config import SeasonConfig
from hitboard.errors import HitboardError, MalformedDataError
from hitboard.models import NextGame, SeasonProgress
from hitboard.upstream import StatsApiClient


logger = logging.getLogger(__name__)

_SECONDS_PER_DAY = 86_400.0


def _aware(now: datetime) -> datetime:
    return now if now.tzinfo is not None else now.replace(tzinfo=timezone.utc)


def _clamp_fraction(value: float) -> float:
    return max(0.0, min(1.0, value))


def calendar_fraction(config: SeasonConfig, now: datetime) -> float:
    start = datetime.combine(config.start_date, time.min, tzinfo=timezone.utc)
    elapsed_days = (_aware(now) - start).total_seconds() / _SECONDS_PER_DAY
    elapsed_days = max(0.0, min(float(config.length_days), elapsed_days))
    return elapsed_days / config.length_days


def calendar_progress(config: SeasonConfig, now: datetime) -> SeasonProgress:
    return SeasonProgress(
        fraction=_clamp_fraction(calendar_fraction(config, now)),
        source="calendar",
        as_of=_aware(now),
    )


def _parse_date(raw: Any) -> date:
    if not isinstance(raw, str):
        raise MalformedDataError(f"schedule date {raw!r} is not a string")
    try:
        return date.fromisoformat(raw[:10])
    except ValueError as exc:
        raise MalformedDataError(f"schedule date {raw!r} is not ISO formatted") from exc


def _parse_game_time(raw: Any) -> Optional[datetime]:
    if not isinstance(raw, str) or not raw:
        return None
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None


def _team_name(game: Mapping[str, Any], side: str) -> str:
    team = ((game.get("teams") or {}).get(side) or {}).get("team") or {}
    return team.get("name") or "TBD"


def _next_game(entry_date: date, entry: Mapping[str, Any]) -> Optional[NextGame]:
    games = entry.get("games") or []
    if not games:
        return None
    game = games[0]
    return NextGame(
        date=entry_date,
        home_team=_team_name(game, "home"),
        away_team=_team_name(game, "away"),
        game_time=_parse_game_time(game.get("gameDate")),
        venue=(game.get("venue") or {}).get("name") or "TBD",
    )


def _as_count(raw: Any, label: str) -> int:
    if raw is None:
        return 0
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise MalformedDataError(f"{label} {raw!r} is not numeric")
    return max(0, int(raw))


def games_progress(
    payload: Mapping[str, Any], now: datetime
) -> Tuple[int, int, Optional[NextGame]]:
    """Return ``(completed, total, next_game)`` from a schedule payload.

    A date's games count as completed once that calendar date is strictly
    before ``now``'s date. The next game is the first game on the earliest
    date that is not yet completed.
    """

    total = _as_count(payload.get("totalGames"), "totalGames")
    dates = payload.get("dates") or []
    if not isinstance(dates, list):
        raise MalformedDataError("schedule dates is not a list")

    today = _aware(now).date()
    parsed = sorted(
        ((_parse_date(entry.get("date")), entry) for entry in dates if isinstance(entry, Mapping)),
        key=lambda item: item[0],
    )
    completed = 0
    upcoming: Optional[NextGame] = None
    for entry_date, entry in parsed:
        if entry_date < today:
            completed += _as_count(entry.get("totalGames"), "totalGames")
        elif upcoming is None:
            upcoming = _next_game(entry_date, entry)
    return min(completed, total), total, upcoming


async def compute_season_progress(
    client: StatsApiClient,
    config: SeasonConfig,
    now: datetime,
    *,
    fallback_on_zero_games: bool = True,
) -> SeasonProgress:
    """Fraction of the season's games played as of ``now``.

    Upstream failures never propagate: the calendar estimate is returned
    instead. With ``fallback_on_zero_games`` the calendar estimate also
    replaces a games fraction of exactly zero while the calendar says the
    season is under way; the raw game counts are still reported.
    """

    now = _aware(now)
    calendar = calendar_progress(config, now)
    try:
        payload = await client.schedule(
            start_date=config.start_date,
            end_date=config.schedule_end,
            sport_id=config.sport_id,
            team_id=config.team_id,
        )
        completed, total, upcoming = games_progress(payload, now)
    except HitboardError as exc:
        logger.warning(
            "Schedule unavailable (%s); falling back to calendar progress %.4f",
            exc,
            calendar.fraction,
        )
        return calendar

    fraction = completed / total if total > 0 else 0.0
    if fraction == 0.0 and calendar.fraction > 0.0 and fallback_on_zero_games:
        logger.info(
            "Games-based progress is 0 of %d; using calendar progress %.4f",
            total,
            calendar.fraction,
        )
        return calendar.model_copy(
            update={"games_completed": completed, "total_games": total, "next_game": upcoming}
        )

    return SeasonProgress(
        fraction=_clamp_fraction(fraction),
        source="games",
        as_of=now,
        games_completed=completed,
        total_games=total,
        next_game=upcoming,
    )
