"""Leaderboard pipeline: fan out per roster row, join, rank."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence

import anyio

from hitboard.config import SeasonConfig
from hitboard.config_loader import Settings
from hitboard.errors import HitboardError, MalformedDataError, NotFoundError, TransportError
from hitboard.ingest import load_roster
from hitboard.models import (
    GameHits,
    Hitter,
    PredictionRecord,
    RecordStatus,
    RosterEntry,
    SeasonProgress,
)
from hitboard.upstream import StatsApiClient

from .accuracy import compute_record
from .players import PlayerDirectory, extract_hits, fetch_actual_hits, load_player_directory
from .ranking import rank
from .season import compute_season_progress


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Highlight:
    """A top-ranked record with its per-game hit log."""

    record: PredictionRecord
    hits_by_date: List[GameHits] = field(default_factory=list)


@dataclass(frozen=True)
class LeaderboardSnapshot:
    progress: SeasonProgress
    records: List[PredictionRecord]
    highlights: List[Highlight] = field(default_factory=list)

    @property
    def diagnostics(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for record in self.records:
            counts[record.status] = counts.get(record.status, 0) + 1
        return counts


def _status_for(exc: HitboardError) -> RecordStatus:
    if isinstance(exc, NotFoundError):
        return "not_found"
    if isinstance(exc, MalformedDataError):
        return "malformed_data"
    return "upstream_error"


async def _score_entry(
    client: StatsApiClient,
    entry: RosterEntry,
    directory: Optional[PlayerDirectory],
    directory_error: Optional[HitboardError],
    progress: SeasonProgress,
    *,
    season_config: SeasonConfig,
    end_date: Optional[date],
) -> PredictionRecord:
    player_id: Optional[int] = None
    try:
        if directory is None:
            raise directory_error or TransportError("player directory unavailable")
        player_id = directory.lookup(entry.player).player_id
        if end_date is not None and end_date < season_config.start_date:
            return compute_record(entry, 0, progress, player_id=player_id)
        actual = await fetch_actual_hits(
            client,
            player_id,
            season=season_config.season,
            start_date=season_config.start_date if end_date else None,
            end_date=end_date,
        )
    except NotFoundError as exc:
        logger.warning("Row %d (%s): %s", entry.seq, entry.student, exc)
        return compute_record(entry, 0, progress, player_id=player_id, status="not_found")
    except HitboardError as exc:
        logger.warning(
            "Row %d (%s): failed to fetch hits for %r: %s",
            entry.seq,
            entry.student,
            entry.player,
            exc,
        )
        return compute_record(entry, 0, progress, player_id=player_id, status=_status_for(exc))
    return compute_record(entry, actual, progress, player_id=player_id)


async def build_leaderboard(
    client: StatsApiClient,
    entries: Sequence[RosterEntry],
    progress: SeasonProgress,
    *,
    season_config: SeasonConfig,
    end_date: Optional[date] = None,
    max_concurrency: int = 16,
) -> List[PredictionRecord]:
    """Score every roster row concurrently and return the ranked records.

    One task per row runs inside a task group capped by a capacity limiter.
    Each task writes only its own slot, and upstream failures degrade that
    row to 0 actual hits instead of failing the load.
    """

    directory: Optional[PlayerDirectory] = None
    directory_error: Optional[HitboardError] = None
    if entries:
        try:
            directory = await load_player_directory(
                client, season_config.season, sport_id=season_config.sport_id
            )
        except HitboardError as exc:
            logger.error("Player directory unavailable: %s", exc)
            directory_error = exc

    results: List[Optional[PredictionRecord]] = [None] * len(entries)
    limiter = anyio.CapacityLimiter(max(1, max_concurrency))

    async def run(index: int, entry: RosterEntry) -> None:
        async with limiter:
            results[index] = await _score_entry(
                client,
                entry,
                directory,
                directory_error,
                progress,
                season_config=season_config,
                end_date=end_date,
            )

    async with anyio.create_task_group() as tg:
        for index, entry in enumerate(entries):
            tg.start_soon(run, index, entry)

    return rank(record for record in results if record is not None)


def _game_log_hits(payload: Mapping[str, Any]) -> List[GameHits]:
    stats = payload.get("stats") or []
    splits = (stats[0] or {}).get("splits") if stats and isinstance(stats[0], Mapping) else None
    games: List[GameHits] = []
    for split in splits or []:
        if not isinstance(split, Mapping) or not split.get("date"):
            continue
        try:
            game_date = date.fromisoformat(str(split["date"])[:10])
        except ValueError:
            continue
        hits = (split.get("stat") or {}).get("hits") or 0
        games.append(GameHits(date=game_date, hits=max(0, int(hits))))
    return games


async def fetch_game_log(client: StatsApiClient, player_id: int, *, season: int) -> List[GameHits]:
    """Per-game hits; an unavailable log is an empty list."""

    try:
        payload = await client.game_log(player_id, season=season)
        return _game_log_hits(payload)
    except (HitboardError, TypeError, ValueError) as exc:
        logger.warning("Game log unavailable for player %s: %s", player_id, exc)
        return []


async def fetch_highlights(
    client: StatsApiClient,
    records: Sequence[PredictionRecord],
    k: int,
    *,
    season: int,
    end_date: Optional[date] = None,
    max_concurrency: int = 16,
) -> List[Highlight]:
    """Fetch game logs for the first ``k`` ranked records that resolved.

    With ``end_date`` the logs stop at that day.
    """

    chosen = [record for record in records if record.player_id is not None][: max(0, k)]
    logs: List[List[GameHits]] = [[] for _ in chosen]
    limiter = anyio.CapacityLimiter(max(1, max_concurrency))

    async def run(index: int, record: PredictionRecord) -> None:
        async with limiter:
            games = await fetch_game_log(client, record.player_id, season=season)
            if end_date is not None:
                games = [game for game in games if game.date <= end_date]
            logs[index] = games

    async with anyio.create_task_group() as tg:
        for index, record in enumerate(chosen):
            tg.start_soon(run, index, record)

    return [Highlight(record=record, hits_by_date=log) for record, log in zip(chosen, logs)]


def hits_end_date(now: datetime) -> Optional[date]:
    """Last day of hits to count for a board as of ``now``; ``None`` means live totals."""

    as_of = now if now.tzinfo is not None else now.replace(tzinfo=timezone.utc)
    as_of = as_of.astimezone(timezone.utc)
    if as_of.date() >= datetime.now(timezone.utc).date():
        return None
    return as_of.date() - timedelta(days=1)


async def load_leaderboard(
    client: StatsApiClient,
    settings: Settings,
    now: datetime,
    *,
    entries: Optional[Sequence[RosterEntry]] = None,
) -> LeaderboardSnapshot:
    """Recompute the full leaderboard from the roster and the live feed.

    A past ``now`` yields a point-in-time board: hits are summed from opening
    day through the day before ``now``, matching the games counted as
    completed. Raises :class:`RosterFormatError` only when the roster itself
    cannot be read; every upstream problem degrades to defaults.
    """

    season_config = settings.season_config()
    end_date = hits_end_date(now)
    if entries is None:
        entries = load_roster(settings.roster_path)
    progress = await compute_season_progress(
        client,
        season_config,
        now,
        fallback_on_zero_games=settings.fallback_on_zero_games,
    )
    records = await build_leaderboard(
        client,
        entries,
        progress,
        season_config=season_config,
        end_date=end_date,
        max_concurrency=settings.max_concurrency,
    )
    highlights = await fetch_highlights(
        client,
        records,
        settings.highlight_count,
        season=season_config.season,
        end_date=end_date,
        max_concurrency=settings.max_concurrency,
    )
    logger.info(
        "Leaderboard built: %d records, progress %.4f (%s)",
        len(records),
        progress.fraction,
        progress.source,
    )
    return LeaderboardSnapshot(progress=progress, records=records, highlights=highlights)


def _hitter_from_payload(payload: Mapping[str, Any]) -> Optional[Hitter]:
    people = payload.get("people") or []
    if not people or not isinstance(people[0], Mapping):
        return None
    person = people[0]
    stats = person.get("stats") or []
    stat = None
    if stats and isinstance(stats[0], Mapping):
        splits = stats[0].get("splits") or []
        if splits and isinstance(splits[0], Mapping):
            stat = splits[0].get("stat")
    if not isinstance(stat, Mapping) or stat.get("hits") is None:
        return None
    return Hitter(
        player_id=person["id"],
        name=person.get("fullName") or str(person["id"]),
        position=(person.get("primaryPosition") or {}).get("abbreviation") or "N/A",
        hits=extract_hits(payload),
        games=int(stat.get("gamesPlayed") or 0),
        at_bats=int(stat.get("atBats") or 0),
        avg=str(stat.get("avg") or ".000"),
    )


async def fetch_team_hitters(
    client: StatsApiClient,
    season_config: SeasonConfig,
    *,
    team_id: Optional[int] = None,
    limit: int = 5,
    end_date: date,
    max_concurrency: int = 16,
) -> List[Hitter]:
    """Top ``limit`` hitters on a team by hits, each with a game-by-game log.

    Raises :class:`TransportError` if the team roster itself is unavailable;
    individual players whose stats fail or who have no hitting line are
    dropped.
    """

    team = team_id if team_id is not None else season_config.team_id
    roster_payload = await client.team_roster(team, season=season_config.season)
    roster = roster_payload.get("roster")
    if not isinstance(roster, list):
        raise MalformedDataError("team roster payload has no 'roster' list")
    player_ids = [
        member["person"]["id"]
        for member in roster
        if isinstance(member, Mapping) and isinstance(member.get("person"), Mapping)
        and isinstance(member["person"].get("id"), int)
    ]

    hitters: List[Optional[Hitter]] = [None] * len(player_ids)
    limiter = anyio.CapacityLimiter(max(1, max_concurrency))

    async def load_hitter(index: int, player_id: int) -> None:
        async with limiter:
            try:
                payload = await client.person_hitting(
                    player_id,
                    season=season_config.season,
                    start_date=season_config.start_date,
                    end_date=end_date,
                )
                hitters[index] = _hitter_from_payload(payload)
            except (HitboardError, KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping player %s on team %s: %s", player_id, team, exc)

    async with anyio.create_task_group() as tg:
        for index, player_id in enumerate(player_ids):
            tg.start_soon(load_hitter, index, player_id)

    ranked = sorted(
        (hitter for hitter in hitters if hitter is not None),
        key=lambda hitter: -hitter.hits,
    )[: max(0, limit)]

    logs: List[List[GameHits]] = [[] for _ in ranked]

    async def load_log(index: int, hitter: Hitter) -> None:
        async with limiter:
            logs[index] = await fetch_game_log(client, hitter.player_id, season=season_config.season)

    async with anyio.create_task_group() as tg:
        for index, hitter in enumerate(ranked):
            tg.start_soon(load_log, index, hitter)

    return [hitter.model_copy(update={"hits_by_date": log}) for hitter, log in zip(ranked, logs)]
