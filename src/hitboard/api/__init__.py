"""REST API and HTML dashboard for the hit-prediction leaderboard."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import date, datetime, time, timedelta, timezone
from html import escape
from typing import AsyncIterator, Literal, Optional

import httpx
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response

from hitboard.api.schemas import (
    HighlightResponse,
    HitsResponse,
    LeaderboardResponse,
    PlayerIdResponse,
    SummaryCard,
    SummaryResponse,
    TeamHittersResponse,
)
from hitboard.config import SeasonConfig, get_season_config
from hitboard.config_loader import Settings
from hitboard.errors import MalformedDataError, NotFoundError, RosterFormatError, TransportError
from hitboard.leaderboard import (
    LeaderboardSnapshot,
    compute_season_progress,
    cumulative_hits,
    fetch_actual_hits,
    fetch_team_hitters,
    format_delta,
    load_leaderboard,
    podium,
    records_to_csv,
    resolve_player_id,
    top_guesses_html,
    top_guesses_text,
)
from hitboard.models import PredictionRecord, SeasonProgress
from hitboard.upstream import StatsApiClient


logger = logging.getLogger(__name__)


def _resolve_now(as_of: Optional[date]) -> datetime:
    if as_of is None:
        return datetime.now(timezone.utc)
    return datetime.combine(as_of, time.min, tzinfo=timezone.utc)


def _season_config_for(settings: Settings, season: Optional[int]) -> SeasonConfig:
    try:
        if season is None or season == settings.season:
            return settings.season_config()
        return get_season_config(season).with_overrides(team_id=settings.team_id)
    except KeyError as exc:
        raise HTTPException(status_code=400, detail=str(exc.args[0])) from exc


def _upstream_error(exc: TransportError) -> HTTPException:
    status = exc.status_code if exc.status_code and exc.status_code >= 400 else 502
    return HTTPException(status_code=status, detail=exc.message)


def _render_page(body: str, *, title: str = "Hit Predictions") -> str:
    return f"""<!DOCTYPE html>
<html lang=\"en\">
<head>
    <meta charset=\"utf-8\">
    <title>{escape(title)}</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 2rem; background: #f5f7fa; }}
        main {{ background: #fff; padding: 2rem; border-radius: 12px; box-shadow: 0 2px 6px rgba(0,0,0,0.08); }}
        nav a {{ margin-right: 1rem; color: #2563eb; text-decoration: none; }}
        table {{ border-collapse: collapse; width: 100%; margin-top: 1rem; }}
        th, td {{ padding: 0.5rem; border: 1px solid #e2e8f0; text-align: left; }}
        td.num {{ text-align: right; font-variant-numeric: tabular-nums; }}
        .cards {{ display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 1rem; }}
        .card {{ border: 1px solid #e2e8f0; border-radius: 8px; padding: 1rem; background: #f8fafc; }}
        .card .label {{ color: #64748b; font-size: 0.85rem; }}
        .card .name {{ font-size: 1.5rem; font-weight: 600; }}
        .progress {{ height: 0.5rem; background: #e2e8f0; border-radius: 4px; overflow: hidden; }}
        .progress span {{ display: block; height: 100%; background: #2563eb; }}
        .hint {{ color: #475569; font-size: 0.85rem; }}
        .flash.error {{ padding: 1rem; border-radius: 6px; background: #fef2f2; color: #b91c1c; }}
    </style>
</head>
<body>
    <nav><a href=\"/ui\">Leaderboard</a><a href=\"/ui/about\">About</a></nav>
    <main>{body}</main>
</body>
</html>"""


def _render_progress(progress: SeasonProgress) -> str:
    percent = progress.percent
    if progress.games_completed is not None and progress.total_games is not None:
        caption = (
            f"{progress.games_completed} of {progress.total_games} games completed "
            f"({percent:.0f}%)"
        )
    else:
        caption = f"{percent:.0f}% of the season elapsed (calendar estimate)"
    next_game = ""
    if progress.next_game is not None:
        game = progress.next_game
        when = game.date.strftime("%a %b %d")
        if game.game_time is not None:
            when += " at " + game.game_time.strftime("%H:%M UTC")
        next_game = (
            f"<p class=\"hint\">Next game: {escape(game.away_team)} @ {escape(game.home_team)}"
            f" - {escape(when)} ({escape(game.venue)})</p>"
        )
    return (
        f"<div class=\"progress\"><span style=\"width: {percent:.1f}%\"></span></div>"
        f"<p class=\"hint\">{escape(caption)}</p>{next_game}"
    )


def _render_cards(records: list[PredictionRecord]) -> str:
    cards = []
    for label, record in podium(records):
        cards.append(
            "<div class=\"card\">"
            f"<div class=\"label\">{escape(label)}</div>"
            f"<div class=\"name\">{escape(record.first_name)}</div>"
            f"<div>&plusmn;{escape(format_delta(record))}</div>"
            f"<div class=\"hint\">Guessed {record.predicted_hits} hits &rarr; "
            f"{record.predicted_hits_to_date:.1f} to date</div>"
            f"<div class=\"hint\">{escape(record.player)} is at {record.actual_hits} hits</div>"
            "</div>"
        )
    return f"<section class=\"cards\">{''.join(cards)}</section>"


def _render_leaderboard_page(snapshot: LeaderboardSnapshot) -> str:
    rows = []
    for position, record in enumerate(snapshot.records, start=1):
        rows.append(
            "<tr>"
            f"<td class=\"num\">{position}</td>"
            f"<td>{escape(record.student)}</td>"
            f"<td>{escape(record.player)}</td>"
            f"<td class=\"num\">{record.predicted_hits}</td>"
            f"<td class=\"num\">{record.predicted_hits_to_date:.1f}</td>"
            f"<td class=\"num\">{record.actual_hits}</td>"
            f"<td class=\"num\">{escape(format_delta(record))}</td>"
            "</tr>"
        )
    table = (
        "<table><thead><tr><th>Rank</th><th>Student</th><th>Player</th>"
        "<th>Predicted Hits</th><th>Predicted (To Date)</th><th>Actual Hits</th>"
        "<th>Prediction Delta</th></tr></thead>"
        f"<tbody>{''.join(rows)}</tbody></table>"
    )
    return _render_page(
        "<h1>Hit Prediction Leaderboard</h1>"
        + _render_progress(snapshot.progress)
        + _render_cards(snapshot.records)
        + table
        + "<p class=\"hint\">Predicted hits to date scale each season guess by the share of "
        "games completed so far, not calendar time.</p>"
    )


def _render_about_page() -> str:
    return _render_page(
        "<h1>About</h1>"
        "<p>Each student guessed how many hits one MLB player would collect over the "
        "season. The leaderboard scales every guess by the share of the season played so "
        "far and compares it with the player's actual hits.</p>"
        "<p>The delta is the absolute difference as a percentage of actual hits. A player "
        "with no hits yet against a positive expectation shows &infin; and ranks last.</p>",
        title="About",
    )


def create_app(
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    app = FastAPI(title="hitboard")
    app.state.settings = settings
    app.state.transport = transport

    @asynccontextmanager
    async def stats_client() -> AsyncIterator[StatsApiClient]:
        current: Settings = app.state.settings
        async with StatsApiClient(
            current.stats_api_url,
            timeout=current.request_timeout,
            transport=app.state.transport,
        ) as client:
            yield client

    async def snapshot_or_503(now: datetime) -> LeaderboardSnapshot:
        try:
            async with stats_client() as client:
                return await load_leaderboard(client, app.state.settings, now)
        except RosterFormatError as exc:
            logger.error("Failed to load predictions: %s", exc)
            raise HTTPException(status_code=503, detail="Failed to load predictions data") from exc

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/all-data")
    async def all_data(season: Optional[int] = Query(None)) -> JSONResponse:
        current: Settings = app.state.settings
        try:
            async with stats_client() as client:
                payload = await client.list_players(season or current.season)
        except TransportError as exc:
            raise _upstream_error(exc) from exc
        except MalformedDataError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return JSONResponse(payload)

    @app.get("/api/get-player-id", response_model=PlayerIdResponse)
    async def get_player_id(
        fullname: Optional[str] = Query(None),
        season: Optional[int] = Query(None),
    ) -> PlayerIdResponse:
        if not fullname:
            raise HTTPException(status_code=400, detail="Missing fullname query parameter")
        current: Settings = app.state.settings
        try:
            async with stats_client() as client:
                player_id = await resolve_player_id(client, fullname, season=season or current.season)
        except NotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except TransportError as exc:
            raise _upstream_error(exc) from exc
        except MalformedDataError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return PlayerIdResponse(id=player_id)

    @app.get("/api/get-hits-so-far", response_model=HitsResponse)
    async def get_hits_so_far(
        player_id: Optional[int] = Query(None, alias="playerId"),
        season: Optional[int] = Query(None),
        end_date: Optional[date] = Query(None, alias="endDate"),
    ) -> HitsResponse:
        if player_id is None:
            raise HTTPException(status_code=400, detail="Missing playerId query parameter")
        current: Settings = app.state.settings
        resolved_season = season or current.season
        start_date = None
        if end_date is not None:
            start_date = _season_config_for(current, resolved_season).start_date
        try:
            async with stats_client() as client:
                hits = await fetch_actual_hits(
                    client,
                    player_id,
                    season=resolved_season,
                    start_date=start_date,
                    end_date=end_date,
                )
        except TransportError as exc:
            raise _upstream_error(exc) from exc
        except MalformedDataError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return HitsResponse(hits=hits)

    @app.get("/api/team-hitters", response_model=TeamHittersResponse)
    async def team_hitters(
        team_id: Optional[int] = Query(None, alias="teamId"),
        season: Optional[int] = Query(None),
        limit: int = Query(5, ge=1, le=50),
        as_of: Optional[date] = Query(None, alias="asOf"),
        days: Optional[int] = Query(None, ge=1, le=366),
    ) -> TeamHittersResponse:
        current: Settings = app.state.settings
        season_config = _season_config_for(current, season)
        end_date = _resolve_now(as_of).date()
        try:
            async with stats_client() as client:
                hitters = await fetch_team_hitters(
                    client,
                    season_config,
                    team_id=team_id,
                    limit=limit,
                    end_date=end_date,
                    max_concurrency=current.max_concurrency,
                )
        except TransportError as exc:
            raise _upstream_error(exc) from exc
        except MalformedDataError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return TeamHittersResponse(
            team_id=team_id if team_id is not None else season_config.team_id,
            season=season_config.season,
            top_hitters=hitters,
            cumulative_hits=cumulative_hits(
                hitters, since=end_date - timedelta(days=days) if days else None
            ),
        )

    @app.get("/api/season-progress", response_model=SeasonProgress)
    async def season_progress(as_of: Optional[date] = Query(None, alias="asOf")) -> SeasonProgress:
        current: Settings = app.state.settings
        async with stats_client() as client:
            return await compute_season_progress(
                client,
                current.season_config(),
                _resolve_now(as_of),
                fallback_on_zero_games=current.fallback_on_zero_games,
            )

    @app.get("/api/leaderboard", response_model=LeaderboardResponse)
    async def leaderboard(as_of: Optional[date] = Query(None, alias="asOf")) -> LeaderboardResponse:
        snapshot = await snapshot_or_503(_resolve_now(as_of))
        return LeaderboardResponse(
            progress=snapshot.progress,
            records=snapshot.records,
            highlights=[
                HighlightResponse(record=item.record, hits_by_date=item.hits_by_date)
                for item in snapshot.highlights
            ],
            diagnostics=snapshot.diagnostics,
        )

    @app.get("/api/leaderboard/summary", response_model=SummaryResponse)
    async def leaderboard_summary(as_of: Optional[date] = Query(None, alias="asOf")) -> SummaryResponse:
        snapshot = await snapshot_or_503(_resolve_now(as_of))
        cards = [
            SummaryCard(
                label=label,
                first_name=record.first_name,
                delta=format_delta(record),
                record=record,
            )
            for label, record in podium(snapshot.records)
        ]
        return SummaryResponse(progress=snapshot.progress, cards=cards)

    @app.get("/api/leaderboard/top-guesses")
    async def leaderboard_top_guesses(
        n: int = Query(5, ge=1, le=100),
        fmt: Literal["text", "html"] = Query("text", alias="format"),
        as_of: Optional[date] = Query(None, alias="asOf"),
    ) -> Response:
        snapshot = await snapshot_or_503(_resolve_now(as_of))
        if fmt == "html":
            return HTMLResponse(top_guesses_html(snapshot.records, n))
        return PlainTextResponse(top_guesses_text(snapshot.records, n))

    @app.get("/api/leaderboard/export.csv")
    async def leaderboard_export(as_of: Optional[date] = Query(None, alias="asOf")) -> Response:
        snapshot = await snapshot_or_503(_resolve_now(as_of))
        return Response(
            content=records_to_csv(snapshot.records),
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=leaderboard.csv"},
        )

    @app.get("/ui", response_class=HTMLResponse)
    async def ui_index(as_of: Optional[date] = Query(None, alias="asOf")):
        try:
            snapshot = await snapshot_or_503(_resolve_now(as_of))
        except HTTPException as exc:
            body = f"<div class=\"flash error\">{escape(str(exc.detail))}</div>"
            return HTMLResponse(_render_page(body), status_code=exc.status_code)
        return HTMLResponse(_render_leaderboard_page(snapshot))

    @app.get("/ui/about", response_class=HTMLResponse)
    async def ui_about() -> HTMLResponse:
        return HTMLResponse(_render_about_page())

    return app
