"""Command-line interface for building the leaderboard and serving the API."""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from datetime import date, datetime, time, timezone
from functools import partial
from pathlib import Path

import anyio
import uvicorn

from hitboard.api import create_app
from hitboard.config_loader import Settings
from hitboard.errors import RosterFormatError
from hitboard.leaderboard import LeaderboardSnapshot, format_delta, load_leaderboard, records_to_csv
from hitboard.upstream import StatsApiClient


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Baseball hit-prediction leaderboard")
    parser.add_argument("--settings", type=Path, default=None, help="Load settings JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    board = subparsers.add_parser("leaderboard", help="Print the ranked leaderboard")
    board.add_argument("roster", type=Path, nargs="?", default=None, help="Predictions CSV")
    board.add_argument("--season", type=int, default=None, help="Season year (e.g., 2025)")
    board.add_argument("--team", type=int, default=None, help="Team id whose schedule drives progress")
    board.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=None,
        help="Compute the leaderboard as of this date (YYYY-MM-DD); defaults to now",
    )
    board.add_argument("--top", type=int, default=None, help="Only print the N most accurate rows")
    board.add_argument("--output", type=Path, default=None, help="Also write the ranked CSV here")
    board.add_argument(
        "--no-zero-games-fallback",
        action="store_true",
        help="Keep a games-based progress of 0 instead of switching to the calendar estimate",
    )

    serve = subparsers.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    return parser.parse_args(argv)


def _load_settings(args: argparse.Namespace) -> Settings:
    base = Settings.load(args.settings) if args.settings else None
    return Settings.from_env(base)


def _print_snapshot(snapshot: LeaderboardSnapshot, top: int | None) -> None:
    progress = snapshot.progress
    if progress.total_games is not None:
        print(
            f"Season progress: {progress.percent:.1f}% ({progress.source}; "
            f"{progress.games_completed}/{progress.total_games} games)"
        )
    else:
        print(f"Season progress: {progress.percent:.1f}% ({progress.source})")

    records = snapshot.records if top is None else snapshot.records[: max(0, top)]
    header = f"{'#':>3}  {'Student':<20} {'Player':<24} {'Pred':>5} {'ToDate':>7} {'Actual':>6} {'Delta':>9}"
    print(header)
    print("-" * len(header))
    for position, record in enumerate(records, start=1):
        print(
            f"{position:>3}  {record.student[:20]:<20} {record.player[:24]:<24} "
            f"{record.predicted_hits:>5} {record.predicted_hits_to_date:>7.1f} "
            f"{record.actual_hits:>6} {format_delta(record):>9}"
        )

    problems = {status: count for status, count in snapshot.diagnostics.items() if status != "ok"}
    if problems:
        summary = ", ".join(f"{status}={count}" for status, count in sorted(problems.items()))
        print(f"Rows defaulted to 0 hits: {summary}")


async def _build(settings: Settings, now: datetime) -> LeaderboardSnapshot:
    async with StatsApiClient(settings.stats_api_url, timeout=settings.request_timeout) as client:
        return await load_leaderboard(client, settings, now)


def _run_leaderboard(args: argparse.Namespace, settings: Settings) -> int:
    settings = replace(
        settings,
        roster_path=args.roster or settings.roster_path,
        season=args.season or settings.season,
        team_id=args.team if args.team is not None else settings.team_id,
        fallback_on_zero_games=settings.fallback_on_zero_games and not args.no_zero_games_fallback,
    )
    if args.as_of is not None:
        now = datetime.combine(args.as_of, time.min, tzinfo=timezone.utc)
    else:
        now = datetime.now(timezone.utc)

    try:
        snapshot = anyio.run(partial(_build, settings, now))
    except RosterFormatError as exc:
        print(f"Failed to load predictions: {exc}")
        return 1
    except KeyError as exc:
        print(f"Unsupported season: {exc.args[0]}")
        return 2

    _print_snapshot(snapshot, args.top)
    if args.output:
        args.output.write_text(records_to_csv(snapshot.records), encoding="utf-8")
        print(f"Wrote leaderboard CSV to {args.output}")
    return 0


def _run_serve(args: argparse.Namespace, settings: Settings) -> int:
    uvicorn.run(create_app(settings), host=args.host, port=args.port)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = _load_settings(args)
    if args.command == "serve":
        return _run_serve(args, settings)
    return _run_leaderboard(args, settings)


if __name__ == "__main__":
    raise SystemExit(main())
