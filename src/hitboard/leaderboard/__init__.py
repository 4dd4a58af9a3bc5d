"""Prediction-accuracy pipeline: season clock, scoring, ranking."""

from .accuracy import compute_deviation, compute_record, prorate, round1, round2
from .export import (
    cumulative_hits,
    format_delta,
    records_to_csv,
    top_guesses_html,
    top_guesses_text,
)
from .players import (
    PlayerDirectory,
    extract_hits,
    fetch_actual_hits,
    load_player_directory,
    resolve_player_id,
)
from .ranking import badness_key, podium, rank, top, worst
from .season import calendar_progress, compute_season_progress, games_progress
from .service import (
    Highlight,
    LeaderboardSnapshot,
    build_leaderboard,
    fetch_game_log,
    fetch_highlights,
    fetch_team_hitters,
    hits_end_date,
    load_leaderboard,
)

__all__ = [
    "Highlight",
    "LeaderboardSnapshot",
    "PlayerDirectory",
    "badness_key",
    "build_leaderboard",
    "calendar_progress",
    "compute_deviation",
    "compute_record",
    "compute_season_progress",
    "cumulative_hits",
    "extract_hits",
    "fetch_actual_hits",
    "fetch_game_log",
    "fetch_highlights",
    "fetch_team_hitters",
    "format_delta",
    "games_progress",
    "hits_end_date",
    "load_leaderboard",
    "load_player_directory",
    "podium",
    "prorate",
    "rank",
    "records_to_csv",
    "resolve_player_id",
    "round1",
    "round2",
    "top",
    "top_guesses_html",
    "top_guesses_text",
    "worst",
]
