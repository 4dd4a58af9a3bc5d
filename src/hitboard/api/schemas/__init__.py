"""Pydantic models for API I/O."""

from .leaderboard import HighlightResponse, LeaderboardResponse, SummaryCard, SummaryResponse
from .players import HitsResponse, PlayerIdResponse, TeamHittersResponse

__all__ = [
    "HighlightResponse",
    "HitsResponse",
    "LeaderboardResponse",
    "PlayerIdResponse",
    "SummaryCard",
    "SummaryResponse",
    "TeamHittersResponse",
]
