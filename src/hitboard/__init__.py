"""Baseball hit-prediction leaderboard."""

__version__ = "0.1.0"
