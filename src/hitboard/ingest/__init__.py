"""Input adapters that normalize the predictions roster."""

from .roster import DEFAULT_ROSTER_MAPPING, load_roster, parse_roster

__all__ = [
    "DEFAULT_ROSTER_MAPPING",
    "load_roster",
    "parse_roster",
]
