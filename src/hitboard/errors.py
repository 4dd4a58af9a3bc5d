"""Exceptions raised by the hitboard pipeline."""

from __future__ import annotations


class HitboardError(RuntimeError):
    """Base class for recoverable pipeline failures."""


class TransportError(HitboardError):
    """Upstream unreachable or answered with a non-success status."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotFoundError(HitboardError):
    """A player name has no match in the upstream directory."""

    def __init__(self, name: str, season: int | None = None):
        suffix = f" for season {season}" if season is not None else ""
        super().__init__(f"Player with name '{name}' not found{suffix}")
        self.name = name
        self.season = season


class MalformedDataError(HitboardError):
    """A successful upstream response did not have the expected shape."""


class RosterFormatError(HitboardError):
    """The predictions roster could not be read or lacks required columns."""
