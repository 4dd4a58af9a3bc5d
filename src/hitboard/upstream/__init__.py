"""Upstream statistics feed adapters."""

from .client import DEFAULT_BASE_URL, StatsApiClient

__all__ = ["DEFAULT_BASE_URL", "StatsApiClient"]
