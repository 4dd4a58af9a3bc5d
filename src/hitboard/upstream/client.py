"""Async client for the public MLB Stats API."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping, Optional

import httpx

from hitboard.errors import MalformedDataError, TransportError


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://statsapi.mlb.com/api/v1"


def _iso(value: date) -> str:
    return value.isoformat()


class StatsApiClient:
    """Thin read-only wrapper over the handful of Stats API queries we use.

    Every method returns decoded JSON. Network failures and non-2xx answers
    raise :class:`TransportError`; bodies that are not JSON objects raise
    :class:`MalformedDataError`.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "StatsApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_json(self, path: str, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        try:
            resp = await self._client.get(path, params=dict(params or {}))
        except httpx.HTTPError as exc:
            raise TransportError(f"Request to {path} failed: {exc}") from exc
        if resp.is_error:
            logger.error(
                "Stats API request %s failed with status %s: %s",
                path,
                resp.status_code,
                resp.text[:200],
            )
            raise TransportError(
                f"Stats API request {path} failed with status {resp.status_code}",
                status_code=resp.status_code,
            )
        try:
            payload = resp.json()
        except ValueError as exc:
            raise MalformedDataError(f"Stats API returned invalid JSON for {path}") from exc
        if not isinstance(payload, dict):
            raise MalformedDataError(f"Stats API returned {type(payload).__name__} for {path}")
        return payload

    async def list_players(self, season: int, *, sport_id: int = 1) -> dict[str, Any]:
        return await self.get_json(f"/sports/{sport_id}/players", {"season": season})

    async def person_hitting(
        self,
        player_id: int,
        *,
        season: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> dict[str, Any]:
        if end_date is not None:
            if start_date is None:
                raise ValueError("start_date is required with end_date")
            hydrate = (
                "stats(group=hitting,type=byDateRange,"
                f"startDate={_iso(start_date)},endDate={_iso(end_date)},season={season})"
            )
        else:
            hydrate = f"stats(group=hitting,type=season,season={season})"
        return await self.get_json(f"/people/{player_id}", {"hydrate": hydrate})

    async def team_roster(self, team_id: int, *, season: int) -> dict[str, Any]:
        return await self.get_json(f"/teams/{team_id}/roster", {"season": season})

    async def game_log(self, player_id: int, *, season: int) -> dict[str, Any]:
        return await self.get_json(
            f"/people/{player_id}/stats",
            {"stats": "gameLog", "group": "hitting", "season": season, "hydrate": "team"},
        )

    async def schedule(
        self,
        *,
        start_date: date,
        end_date: date,
        sport_id: int = 1,
        team_id: Optional[int] = None,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {
            "sportId": sport_id,
            "startDate": _iso(start_date),
            "endDate": _iso(end_date),
            "hydrate": "team",
        }
        if team_id is not None:
            params["teamId"] = team_id
        return await self.get_json("/schedule", params)
