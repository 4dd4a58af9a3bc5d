"""Resolve roster names to upstream ids and read their hit totals."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional

from hitboard.errors import MalformedDataError, NotFoundError
from hitboard.models import PlayerIdentity
from hitboard.upstream import StatsApiClient


logger = logging.getLogger(__name__)


def _name_key(name: str) -> str:
    return name.strip().lower()


@dataclass(frozen=True)
class PlayerDirectory:
    """Case-insensitive exact-name index over one season's player list."""

    season: int
    by_name: Mapping[str, PlayerIdentity]

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], *, season: int) -> "PlayerDirectory":
        people = payload.get("people")
        if people is None:
            people = []
        if not isinstance(people, list):
            raise MalformedDataError("player list 'people' is not a list")
        by_name: dict[str, PlayerIdentity] = {}
        for person in people:
            if not isinstance(person, Mapping):
                continue
            full_name = person.get("fullName")
            player_id = person.get("id")
            if not isinstance(full_name, str) or not isinstance(player_id, int):
                continue
            # First listing wins, matching a linear scan of the upstream order.
            by_name.setdefault(
                _name_key(full_name),
                PlayerIdentity(player_id=player_id, full_name=full_name),
            )
        return cls(season=season, by_name=by_name)

    def __len__(self) -> int:
        return len(self.by_name)

    def lookup(self, full_name: str) -> PlayerIdentity:
        identity = self.by_name.get(_name_key(full_name))
        if identity is None:
            raise NotFoundError(full_name, self.season)
        return identity


async def load_player_directory(client: StatsApiClient, season: int, *, sport_id: int = 1) -> PlayerDirectory:
    payload = await client.list_players(season, sport_id=sport_id)
    directory = PlayerDirectory.from_payload(payload, season=season)
    logger.debug("Loaded %d players for season %s", len(directory), season)
    return directory


async def resolve_player_id(client: StatsApiClient, full_name: str, *, season: int) -> int:
    """Map a display name to a person id.

    Raises :class:`NotFoundError` when the name is absent and
    :class:`TransportError` when the player list cannot be fetched.
    """

    directory = await load_player_directory(client, season)
    return directory.lookup(full_name).player_id


def _dig(payload: Any, *path: Any) -> Any:
    node = payload
    for key in path:
        if isinstance(key, int):
            if not isinstance(node, list) or len(node) <= key:
                return None
        elif not isinstance(node, Mapping):
            return None
        node = node[key] if isinstance(key, int) else node.get(key)
        if node is None:
            return None
    return node


def extract_hits(payload: Mapping[str, Any]) -> int:
    """Read ``people[0].stats[0].splits[0].stat.hits``; absent levels mean 0."""

    raw = _dig(payload, "people", 0, "stats", 0, "splits", 0, "stat", "hits")
    if raw is None:
        return 0
    if isinstance(raw, bool):
        raise MalformedDataError(f"hits value {raw!r} is not numeric")
    if isinstance(raw, (int, float)):
        return max(0, int(raw))
    if isinstance(raw, str):
        try:
            return max(0, int(raw))
        except ValueError:
            raise MalformedDataError(f"hits value {raw!r} is not numeric") from None
    raise MalformedDataError(f"hits value {raw!r} is not numeric")


async def fetch_actual_hits(
    client: StatsApiClient,
    player_id: int,
    *,
    season: int,
    end_date: Optional[date] = None,
    start_date: Optional[date] = None,
) -> int:
    """Hits for a season, or from ``start_date`` through ``end_date`` inclusive."""

    if end_date is not None and start_date is None:
        raise ValueError("start_date is required when end_date is given")
    payload = await client.person_hitting(
        player_id,
        season=season,
        start_date=start_date,
        end_date=end_date,
    )
    return extract_hits(payload)
