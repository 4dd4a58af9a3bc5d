from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from hitboard.upstream import StatsApiClient


BASE_URL = "https://statsapi.test/api/v1"


def schedule_payload(dates: list[tuple[str, int]]) -> dict[str, Any]:
    return {
        "totalGames": sum(count for _, count in dates),
        "dates": [
            {
                "date": day,
                "totalGames": count,
                "games": [
                    {
                        "gameDate": f"{day}T20:05:00Z",
                        "teams": {
                            "home": {"team": {"name": "San Francisco Giants"}},
                            "away": {"team": {"name": "Los Angeles Dodgers"}},
                        },
                        "venue": {"name": "Oracle Park"},
                    }
                ]
                * count,
            }
            for day, count in dates
        ],
    }


class FakeStatsApi:
    """In-memory stand-in for the handful of Stats API routes the app calls."""

    def __init__(self) -> None:
        self.players: dict[str, int] = {
            "Aaron Judge": 592450,
            "Shohei Ohtani": 660271,
            "Matt Chapman": 656305,
            "Heliot Ramos": 671218,
        }
        self.hits: dict[int, Any] = {592450: 40, 660271: 0, 656305: 25}
        self.failing_people: set[int] = set()
        self.player_list_status = 200
        self.schedule: dict[str, Any] | None = schedule_payload(
            [("2025-03-27", 1), ("2025-03-28", 1), ("2025-04-01", 2), ("2025-05-30", 1)]
        )
        self.schedule_status = 200
        self.game_logs: dict[int, list[tuple[str, int]]] = {
            592450: [("2025-03-27", 2), ("2025-03-28", 1)],
        }
        self.rosters: dict[int, list[int]] = {137: [656305, 671218, 592450]}
        self.requests: list[httpx.Request] = []

    def _person(self, player_id: int) -> dict[str, Any]:
        name = next((full for full, pid in self.players.items() if pid == player_id), str(player_id))
        hits = self.hits.get(player_id)
        stats: list[dict[str, Any]] = []
        if hits is not None:
            stats = [
                {
                    "splits": [
                        {
                            "stat": {
                                "hits": hits,
                                "gamesPlayed": 30,
                                "atBats": 110,
                                "avg": ".300",
                            }
                        }
                    ]
                }
            ]
        return {
            "people": [
                {
                    "id": player_id,
                    "fullName": name,
                    "primaryPosition": {"abbreviation": "OF"},
                    "stats": stats,
                }
            ]
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api/v1")
        parts = [part for part in path.split("/") if part]

        if parts[:1] == ["sports"] and parts[-1] == "players":
            if self.player_list_status != 200:
                return httpx.Response(self.player_list_status, text="unavailable")
            people = [{"id": pid, "fullName": name} for name, pid in self.players.items()]
            return httpx.Response(200, json={"people": people})

        if parts[:1] == ["schedule"]:
            if self.schedule_status != 200 or self.schedule is None:
                return httpx.Response(self.schedule_status or 500, text="schedule down")
            return httpx.Response(200, json=self.schedule)

        if parts[:1] == ["teams"] and parts[-1] == "roster":
            team_id = int(parts[1])
            roster = [{"person": {"id": pid}} for pid in self.rosters.get(team_id, [])]
            return httpx.Response(200, json={"roster": roster})

        if parts[:1] == ["people"] and len(parts) == 3 and parts[2] == "stats":
            player_id = int(parts[1])
            if player_id in self.failing_people:
                return httpx.Response(503, text="busy")
            splits = [
                {"date": day, "stat": {"hits": hits}}
                for day, hits in self.game_logs.get(player_id, [])
            ]
            return httpx.Response(200, json={"stats": [{"splits": splits}]})

        if parts[:1] == ["people"] and len(parts) == 2:
            player_id = int(parts[1])
            if player_id in self.failing_people:
                return httpx.Response(503, text="busy")
            return httpx.Response(200, json=self._person(player_id))

        return httpx.Response(404, json={"error": f"no route for {path}"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def paths(self, predicate: Callable[[str], bool] | None = None) -> list[str]:
        paths = [request.url.path for request in self.requests]
        return [path for path in paths if predicate is None or predicate(path)]


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fake_api() -> FakeStatsApi:
    return FakeStatsApi()


@pytest.fixture
async def stats_client(fake_api: FakeStatsApi):
    async with StatsApiClient(BASE_URL, transport=fake_api.transport) as client:
        yield client
