"""Lightweight REST client for the hitboard API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the hitboard REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--as-of", help="Evaluate as of this date (YYYY-MM-DD)")
    parser.add_argument("--player", help="Resolve a player name and print season hits")
    parser.add_argument("--progress", action="store_true", help="Print season progress and exit")
    parser.add_argument("--top", type=int, help="Print the N most accurate guesses as text")
    parser.add_argument("--export-path", type=Path, help="Download the ranked CSV to this path")
    args = parser.parse_args()

    params = {"asOf": args.as_of} if args.as_of else {}

    with httpx.Client(base_url=args.base_url, timeout=60.0) as client:
        if args.progress:
            resp = client.get("/api/season-progress", params=params)
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
            return

        if args.player:
            resp = client.get("/api/get-player-id", params={"fullname": args.player})
            if resp.status_code == 404:
                raise SystemExit(f"player {args.player!r} not found")
            resp.raise_for_status()
            player_id = resp.json()["id"]
            resp = client.get("/api/get-hits-so-far", params={"playerId": player_id})
            resp.raise_for_status()
            print(f"{args.player} ({player_id}): {resp.json()['hits']} hits")
            return

        if args.top:
            resp = client.get("/api/leaderboard/top-guesses", params={**params, "n": args.top})
            resp.raise_for_status()
            print(resp.text)
            return

        if args.export_path:
            resp = client.get("/api/leaderboard/export.csv", params=params)
            resp.raise_for_status()
            args.export_path.write_text(resp.text, encoding="utf-8")
            print(f"CSV export saved to {args.export_path}")
            return

        resp = client.get("/api/leaderboard", params=params)
        resp.raise_for_status()
        payload = resp.json()
        progress = payload["progress"]
        print(f"Season progress: {progress['fraction'] * 100:.1f}% ({progress['source']})")
        print(f"Received {len(payload['records'])} records")
        if payload["records"]:
            print(json.dumps(payload["records"][0], indent=2))


if __name__ == "__main__":
    main()
