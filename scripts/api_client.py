"""Lightweight REST client for the reverseball API."""

from __future__ import annotations

import argparse
import json

import httpx


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the reverseball REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("role", nargs="?", help="Rule key to rank, e.g. st or gk")
    parser.add_argument("--player", metavar="NAME", help="Fetch a single player by exact name")
    parser.add_argument("--list-roles", action="store_true", help="List configured roles and exit")
    parser.add_argument("--all", action="store_true", help="List every stored player and exit")
    parser.add_argument("--top", type=int, default=10, help="Number of ranked players to print")
    parser.add_argument("--timeout", type=float, default=120.0, help="Request timeout in seconds")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url, timeout=args.timeout) as client:
        if args.list_roles:
            resp = client.get("/roles")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
            return

        if args.all:
            resp = client.get("/players")
            resp.raise_for_status()
            payload = resp.json()
            print(f"{payload['count']} players stored")
            for entry in payload["data"][: args.top]:
                print(f"{entry['name'] or '':<28} {entry['club'] or '':<24} {entry['positions'] or '-'}")
            return

        if args.player:
            resp = client.get(f"/player/{args.player}")
            if resp.status_code == 404:
                raise SystemExit(f"player {args.player} not found")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2, ensure_ascii=False))
            return

        if not args.role:
            raise SystemExit("role is required unless using --list-roles/--player/--all")

        resp = client.get(f"/players/{args.role}")
        if resp.status_code == 404:
            raise SystemExit(f"role {args.role} not found")
        resp.raise_for_status()
        payload = resp.json()
        print(
            f"{payload['count']} players qualified for {payload['role']} "
            f"(enrichment={payload['enrichment']}, annotated={payload['enriched']})"
        )
        for entry in payload["data"][: args.top]:
            insights = entry.get("insights") or {}
            future = insights.get("future_score")
            future_text = "-" if future is None else f"{future:.1f}"
            print(
                f"{entry['id']:>3}. {entry['name'] or '':<28} {entry['club'] or '':<24} "
                f"score={entry['rank_score']:.2f} future={future_text}"
            )


if __name__ == "__main__":
    main()
