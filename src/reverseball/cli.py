"""Command-line interface for loading players and building position rankings."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from reverseball.api import ranked_list_to_response
from reverseball.config import Settings, iter_rules
from reverseball.enrichment import EnrichmentClient
from reverseball.ingest import load_player_documents
from reverseball.persistence import PlayerStore
from reverseball.pipeline import rank_role


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Qualify, rank and enrich players by position")
    parser.add_argument("--db", type=Path, default=None, help="Player store path (overrides REVERSEBALL_DB_PATH)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable info logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import", help="Load player documents into the store")
    import_parser.add_argument("path", type=Path, help="JSON array, {\"players\": [...]} or JSON Lines file")

    rank_parser = subparsers.add_parser("rank", help="Rank players for a role")
    rank_parser.add_argument("role", help="Rule key, e.g. st, dm_playmaker, gk")
    rank_parser.add_argument("--no-enrichment", action="store_true", help="Skip the predictive provider")
    rank_parser.add_argument("--limit", type=int, default=None, help="Only print the top N players")
    rank_parser.add_argument("--output", type=Path, default=None, help="Write JSON here instead of stdout")

    subparsers.add_parser("roles", help="List configured position rules")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    settings = Settings.from_env()
    db_path = args.db or settings.db_path

    if args.command == "roles":
        for rule in iter_rules():
            codes = ",".join(sorted(rule.role_codes))
            print(f"{rule.key:<22} {rule.label:<24} {codes}")
        return

    if args.command == "serve":
        import uvicorn

        from reverseball.api import create_app

        app = create_app(settings, store=PlayerStore(db_path))
        uvicorn.run(app, host=args.host, port=args.port)
        return

    store = PlayerStore(db_path)

    if args.command == "import":
        try:
            records, report = load_player_documents(args.path)
        except ValueError as exc:
            raise SystemExit(str(exc)) from exc
        saved = store.save_players(records)
        print(f"Loaded {saved}/{report.total} players into {db_path}")
        if report.rejected:
            preview = ", ".join(report.rejected[:5])
            more = len(report.rejected) - 5
            suffix = f", +{more} more" if more > 0 else ""
            print(f"Rejected documents: {preview}{suffix}")
        return

    enrichment = None if args.no_enrichment else EnrichmentClient.from_settings(settings)
    try:
        try:
            ranked = rank_role(store, args.role, enrichment=enrichment)
        except KeyError as exc:
            raise SystemExit(exc.args[0]) from exc
    finally:
        if enrichment is not None:
            enrichment.close()

    payload = ranked_list_to_response(ranked).model_dump()
    if args.limit is not None:
        payload["data"] = payload["data"][: max(0, args.limit)]
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if args.output:
        args.output.write_text(text, encoding="utf-8")
        print(f"Wrote {len(payload['data'])} players to {args.output}")
    else:
        print(text)


if __name__ == "__main__":
    main()
