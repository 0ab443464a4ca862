"""Command-line interface for building projections from stored feeds."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path

from dfsproj.config import Settings, load_settings
from dfsproj.config_loader import FeedProfile
from dfsproj.errors import FeedUnavailableError, MalformedTimestampError
from dfsproj.export import dump_projections_json, export_projections_to_csv
from dfsproj.persistence import FeedStore
from dfsproj.pipeline import build_projections


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build DFS final projections from stored feeds")
    parser.add_argument("--feed-root", type=Path, default=None, help="Feed object root (default $DFSPROJ_FEED_ROOT)")
    parser.add_argument("--db", type=Path, default=None, help="Crosswalk SQLite path (default $DFSPROJ_DB_PATH)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    agg = sub.add_parser("aggregate", help="Aggregate one sport/service slate")
    agg.add_argument("sport", help="Sport key (e.g., NFL, NBA)")
    agg.add_argument("service", help="Service key (dk, fd, yahoo, superdraft)")
    agg.add_argument("--slate", default=None, help="Slate id (defaults to the latest published)")
    agg.add_argument("--date", default=None, help="Reference date or timestamp (defaults to slate start)")
    agg.add_argument("--profile", type=Path, default=None, help="Draftable field mapping profile JSON")
    agg.add_argument("--output", type=Path, default=None, help="Output path (stdout when omitted)")
    agg.add_argument("--format", choices=("json", "csv"), default="json", help="Output format")
    agg.add_argument("--report", type=Path, default=None, help="Optional path to write the aggregation report JSON")

    xwalk = sub.add_parser("import-crosswalk", help="Load crosswalk rows from CSV")
    xwalk.add_argument("csv_path", type=Path, help="CSV with provider_id,sport,service,canonical_id columns")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8080)

    return parser.parse_args(argv)


def _aggregate(args: argparse.Namespace, store: FeedStore, settings: Settings) -> int:
    mapping = None
    if args.profile:
        mapping = FeedProfile.load(args.profile).mapping_for(args.service)

    try:
        result = build_projections(
            store,
            args.sport,
            args.service,
            slate=args.slate,
            date=args.date,
            settings=settings,
            mapping=mapping,
        )
    except KeyError as exc:
        raise SystemExit(f"Unsupported sport/service: {exc}") from exc
    except MalformedTimestampError as exc:
        raise SystemExit(str(exc)) from exc
    except FeedUnavailableError as exc:
        raise SystemExit(f"Feed unavailable: {exc}") from exc

    if args.format == "csv":
        text = export_projections_to_csv(result.records)
    else:
        text = dump_projections_json(result.records)
    if args.output:
        args.output.write_text(text, encoding="utf-8")
        print(f"Wrote {len(result.records)} projections to {args.output}")
    else:
        print(text)

    if args.report:
        payload = asdict(result.report)
        payload.update(
            {
                "slate": result.slate,
                "reference_time": result.reference_time.isoformat(),
                "rejected_draftables": result.rejected_draftables,
            }
        )
        args.report.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    settings = load_settings(feed_root=args.feed_root, db_path=args.db)
    store = FeedStore(settings.feed_root, settings.db_path)

    if args.command == "aggregate":
        return _aggregate(args, store, settings)
    if args.command == "import-crosswalk":
        count = store.import_crosswalk_csv(args.csv_path)
        print(f"Imported {count} crosswalk rows into {store.db_path}")
        return 0
    if args.command == "serve":
        import uvicorn

        from dfsproj.api import create_app

        uvicorn.run(create_app(store, settings), host=args.host, port=args.port)
        return 0
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
