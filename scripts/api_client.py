"""Lightweight REST client for the dfsproj API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def build_params(slate: str | None, date: str | None) -> dict[str, str]:
    params: dict[str, str] = {}
    if slate:
        params["slate"] = slate
    if date:
        params["date"] = date
    return params


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the dfsproj REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8080")
    parser.add_argument("sport", help="Sport key, e.g. NFL")
    parser.add_argument("service", help="Service key, e.g. dk")
    parser.add_argument("--slate", default=None, help="Slate id (latest when omitted)")
    parser.add_argument("--date", default=None, help="Reference date or timestamp")
    parser.add_argument("--report-only", action="store_true", help="Fetch aggregation diagnostics only")
    parser.add_argument("--export-path", type=Path, help="Download the CSV export to this path")
    args = parser.parse_args()

    params = build_params(args.slate, args.date)
    base_path = f"/projections/{args.sport}/{args.service}"

    with httpx.Client(base_url=args.base_url, timeout=30.0) as client:
        resp = client.get(f"{base_path}/report", params=params)
        if resp.status_code == 503:
            raise SystemExit(f"feeds unavailable: {resp.json().get('detail')}")
        resp.raise_for_status()
        print("Aggregation report:", json.dumps(resp.json(), indent=2))

        if args.report_only:
            return

        if args.export_path:
            resp = client.get(f"{base_path}/export.csv", params=params)
            resp.raise_for_status()
            args.export_path.write_text(resp.text)
            print(f"CSV export saved to {args.export_path}")
            return

        resp = client.get(base_path, params=params)
        resp.raise_for_status()
        records = resp.json()["data"]
        print(f"Received {len(records)} projections")
        if records:
            print(json.dumps(records[0], indent=2))


if __name__ == "__main__":
    main()
