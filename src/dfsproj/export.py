"""Serialization helpers for projection output."""

from __future__ import annotations

import csv
import json
from io import StringIO
from typing import Any, Sequence

from dfsproj.models import ProjectionRecord


CSV_HEADERS: tuple[str, ...] = (
    "draftable_uid",
    "provider_id",
    "canonical_id",
    "name",
    "team",
    "opponent",
    "venue",
    "game_date",
    "positions",
    "slot_type",
    "roster_slot_id",
    "salary",
    "projected_points",
    "std_points",
    "cumulative_points",
    "season_avg_points",
    "player_odds_factor",
    "team_projected_points",
    "opponent_projected_points",
    "histogram",
    "starting_lineup",
    "injury_status",
)


def projections_payload(records: Sequence[ProjectionRecord]) -> dict[str, list[dict[str, Any]]]:
    """Wrap records in the ``{"data": [...]}`` envelope clients expect."""

    return {"data": [record.model_dump() for record in records]}


def dump_projections_json(records: Sequence[ProjectionRecord], *, indent: int | None = 2) -> str:
    return json.dumps(projections_payload(records), indent=indent)


def _csv_value(record: ProjectionRecord, column: str) -> Any:
    value = getattr(record, column)
    if column == "positions":
        return "/".join(value)
    if column == "histogram":
        return "|".join(str(count) for count in value)
    if isinstance(value, float):
        return f"{value:.4f}"
    return value


def export_projections_to_csv(records: Sequence[ProjectionRecord]) -> str:
    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_HEADERS)
    for record in records:
        writer.writerow([_csv_value(record, column) for column in CSV_HEADERS])
    return buffer.getvalue()


__all__ = [
    "CSV_HEADERS",
    "dump_projections_json",
    "export_projections_to_csv",
    "projections_payload",
]
