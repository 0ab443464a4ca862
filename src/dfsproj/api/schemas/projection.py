from __future__ import annotations

from typing import List

from pydantic import BaseModel

from dfsproj.models import ProjectionRecord


class ProjectionListResponse(BaseModel):
    data: List[ProjectionRecord]


class SlotDiagnosticResponse(BaseModel):
    provider_id: str
    name: str
    reason: str


class AggregationReportResponse(BaseModel):
    sport: str
    service: str
    slate: str
    reference_time: str
    total_slots: int
    emitted: int
    duplicates_skipped: int
    ineligible_skipped: int
    rejected_draftables: List[str]
    unresolved_ids: List[str]
    missing_games: List[str]
    skipped: List[SlotDiagnosticResponse]
