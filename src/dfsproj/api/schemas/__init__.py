"""Pydantic models for API I/O."""

from .projection import AggregationReportResponse, ProjectionListResponse, SlotDiagnosticResponse

__all__ = [
    "AggregationReportResponse",
    "ProjectionListResponse",
    "SlotDiagnosticResponse",
]
