"""Pydantic models for feeds and projection output."""

from .feeds import (
    UNRESOLVED_ATHLETE_ID,
    AthleteLedger,
    GameAttribute,
    GameLedgerEntry,
    OddsEntry,
    RosterSlotEntry,
)
from .projection import HISTOGRAM_BUCKETS, ProjectionRecord

__all__ = [
    "HISTOGRAM_BUCKETS",
    "UNRESOLVED_ATHLETE_ID",
    "AthleteLedger",
    "GameAttribute",
    "GameLedgerEntry",
    "OddsEntry",
    "ProjectionRecord",
    "RosterSlotEntry",
]
