"""Aggregation pass that turns a draftables listing into final projection records."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from dfsproj.config import (
    Settings,
    get_service_fields,
    get_slot_rules,
    get_sport_rules,
    normalize_service,
    normalize_sport,
)
from dfsproj.errors import MalformedTimestampError
from dfsproj.models import ProjectionRecord, RosterSlotEntry
from dfsproj.tables import FeedTables

from .assembler import assemble_record
from .dedup import DedupGate
from .odds import enrich_with_odds
from .selection import DEFAULT_GAME_SKEW, select_game
from .timestamps import parse_timestamp


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotDiagnostic:
    provider_id: str
    name: str
    reason: str


@dataclass(frozen=True)
class AggregationReport:
    total_slots: int
    emitted: int
    duplicates_skipped: int
    ineligible_skipped: int
    unresolved_ids: List[str]
    missing_games: List[str]
    skipped: List[SlotDiagnostic]


@dataclass
class AggregationPass:
    """State for one sport/service aggregation; nothing here outlives the pass."""

    sport: str
    service: str
    reference_time: datetime
    tables: FeedTables
    settings: Optional[Settings] = None
    gate: DedupGate = field(default_factory=DedupGate)
    records: List[ProjectionRecord] = field(default_factory=list)
    unresolved_ids: List[str] = field(default_factory=list)
    missing_games: List[str] = field(default_factory=list)
    skipped: List[SlotDiagnostic] = field(default_factory=list)
    total_slots: int = 0

    def __post_init__(self) -> None:
        self.sport = normalize_sport(self.sport)
        self.service = normalize_service(self.service)
        self.rules = get_sport_rules(self.sport)
        self.fields = get_service_fields(self.service)
        self.slot_rules = get_slot_rules(self.service, self.sport)
        self.reference_time = parse_timestamp(self.reference_time, field="reference_time")
        self.skew = self.settings.game_skew if self.settings else DEFAULT_GAME_SKEW
        self.legacy_odds_scan = self.settings.legacy_odds_scan if self.settings else False

    def build_record(self, slot: RosterSlotEntry) -> ProjectionRecord:
        """Resolve, select, enrich and assemble one slot; raises on malformed timestamps."""

        canonical_id, resolved = self.tables.resolve_canonical_id(slot.provider_id, self.sport, self.service)
        if not resolved:
            logger.debug("No crosswalk entry for %s provider id %r", self.service, slot.provider_id)
            self.unresolved_ids.append(slot.provider_id)

        athlete = self.tables.get_athlete(canonical_id)
        selected = select_game(
            self.tables.get_ledger(canonical_id),
            self.reference_time,
            skew=self.skew,
        )
        if selected is None and resolved:
            self.missing_games.append(slot.provider_id)
        context = enrich_with_odds(
            selected,
            self.tables,
            team_id=slot.team,
            skew=self.skew,
            legacy_first_entry=self.legacy_odds_scan,
        )
        return assemble_record(
            slot,
            canonical_id,
            rules=self.rules,
            slot_rules=self.slot_rules,
            fields=self.fields,
            context=context,
            athlete=athlete,
        )

    def process(self, slot: RosterSlotEntry) -> Optional[ProjectionRecord]:
        self.total_slots += 1
        try:
            record = self.build_record(slot)
        except MalformedTimestampError as exc:
            logger.warning("Skipping %s (%s): %s", slot.name, slot.provider_id, exc)
            self.skipped.append(SlotDiagnostic(provider_id=slot.provider_id, name=slot.name, reason=str(exc)))
            return None
        if not self.gate.admit(record):
            return None
        self.records.append(record)
        return record

    def run(self, slots: Sequence[RosterSlotEntry]) -> List[ProjectionRecord]:
        for slot in slots:
            self.process(slot)
        logger.info(
            "Aggregated %s/%s: %d slots -> %d records (%d duplicate, %d ineligible, %d skipped)",
            self.sport,
            self.service,
            self.total_slots,
            len(self.records),
            self.gate.duplicates,
            self.gate.ineligible,
            len(self.skipped),
        )
        return list(self.records)

    def report(self) -> AggregationReport:
        return AggregationReport(
            total_slots=self.total_slots,
            emitted=len(self.records),
            duplicates_skipped=self.gate.duplicates,
            ineligible_skipped=self.gate.ineligible,
            unresolved_ids=list(self.unresolved_ids),
            missing_games=list(self.missing_games),
            skipped=list(self.skipped),
        )


def run_aggregation(
    slots: Sequence[RosterSlotEntry],
    reference_time: datetime | str,
    sport: str,
    service: str,
    tables: FeedTables,
    *,
    settings: Optional[Settings] = None,
) -> Tuple[List[ProjectionRecord], AggregationReport]:
    aggregation = AggregationPass(
        sport=sport,
        service=service,
        reference_time=reference_time,  # type: ignore[arg-type]
        tables=tables,
        settings=settings,
    )
    records = aggregation.run(slots)
    return records, aggregation.report()


def aggregate(
    slots: Sequence[RosterSlotEntry],
    reference_time: datetime | str,
    sport: str,
    service: str,
    tables: FeedTables,
    *,
    settings: Optional[Settings] = None,
) -> List[ProjectionRecord]:
    """Return the deduplicated projection list in first-seen slot order."""

    records, _ = run_aggregation(slots, reference_time, sport, service, tables, settings=settings)
    return records
