"""Load one request's feeds from the store and run the aggregation pass."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Mapping, Optional

from dfsproj.aggregate import AggregationReport, parse_timestamp, run_aggregation
from dfsproj.config import Settings, get_service_fields, get_sport_rules
from dfsproj.errors import FeedUnavailableError, MalformedTimestampError
from dfsproj.models import ProjectionRecord
from dfsproj.persistence import FeedStore, draftables_key


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectionResult:
    sport: str
    service: str
    slate: str
    reference_time: datetime
    records: List[ProjectionRecord]
    report: AggregationReport
    rejected_draftables: List[str]


def resolve_reference_time(
    date: Optional[str],
    slate_start: Optional[str],
    *,
    now: Optional[datetime] = None,
) -> datetime:
    """Pick the selection reference: explicit date, then the slate start, then now.

    A malformed explicit ``date`` raises; a malformed feed slate start is logged and skipped.
    """

    if date:
        return parse_timestamp(date, field="date")
    if slate_start:
        try:
            return parse_timestamp(slate_start, field="slate_start")
        except MalformedTimestampError as exc:
            logger.warning("Ignoring feed slate start: %s", exc)
    return now or datetime.now(timezone.utc)


def latest_slate(store: FeedStore, sport: str, service: str) -> str:
    slates = store.list_slates(sport, service)
    if not slates:
        raise FeedUnavailableError(draftables_key(sport, service, "*"), "no slates published")
    return slates[-1]


def build_projections(
    store: FeedStore,
    sport: str,
    service: str,
    *,
    slate: Optional[str] = None,
    date: Optional[str] = None,
    settings: Optional[Settings] = None,
    mapping: Mapping[str, str] | None = None,
) -> ProjectionResult:
    """Run one sport/service/slate/date request end to end.

    Raises ``KeyError`` for an unknown sport or service, ``MalformedTimestampError``
    for a bad ``date`` and ``FeedUnavailableError`` when a required feed is missing.
    """

    rules = get_sport_rules(sport)
    fields = get_service_fields(service)
    slate_id = slate or latest_slate(store, rules.sport, fields.service)

    feed = store.load_draftables(rules.sport, fields.service, slate_id, mapping=mapping)
    reference_time = resolve_reference_time(date, feed.slate_start)
    tables = store.load_tables(rules.sport, fields.service, day=reference_time.date().isoformat())

    records, report = run_aggregation(
        feed.slots,
        reference_time,
        rules.sport,
        fields.service,
        tables,
        settings=settings,
    )
    return ProjectionResult(
        sport=rules.sport,
        service=fields.service,
        slate=slate_id,
        reference_time=reference_time,
        records=records,
        report=report,
        rejected_draftables=list(feed.rejected),
    )
