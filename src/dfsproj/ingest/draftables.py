"""Normalize heterogeneous service draftable listings into roster slot entries."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence

from pydantic import ValidationError

from dfsproj.config import normalize_service
from dfsproj.models import GameAttribute, RosterSlotEntry


logger = logging.getLogger(__name__)

# "a|b" joins several source fields; a leading "!" negates a boolean field.
DEFAULT_DRAFTABLE_MAPPINGS: dict[str, dict[str, str]] = {
    "dk": {
        "provider_id": "playerId",
        "name": "displayName",
        "team": "teamAbbreviation",
        "position": "position",
        "salary": "salary",
        "roster_slot_id": "rosterSlotId",
        "eligible": "!isDisabled",
        "status": "status",
        "attributes": "playerGameAttributes",
    },
    "fd": {
        "provider_id": "id",
        "name": "first_name|last_name",
        "team": "team",
        "position": "position",
        "salary": "salary",
        "roster_slot_id": "roster_slot_id",
        "eligible": "draftable",
        "status": "injury_status",
        "attributes": "attributes",
    },
    "yahoo": {
        "provider_id": "playerCode",
        "name": "name",
        "team": "teamAbbr",
        "position": "eligiblePositions",
        "salary": "salary",
        "roster_slot_id": "slotId",
        "eligible": "eligible",
        "status": "status",
        "attributes": "attributes",
    },
    "superdraft": {
        "provider_id": "playerId",
        "name": "fName|lName",
        "team": "teamAbbr",
        "position": "posName",
        "salary": "salary",
        "roster_slot_id": "slotId",
        "eligible": "!isLocked",
        "status": "injuryStatus",
        "attributes": "attributes",
    },
}

_LISTING_KEYS = ("draftables", "players", "data")
_SLATE_START_KEYS = ("slate_start", "startTime", "start_time", "minStartTime")
_TRUE_FLAGS = {"1", "true", "t", "yes", "y"}
_FALSE_FLAGS = {"0", "false", "f", "no", "n", ""}


@dataclass(frozen=True)
class DraftablesFeed:
    slots: List[RosterSlotEntry]
    slate_start: Optional[str] = None
    rejected: List[str] = field(default_factory=list)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return "/".join(_text(item) for item in value if _text(item))
    return str(value).strip()


def _extract(row: Mapping[str, Any], source: Optional[str]) -> Any:
    if source is None:
        return None
    if "|" in source:
        parts = [_text(row.get(part.strip())) for part in source.split("|")]
        joined = " ".join(part for part in parts if part)
        return joined or None
    return row.get(source.strip())


def _parse_salary(raw: Any) -> int:
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return int(raw)
    digits = re.sub(r"[^0-9]", "", _text(raw))
    if not digits:
        raise ValueError(f"salary {raw!r} has no digits")
    return int(digits)


def _parse_bool(raw: Any, *, default: bool) -> bool:
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    text = _text(raw).lower()
    if text in _TRUE_FLAGS:
        return True
    if text in _FALSE_FLAGS:
        return False
    return default


def _parse_int(raw: Any, *, default: int = 0) -> int:
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def _parse_attributes(raw: Any) -> List[GameAttribute]:
    if not raw:
        return []
    if isinstance(raw, Mapping):
        return [GameAttribute(key=str(key), value=_text(value)) for key, value in raw.items()]
    attributes: List[GameAttribute] = []
    for item in raw:
        if not isinstance(item, Mapping):
            continue
        key = item.get("key", item.get("name", item.get("id")))
        if key is None:
            continue
        attributes.append(GameAttribute(key=str(key), value=_text(item.get("value"))))
    return attributes


def row_to_slot(row: Mapping[str, Any], mapping: Mapping[str, str]) -> RosterSlotEntry:
    eligible_field = mapping.get("eligible")
    negate = bool(eligible_field and eligible_field.startswith("!"))
    if negate:
        eligible_field = eligible_field[1:]  # type: ignore[index]
    raw_eligible = _extract(row, eligible_field)
    eligible = True
    if raw_eligible is not None:
        eligible = _parse_bool(raw_eligible, default=not negate)
        if negate:
            eligible = not eligible

    status = _text(_extract(row, mapping.get("status"))) or None
    return RosterSlotEntry(
        provider_id=_text(_extract(row, mapping.get("provider_id"))),
        name=_text(_extract(row, mapping.get("name"))),
        team=_text(_extract(row, mapping.get("team"))).upper(),
        position=_text(_extract(row, mapping.get("position"))),
        salary=_parse_salary(_extract(row, mapping.get("salary"))),
        roster_slot_id=_parse_int(_extract(row, mapping.get("roster_slot_id"))),
        eligible=eligible,
        status=status,
        attributes=_parse_attributes(_extract(row, mapping.get("attributes"))),
    )


def _listing_rows(payload: Any) -> Sequence[Mapping[str, Any]]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        for key in _LISTING_KEYS:
            rows = payload.get(key)
            if isinstance(rows, list):
                return rows
    raise ValueError("draftables payload has no listing")


def _slate_start(payload: Any) -> Optional[str]:
    if not isinstance(payload, Mapping):
        return None
    for key in _SLATE_START_KEYS:
        value = payload.get(key)
        if value:
            return str(value)
    return None


def parse_draftables(
    payload: Any,
    service: str,
    *,
    mapping: Mapping[str, str] | None = None,
) -> DraftablesFeed:
    """Parse a raw listing, keeping listing order and dropping rows that cannot be normalized."""

    mapping = mapping or DEFAULT_DRAFTABLE_MAPPINGS.get(normalize_service(service))
    if mapping is None:
        raise KeyError(f"No draftable field mapping for service={service!r}")

    slots: List[RosterSlotEntry] = []
    rejected: List[str] = []
    for row in _listing_rows(payload):
        if not isinstance(row, Mapping):
            continue
        try:
            slots.append(row_to_slot(row, mapping))
        except (ValidationError, ValueError) as exc:
            label = _text(_extract(row, mapping.get("name"))) or _text(_extract(row, mapping.get("provider_id")))
            logger.debug("Rejected draftable %r: %s", label, exc)
            rejected.append(label)
    return DraftablesFeed(slots=slots, slate_start=_slate_start(payload), rejected=rejected)
