"""Assemble projection records from a roster slot and its enriched game."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from dfsproj.config import RosterSlotRules, ServiceFields, SportRules
from dfsproj.models import AthleteLedger, GameAttribute, GameLedgerEntry, ProjectionRecord, RosterSlotEntry

from .histogram import build_histogram
from .odds import EMPTY_CONTEXT, GameContext


DEFENSE_TOKEN = "dst"
NO_INJURY = "None"
INJURY_KEYS = frozenset({"injury_status", "injury"})

_SLOT_TAGS = {"captain": "cpt", "utility": "util"}
_DEFENSE_ALIAS_PATTERN = re.compile(r"\bD/ST\b", re.IGNORECASE)
_POSITION_SPLIT_PATTERN = re.compile(r"[/,\s]+")
_TRUE_FLAGS = {"1", "true", "t", "yes", "y", "probable", "p", "confirmed"}
_FALSE_FLAGS = {"0", "false", "f", "no", "n"}

_DEFAULT_RECORD = ProjectionRecord()


@dataclass(frozen=True)
class ServiceStats:
    sample: Tuple[float, ...] = ()
    mean: float = 0.0
    std: float = 0.0
    cumulative: float = 0.0


@dataclass(frozen=True)
class SlotFlags:
    starting_lineup: bool = False
    probable_pitcher: Optional[bool] = None
    injury_status: str = NO_INJURY


@dataclass(frozen=True)
class NormalizedPositions:
    positions: List[str] = field(default_factory=list)
    slot_type: str = "classic"
    is_defense: bool = False


def service_stats(entry: Optional[GameLedgerEntry], fields: ServiceFields) -> ServiceStats:
    """Pick the requesting service's simulation outputs off a ledger entry."""

    if entry is None:
        return ServiceStats()
    return ServiceStats(
        sample=tuple(getattr(entry, fields.sample)),
        mean=float(getattr(entry, fields.mean)),
        std=float(getattr(entry, fields.std)),
        cumulative=float(getattr(entry, fields.cumulative)),
    )


def _parse_flag(value: str) -> Optional[bool]:
    text = value.strip().lower()
    if text in _TRUE_FLAGS:
        return True
    if text in _FALSE_FLAGS:
        return False
    return None


def _attribute_set(attributes: Iterable[GameAttribute], keys: frozenset[str]) -> bool:
    for attribute in attributes:
        if attribute.key.strip().lower() not in keys:
            continue
        flag = _parse_flag(attribute.value)
        # a bare key with no recognizable value still signals the attribute
        if flag is None or flag:
            return True
    return False


def extract_flags(slot: RosterSlotEntry, rules: SportRules, *, is_defense: bool = False) -> SlotFlags:
    probable: Optional[bool] = None
    if rules.tracks_probable_pitchers:
        probable = _attribute_set(slot.attributes, rules.probable_pitcher_keys)

    injury = ""
    for attribute in slot.attributes:
        if attribute.key.strip().lower() in INJURY_KEYS and attribute.value.strip():
            injury = attribute.value.strip()
            break
    if not injury and slot.status:
        injury = slot.status.strip()
    if is_defense or not injury:
        injury = NO_INJURY

    return SlotFlags(
        starting_lineup=_attribute_set(slot.attributes, rules.starter_keys),
        probable_pitcher=probable,
        injury_status=injury,
    )


def normalize_positions(
    position: str,
    rules: SportRules,
    slot_rules: RosterSlotRules,
    roster_slot_id: int,
) -> NormalizedPositions:
    """Lowercase positions and append derived flex/captain/utility tags."""

    text = _DEFENSE_ALIAS_PATTERN.sub("DST", position or "")
    positions: List[str] = []
    is_defense = False
    for raw in _POSITION_SPLIT_PATTERN.split(text):
        token = raw.strip().lower()
        if not token:
            continue
        if token in rules.defense_positions:
            token = DEFENSE_TOKEN
            is_defense = True
        if token not in positions:
            positions.append(token)

    if rules.flex_tag not in positions and any(pos in rules.flex_positions for pos in positions):
        positions.append(rules.flex_tag)

    slot_type = slot_rules.slot_type(roster_slot_id)
    tag = _SLOT_TAGS.get(slot_type)
    if tag and tag not in positions:
        positions.append(tag)
    return NormalizedPositions(positions=positions, slot_type=slot_type, is_defense=is_defense)


def identity_key(canonical_id: int, slot_type: str) -> str:
    tag = _SLOT_TAGS.get(slot_type)
    return f"{canonical_id}:{tag}" if tag else str(canonical_id)


def draftable_uid(provider_id: str, canonical_id: int, position: str, salary: int, *, slot_type: str = "classic") -> str:
    return "-".join([provider_id, identity_key(canonical_id, slot_type), position, str(salary)])


def _season_stats(athlete: Optional[AthleteLedger], keys: Sequence[str]) -> dict[str, float]:
    if athlete is None:
        return {}
    return {key: float(athlete.season[key]) for key in keys if key in athlete.season}


def assemble_record(
    slot: RosterSlotEntry,
    canonical_id: int,
    *,
    rules: SportRules,
    slot_rules: RosterSlotRules,
    fields: ServiceFields,
    context: GameContext = EMPTY_CONTEXT,
    histogram: Optional[List[int]] = None,
    athlete: Optional[AthleteLedger] = None,
) -> ProjectionRecord:
    normalized = normalize_positions(slot.position, rules, slot_rules, slot.roster_slot_id)
    flags = extract_flags(slot, rules, is_defense=normalized.is_defense)
    stats = service_stats(context.entry, fields)
    if histogram is None:
        histogram = build_histogram(stats.sample)
    season_avg = athlete.season.get(fields.season_avg, 0.0) if athlete else 0.0

    return _DEFAULT_RECORD.model_copy(
        update={
            "draftable_uid": draftable_uid(
                slot.provider_id,
                canonical_id,
                slot.position,
                slot.salary,
                slot_type=normalized.slot_type,
            ),
            "provider_id": slot.provider_id,
            "canonical_id": canonical_id,
            "name": slot.name,
            "team": slot.team or context.team_id,
            "opponent": context.opponent,
            "venue": context.venue,
            "game_date": context.game_date,
            "game_date_unix": context.game_date_unix,
            "team_projected_points": context.team_projected_points,
            "opponent_projected_points": context.opponent_projected_points,
            "player_odds_factor": context.player_odds_factor,
            "projected_points": stats.mean,
            "std_points": stats.std,
            "cumulative_points": stats.cumulative,
            "histogram": list(histogram),
            "season_avg_points": float(season_avg),
            "season_stats": _season_stats(athlete, rules.season_stats),
            "position": slot.position,
            "positions": normalized.positions,
            "slot_type": normalized.slot_type,
            "roster_slot_id": slot.roster_slot_id,
            "salary": slot.salary,
            "eligible": slot.eligible,
            "starting_lineup": flags.starting_lineup,
            "probable_pitcher": flags.probable_pitcher,
            "injury_status": flags.injury_status,
            "sport": rules.sport,
            "service": fields.service,
        }
    )
