"""Parse simulation ledgers, team odds and team scoring averages."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError

from dfsproj.models import AthleteLedger, OddsEntry


logger = logging.getLogger(__name__)


def _records(payload: Any, *keys: str) -> List[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        for key in keys:
            value = payload.get(key)
            if isinstance(value, list):
                return value
    raise ValueError(f"payload has none of {keys!r}")


def parse_ledgers(payload: Any) -> List[AthleteLedger]:
    """Parse per-athlete simulation output; athletes that fail validation are dropped."""

    ledgers: List[AthleteLedger] = []
    for item in _records(payload, "athletes", "data"):
        try:
            ledgers.append(AthleteLedger.model_validate(item))
        except ValidationError as exc:
            athlete = item.get("athlete_id") if isinstance(item, Mapping) else None
            logger.warning("Dropping simulation for athlete %r: %s", athlete, exc.errors()[0]["msg"])
    return ledgers


def parse_team_odds(payload: Any) -> Dict[str, List[OddsEntry]]:
    """Parse ``{team: [{commence_time, implied_points}, ...]}`` keeping feed order."""

    teams = payload.get("teams", payload) if isinstance(payload, Mapping) else None
    if not isinstance(teams, Mapping):
        raise ValueError("odds payload must map team ids to entries")

    odds: Dict[str, List[OddsEntry]] = {}
    for team, entries in teams.items():
        parsed: List[OddsEntry] = []
        for entry in entries or []:
            try:
                parsed.append(OddsEntry.model_validate(entry))
            except ValidationError as exc:
                logger.warning("Dropping odds entry for %s: %s", team, exc.errors()[0]["msg"])
        odds[str(team).upper()] = parsed
    return odds


def parse_team_averages(payload: Any) -> Dict[str, float]:
    """Accept ``{team: avg}`` or ``{"team": ..., "avg_points": ...}`` rows, optionally under ``teams``/``data``."""

    teams = payload
    if isinstance(payload, Mapping):
        for key in ("teams", "data"):
            if key in payload:
                teams = payload[key]
                break
    if isinstance(teams, Mapping):
        rows: List[Any] = [{"team": team, "avg_points": value} for team, value in teams.items()]
    elif isinstance(teams, list):
        rows = teams
    else:
        raise ValueError("team averages payload must be a mapping or a list of rows")

    averages: Dict[str, float] = {}
    for row in rows:
        try:
            averages[str(row["team"]).upper()] = float(row["avg_points"])
        except (KeyError, TypeError, ValueError):
            logger.warning("Dropping malformed team average row: %r", row)
    return averages
