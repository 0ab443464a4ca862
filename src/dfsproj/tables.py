"""In-memory lookup tables resolved once per request before aggregation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, List, Mapping, Sequence, Tuple

from dfsproj.config import normalize_service, normalize_sport
from dfsproj.models import UNRESOLVED_ATHLETE_ID, AthleteLedger, GameLedgerEntry, OddsEntry


logger = logging.getLogger(__name__)

CrosswalkKey = Tuple[str, str, str]


def _team_key(team_id: str | None) -> str:
    return (team_id or "").strip().upper()


class Crosswalk:
    """Read-only mapping from (sport, service, provider id) to canonical athlete id."""

    def __init__(self, mapping: Mapping[CrosswalkKey, int] | None = None) -> None:
        self._mapping: Mapping[CrosswalkKey, int] = MappingProxyType(dict(mapping or {}))

    @staticmethod
    def key(provider_id: str, sport: str, service: str) -> CrosswalkKey:
        return (normalize_sport(sport), normalize_service(service), str(provider_id).strip())

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, object]]) -> "Crosswalk":
        """Build from rows carrying provider_id, sport, service and canonical_id."""

        mapping: dict[CrosswalkKey, int] = {}
        for row in rows:
            try:
                canonical_id = int(row["canonical_id"])  # type: ignore[call-overload]
                key = cls.key(str(row["provider_id"]), str(row["sport"]), str(row["service"]))
            except (KeyError, TypeError, ValueError):
                logger.debug("Skipping malformed crosswalk row: %r", row)
                continue
            if canonical_id == UNRESOLVED_ATHLETE_ID:
                continue
            mapping.setdefault(key, canonical_id)
        return cls(mapping)

    def resolve(self, provider_id: str, sport: str, service: str) -> Tuple[int, bool]:
        canonical_id = self._mapping.get(self.key(provider_id, sport, service))
        if canonical_id is None:
            return UNRESOLVED_ATHLETE_ID, False
        return canonical_id, True

    def __len__(self) -> int:
        return len(self._mapping)


@dataclass(frozen=True)
class FeedTables:
    crosswalk: Crosswalk = field(default_factory=Crosswalk)
    ledgers: Mapping[int, AthleteLedger] = field(default_factory=dict)
    odds: Mapping[str, Sequence[OddsEntry]] = field(default_factory=dict)
    team_averages: Mapping[str, float] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        *,
        crosswalk: Crosswalk,
        ledgers: Iterable[AthleteLedger],
        odds: Mapping[str, Sequence[OddsEntry]],
        team_averages: Mapping[str, float],
    ) -> "FeedTables":
        ledger_map: dict[int, AthleteLedger] = {}
        for ledger in ledgers:
            if ledger.athlete_id in ledger_map:
                logger.debug("Duplicate ledger for athlete %s; keeping first", ledger.athlete_id)
                continue
            ledger_map[ledger.athlete_id] = ledger
        return cls(
            crosswalk=crosswalk,
            ledgers=MappingProxyType(ledger_map),
            odds=MappingProxyType({_team_key(team): tuple(entries) for team, entries in odds.items()}),
            team_averages=MappingProxyType(
                {_team_key(team): float(value) for team, value in team_averages.items()}
            ),
        )

    def resolve_canonical_id(self, provider_id: str, sport: str, service: str) -> Tuple[int, bool]:
        return self.crosswalk.resolve(provider_id, sport, service)

    def get_athlete(self, athlete_id: int) -> AthleteLedger | None:
        if athlete_id == UNRESOLVED_ATHLETE_ID:
            return None
        return self.ledgers.get(athlete_id)

    def get_ledger(self, athlete_id: int) -> List[GameLedgerEntry]:
        athlete = self.get_athlete(athlete_id)
        return list(athlete.games) if athlete else []

    def get_odds(self, team_id: str | None) -> List[OddsEntry]:
        return list(self.odds.get(_team_key(team_id), ()))

    def get_team_average(self, team_id: str | None) -> float:
        return float(self.team_averages.get(_team_key(team_id), 0.0))
