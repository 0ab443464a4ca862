"""Static rule tables for supported sport/service combinations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Tuple


@dataclass(frozen=True)
class SportRules:
    sport: str
    flex_tag: str
    flex_positions: FrozenSet[str]
    defense_positions: FrozenSet[str]
    season_stats: Tuple[str, ...]
    starter_keys: FrozenSet[str]
    probable_pitcher_keys: FrozenSet[str] = frozenset()

    @property
    def tracks_probable_pitchers(self) -> bool:
        return bool(self.probable_pitcher_keys)


@dataclass(frozen=True)
class RosterSlotRules:
    """Roster slot ids that mark captain/utility entries on single-game slates."""

    service: str
    sport: str
    captain_slot_ids: FrozenSet[int] = field(default_factory=frozenset)
    utility_slot_ids: FrozenSet[int] = field(default_factory=frozenset)

    def slot_type(self, roster_slot_id: int) -> str:
        if roster_slot_id in self.captain_slot_ids:
            return "captain"
        if roster_slot_id in self.utility_slot_ids:
            return "utility"
        return "classic"


@dataclass(frozen=True)
class ServiceFields:
    """Ledger and season attribute names carrying one service's scoring."""

    service: str
    sample: str
    mean: str
    std: str
    cumulative: str
    season_avg: str


_SPORT_RULES: Dict[str, SportRules] = {
    "NFL": SportRules(
        sport="NFL",
        flex_tag="flex",
        flex_positions=frozenset({"rb", "wr", "te"}),
        defense_positions=frozenset({"dst", "d/st", "def", "d"}),
        season_stats=("games_played", "passing_yards", "rushing_yards", "receiving_yards", "touchdowns"),
        starter_keys=frozenset({"starting_lineup", "projected_starter"}),
    ),
    "NBA": SportRules(
        sport="NBA",
        flex_tag="util",
        flex_positions=frozenset({"pg", "sg", "sf", "pf", "c"}),
        defense_positions=frozenset(),
        season_stats=("games_played", "minutes", "points", "rebounds", "assists"),
        starter_keys=frozenset({"starting_lineup", "projected_starter"}),
    ),
    "MLB": SportRules(
        sport="MLB",
        flex_tag="util",
        flex_positions=frozenset({"c", "1b", "2b", "3b", "ss", "of"}),
        defense_positions=frozenset(),
        season_stats=("games_played", "hits", "home_runs", "stolen_bases", "strikeouts"),
        starter_keys=frozenset({"starting_lineup", "batting_order_confirmed"}),
        probable_pitcher_keys=frozenset({"probable_pitcher", "starting_pitcher"}),
    ),
    "NHL": SportRules(
        sport="NHL",
        flex_tag="util",
        flex_positions=frozenset({"c", "w", "lw", "rw", "d"}),
        defense_positions=frozenset(),
        season_stats=("games_played", "goals", "assists", "shots", "saves"),
        starter_keys=frozenset({"starting_lineup", "starting_goalie"}),
    ),
}


# Single-game slot ids as published in each service's draftables feed.
_ROSTER_SLOT_RULES: Dict[Tuple[str, str], RosterSlotRules] = {
    ("dk", "NFL"): RosterSlotRules(
        service="dk",
        sport="NFL",
        captain_slot_ids=frozenset({511}),
        utility_slot_ids=frozenset({512}),
    ),
    ("dk", "NBA"): RosterSlotRules(
        service="dk",
        sport="NBA",
        captain_slot_ids=frozenset({476}),
        utility_slot_ids=frozenset({475}),
    ),
    ("dk", "MLB"): RosterSlotRules(
        service="dk",
        sport="MLB",
        captain_slot_ids=frozenset({532}),
        utility_slot_ids=frozenset({533}),
    ),
    ("dk", "NHL"): RosterSlotRules(
        service="dk",
        sport="NHL",
        captain_slot_ids=frozenset({580}),
        utility_slot_ids=frozenset({581}),
    ),
    ("fd", "NFL"): RosterSlotRules(
        service="fd",
        sport="NFL",
        captain_slot_ids=frozenset({1001}),
        utility_slot_ids=frozenset({1005}),
    ),
    ("fd", "NBA"): RosterSlotRules(
        service="fd",
        sport="NBA",
        captain_slot_ids=frozenset({1001, 1002, 1003}),
        utility_slot_ids=frozenset({1005}),
    ),
    ("superdraft", "NFL"): RosterSlotRules(
        service="superdraft",
        sport="NFL",
        captain_slot_ids=frozenset({9001}),
        utility_slot_ids=frozenset({9002}),
    ),
}


_SERVICE_FIELDS: Dict[str, ServiceFields] = {
    service: ServiceFields(
        service=service,
        sample=f"{service}_sample",
        mean=f"{service}_mean",
        std=f"{service}_std",
        cumulative=f"{service}_cumulative",
        season_avg=f"{service}_points_avg",
    )
    for service in ("dk", "fd", "yahoo", "superdraft")
}


def normalize_sport(sport: str) -> str:
    return sport.strip().upper()


def normalize_service(service: str) -> str:
    return service.strip().lower()


def iter_sport_rules() -> Iterable[SportRules]:
    """Return an iterator of all configured sport rule sets."""

    return _SPORT_RULES.values()


def get_sport_rules(sport: str) -> SportRules:
    """Fetch rules for a sport, raising KeyError if missing."""

    key = normalize_sport(sport)
    if key not in _SPORT_RULES:
        raise KeyError(f"No rules configured for sport={sport!r}")
    return _SPORT_RULES[key]


def get_service_fields(service: str) -> ServiceFields:
    """Fetch the scoring field selectors for a service, raising KeyError if missing."""

    key = normalize_service(service)
    if key not in _SERVICE_FIELDS:
        raise KeyError(f"No scoring fields configured for service={service!r}")
    return _SERVICE_FIELDS[key]


def get_slot_rules(service: str, sport: str) -> RosterSlotRules:
    """Return single-game slot ids for a service/sport; classic-only pairs get empty rules."""

    service_key = normalize_service(service)
    sport_key = normalize_sport(sport)
    rules = _ROSTER_SLOT_RULES.get((service_key, sport_key))
    if rules is None:
        return RosterSlotRules(service=service_key, sport=sport_key)
    return rules


def iter_services() -> Iterable[str]:
    return _SERVICE_FIELDS.keys()
