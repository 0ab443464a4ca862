"""Input adapters that normalize raw feed payloads."""

from .draftables import (
    DEFAULT_DRAFTABLE_MAPPINGS,
    DraftablesFeed,
    parse_draftables,
    row_to_slot,
)
from .simulations import parse_ledgers, parse_team_averages, parse_team_odds

__all__ = [
    "DEFAULT_DRAFTABLE_MAPPINGS",
    "DraftablesFeed",
    "parse_draftables",
    "parse_ledgers",
    "parse_team_averages",
    "parse_team_odds",
    "row_to_slot",
]
