"""Join, enrich, bucket and deduplicate draftables into projection records."""

from .assembler import assemble_record, draftable_uid, normalize_positions
from .dedup import DedupGate
from .histogram import build_histogram
from .odds import GameContext, enrich_with_odds
from .selection import SelectedGame, select_game
from .service import AggregationPass, AggregationReport, SlotDiagnostic, aggregate, run_aggregation
from .timestamps import parse_timestamp

__all__ = [
    "AggregationPass",
    "AggregationReport",
    "DedupGate",
    "GameContext",
    "SelectedGame",
    "SlotDiagnostic",
    "aggregate",
    "assemble_record",
    "build_histogram",
    "draftable_uid",
    "enrich_with_odds",
    "normalize_positions",
    "parse_timestamp",
    "run_aggregation",
    "select_game",
]
