"""Attach market-implied scoring context to a selected game."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Sequence

from dfsproj.models import GameLedgerEntry, OddsEntry
from dfsproj.tables import FeedTables

from .selection import DEFAULT_GAME_SKEW, SelectedGame
from .timestamps import parse_timestamp


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameContext:
    entry: Optional[GameLedgerEntry] = None
    team_id: str = ""
    opponent: str = ""
    venue: str = ""
    game_date: str = ""
    game_date_unix: int = 0
    team_projected_points: float = 0.0
    opponent_projected_points: float = 0.0
    player_odds_factor: float = 0.0


EMPTY_CONTEXT = GameContext()


def odds_factor(projected_points: float, team_average: float) -> float:
    """Normalize implied team points by the team's long-run average; 0 when undefined."""

    if not team_average:
        return 0.0
    return projected_points / team_average


def _qualifying_index(
    entries: Sequence[OddsEntry],
    selected: SelectedGame,
    *,
    skew: timedelta,
    legacy_first_entry: bool,
) -> Optional[int]:
    cutoff = selected.game_time + skew
    for index, odds in enumerate(entries):
        if parse_timestamp(odds.commence_time, field="commence_time") < cutoff:
            return index
        if legacy_first_entry:
            # legacy service only ever examined the first odds row
            break
    return None


def enrich_with_odds(
    selected: Optional[SelectedGame],
    tables: FeedTables,
    *,
    team_id: str = "",
    skew: timedelta = DEFAULT_GAME_SKEW,
    legacy_first_entry: bool = False,
) -> GameContext:
    """Build the matchup context for a selected game.

    The team's odds rows are scanned for the first one commencing before the
    skew-adjusted game time. Its implied points become the team projection and,
    divided by the team average, the player odds factor. The opponent's row at
    the same index supplies the opponent projection.
    """

    if selected is None:
        return EMPTY_CONTEXT

    entry = selected.entry
    team = entry.team_id or team_id
    context = GameContext(
        entry=entry,
        team_id=team,
        opponent=entry.opponent_id,
        venue=entry.venue_id,
        game_date=entry.game_date,
        game_date_unix=int(selected.game_time.timestamp()),
    )

    team_odds = tables.get_odds(team)
    index = _qualifying_index(team_odds, selected, skew=skew, legacy_first_entry=legacy_first_entry)
    if index is None:
        logger.debug("No qualifying odds for team %r before %s", team, selected.game_time)
        return context

    projected = team_odds[index].implied_points
    opponent_odds = tables.get_odds(entry.opponent_id)
    opponent_projected = opponent_odds[index].implied_points if index < len(opponent_odds) else 0.0
    return GameContext(
        entry=entry,
        team_id=team,
        opponent=context.opponent,
        venue=context.venue,
        game_date=context.game_date,
        game_date_unix=context.game_date_unix,
        team_projected_points=projected,
        opponent_projected_points=opponent_projected,
        player_odds_factor=odds_factor(projected, tables.get_team_average(team)),
    )
