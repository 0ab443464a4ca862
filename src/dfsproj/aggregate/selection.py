"""Select the next game for an athlete relative to a slate reference time."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Sequence

from dfsproj.models import GameLedgerEntry

from .timestamps import parse_timestamp


logger = logging.getLogger(__name__)

DEFAULT_GAME_SKEW = timedelta(hours=1)


@dataclass(frozen=True)
class SelectedGame:
    entry: GameLedgerEntry
    game_time: datetime


def select_game(
    games: Sequence[GameLedgerEntry],
    reference_time: datetime,
    *,
    skew: timedelta = DEFAULT_GAME_SKEW,
) -> Optional[SelectedGame]:
    """Return the earliest game whose skew-adjusted start is after ``reference_time``.

    Every entry is parsed, so a single bad ``game_date`` raises
    :class:`~dfsproj.errors.MalformedTimestampError` for the whole ledger.
    """

    reference = parse_timestamp(reference_time, field="reference_time")
    best: Optional[SelectedGame] = None
    previous: Optional[datetime] = None
    out_of_order = False
    for entry in games:
        game_time = parse_timestamp(entry.game_date, field="game_date")
        if previous is not None and game_time < previous:
            out_of_order = True
        previous = game_time
        if game_time + skew <= reference:
            continue
        if best is None or game_time < best.game_time:
            best = SelectedGame(entry=entry, game_time=game_time)
    if out_of_order:
        logger.debug("Ledger not in ascending game order; selected %s", best.game_time if best else None)
    return best
