"""Feed-side models: draftable slots, simulation ledgers and team odds."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


UNRESOLVED_ATHLETE_ID = 0


class GameAttribute(BaseModel):
    key: str
    value: str = ""

    model_config = ConfigDict(frozen=True)


class RosterSlotEntry(BaseModel):
    """One draftable row from a service listing."""

    provider_id: str = Field(..., min_length=1)
    name: str
    team: str = ""
    position: str = ""
    salary: int = Field(..., ge=0)
    roster_slot_id: int = 0
    eligible: bool = True
    status: Optional[str] = None
    attributes: List[GameAttribute] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class GameLedgerEntry(BaseModel):
    """One simulated contest for an athlete, with per-service scoring outputs."""

    game_date: str
    team_id: Optional[str] = None
    opponent_id: str = ""
    venue_id: str = ""

    dk_sample: List[float] = Field(default_factory=list)
    dk_mean: float = 0.0
    dk_std: float = 0.0
    dk_cumulative: float = 0.0

    fd_sample: List[float] = Field(default_factory=list)
    fd_mean: float = 0.0
    fd_std: float = 0.0
    fd_cumulative: float = 0.0

    yahoo_sample: List[float] = Field(default_factory=list)
    yahoo_mean: float = 0.0
    yahoo_std: float = 0.0
    yahoo_cumulative: float = 0.0

    superdraft_sample: List[float] = Field(default_factory=list)
    superdraft_mean: float = 0.0
    superdraft_std: float = 0.0
    superdraft_cumulative: float = 0.0

    model_config = ConfigDict(frozen=True)


class AthleteLedger(BaseModel):
    """Simulation output for one canonical athlete."""

    athlete_id: int
    name: str = ""
    team: str = ""
    season: Dict[str, float] = Field(default_factory=dict)
    games: List[GameLedgerEntry] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class OddsEntry(BaseModel):
    commence_time: str
    implied_points: float

    model_config = ConfigDict(frozen=True)


