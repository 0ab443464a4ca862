"""Projection output model served to clients."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from .feeds import UNRESOLVED_ATHLETE_ID


HISTOGRAM_BUCKETS = 8


class ProjectionRecord(BaseModel):
    """Final per-player projection row; field names are the public JSON keys."""

    draftable_uid: str = ""
    provider_id: str = ""
    canonical_id: int = UNRESOLVED_ATHLETE_ID
    name: str = ""
    team: str = ""

    opponent: str = ""
    venue: str = ""
    game_date: str = ""
    game_date_unix: int = 0
    team_projected_points: float = 0.0
    opponent_projected_points: float = 0.0
    player_odds_factor: float = 0.0

    projected_points: float = 0.0
    std_points: float = 0.0
    cumulative_points: float = 0.0
    histogram: List[int] = Field(default_factory=lambda: [0] * HISTOGRAM_BUCKETS)
    season_avg_points: float = 0.0
    season_stats: Dict[str, float] = Field(default_factory=dict)

    position: str = ""
    positions: List[str] = Field(default_factory=list)
    slot_type: str = "classic"
    roster_slot_id: int = 0
    salary: int = 0
    eligible: bool = False
    starting_lineup: bool = False
    probable_pitcher: Optional[bool] = None
    injury_status: str = "None"

    sport: str = ""
    service: str = ""

    model_config = ConfigDict(frozen=True)
