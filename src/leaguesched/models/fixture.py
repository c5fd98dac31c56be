"""Fixture model — a single scheduled match between two teams."""

from __future__ import annotations

import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class GameStatus(str, Enum):
    """Lifecycle state of a fixture. Generated fixtures start as SCHEDULED."""
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    POSTPONED = "POSTPONED"
    CANCELLED = "CANCELLED"


class Fixture(BaseModel):
    """One match of a round-robin round.

    Immutable once produced by the generator; persistence fills in ``id``
    and ``season_id`` on a copy.
    """
    model_config = ConfigDict(frozen=True)

    home_team_id: int
    away_team_id: int
    round: int = Field(ge=1, description="1-based round number")
    status: GameStatus = Field(default=GameStatus.SCHEDULED)
    date: dt.date | None = None
    location: str | None = None

    # Assigned by the database
    id: int | None = None
    season_id: int | None = None

    @model_validator(mode="after")
    def _distinct_sides(self) -> "Fixture":
        if self.home_team_id == self.away_team_id:
            raise ValueError(f"Team {self.home_team_id} cannot play itself")
        return self

    @property
    def teams(self) -> tuple[int, int]:
        return (self.home_team_id, self.away_team_id)

    def involves(self, team_id: int) -> bool:
        return team_id == self.home_team_id or team_id == self.away_team_id

    def shares_team_with(self, other: Fixture) -> bool:
        """True if any team plays in both fixtures."""
        return self.involves(other.home_team_id) or self.involves(other.away_team_id)
