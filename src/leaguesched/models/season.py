"""Season and Team models for leaguesched."""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, Field


class SeasonStatus(str, Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


SCHEDULABLE_STATUSES = (SeasonStatus.DRAFT, SeasonStatus.ACTIVE)


class Team(BaseModel):
    """A club entered in a season."""
    id: int
    name: str
    code: str = Field(max_length=5, description="Short code, e.g. 'ARS', 'MCI'")
    season_id: int | None = None


class Season(BaseModel):
    """A season of a league — the unit a schedule is generated for."""
    id: int
    name: str
    start_date: dt.date
    end_date: dt.date | None = None
    status: SeasonStatus = Field(default=SeasonStatus.DRAFT)
    league_name: str = Field(default="Unknown League")

    def is_schedulable(self, statuses: Iterable[SeasonStatus] = SCHEDULABLE_STATUSES) -> bool:
        """Whether a schedule may be generated, given the allowed statuses."""
        return self.status in tuple(statuses)
