"""Model exports for leaguesched."""

from leaguesched.models.fixture import Fixture, GameStatus
from leaguesched.models.season import SCHEDULABLE_STATUSES, Season, SeasonStatus, Team

__all__ = [
    "Fixture",
    "GameStatus",
    "SCHEDULABLE_STATUSES",
    "Season",
    "SeasonStatus",
    "Team",
]
