"""Schedule service — generates and stores a season's fixture list.

Wraps the fixture generator with the checks and persistence that surround
it: season lookup and state, roster loading, full replacement of any
previously generated fixtures, and a summary for the caller.
"""

from __future__ import annotations

import datetime as dt
import logging
import random
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from leaguesched.db.repository import FixtureRepository, SeasonRepository, TeamRepository
from leaguesched.engine.fixture_generator import assign_dates, generate_schedule_result
from leaguesched.engine.rules import ScheduleRules
from leaguesched.models.fixture import Fixture

logger = logging.getLogger(__name__)


class SchedulingError(RuntimeError):
    """A schedule request that cannot be served."""


class SeasonNotFoundError(SchedulingError):
    def __init__(self, season_id: int):
        super().__init__(f"Season not found: {season_id}")
        self.season_id = season_id


class SeasonNotSchedulableError(SchedulingError):
    def __init__(self, season_id: int, status: str):
        super().__init__(f"Season {season_id} is {status} and cannot be scheduled")
        self.season_id = season_id
        self.status = status


class NotEnoughTeamsError(SchedulingError):
    def __init__(self, season_id: int, team_count: int):
        super().__init__(
            f"Need at least 2 teams to generate schedule, season {season_id} has {team_count}"
        )
        self.season_id = season_id
        self.team_count = team_count


@dataclass
class ScheduleSummary:
    """What a schedule request hands back to its caller."""
    season_id: int
    total_rounds: int
    fixtures: list[Fixture] = field(default_factory=list)
    degraded_rounds: list[int] = field(default_factory=list)

    @property
    def fixture_count(self) -> int:
        return len(self.fixtures)

    @property
    def degraded(self) -> bool:
        return bool(self.degraded_rounds)

    @property
    def message(self) -> str:
        return f"Generated {self.fixture_count} games"


class ScheduleService:
    """Generate, replace and read back season schedules."""

    def __init__(
        self,
        session: Session,
        rules: ScheduleRules | None = None,
        rng: random.Random | None = None,
    ):
        self.session = session
        self.rules = rules or ScheduleRules()
        self.rng = rng or random.Random()
        self.seasons = SeasonRepository(session)
        self.teams = TeamRepository(session)
        self.fixtures = FixtureRepository(session)

    def generate_for_season(
        self,
        season_id: int,
        total_rounds: int | None = None,
        start_date: dt.date | None = None,
        interval_days: int | None = None,
    ) -> ScheduleSummary:
        """Regenerate a season's schedule, replacing whatever was stored.

        Raises:
            SeasonNotFoundError: No season with this id.
            SeasonNotSchedulableError: Season status is not schedulable.
            NotEnoughTeamsError: Fewer than 2 teams in the season.
        """
        season = self.seasons.get(season_id)
        if season is None:
            raise SeasonNotFoundError(season_id)
        if not season.is_schedulable(self.rules.schedulable_statuses):
            raise SeasonNotSchedulableError(season_id, season.status.value)

        roster = self.teams.get_by_season(season_id)
        if len(roster) < 2:
            raise NotEnoughTeamsError(season_id, len(roster))

        if not total_rounds or total_rounds < 1:
            total_rounds = self.rules.default_rounds
        if interval_days is None:
            interval_days = self.rules.interval_days

        result = generate_schedule_result(
            [team.id for team in roster],
            total_rounds=total_rounds,
            rng=self.rng,
            max_attempts=self.rules.max_shuffle_attempts,
        )
        dated = assign_dates(result.fixtures, start_date or season.start_date, interval_days)
        stored = self.fixtures.replace_for_season(season_id, dated)

        if result.degraded:
            logger.warning(
                "Season %d: rounds %s have teams in consecutive fixtures",
                season_id, result.degraded_rounds,
            )
        logger.info(
            "Season %d (%s): %d teams, %d rounds, %d fixtures stored",
            season_id, season.name, len(roster), total_rounds, len(stored),
        )

        return ScheduleSummary(
            season_id=season_id,
            total_rounds=total_rounds,
            fixtures=stored,
            degraded_rounds=list(result.degraded_rounds),
        )

    def get_schedule(self, season_id: int) -> list[Fixture]:
        if self.seasons.get(season_id) is None:
            raise SeasonNotFoundError(season_id)
        return self.fixtures.get_by_season(season_id)
