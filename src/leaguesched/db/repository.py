"""Repository layer — CRUD + bulk operations for the leaguesched database.

Handles conversion between Pydantic models and SQLAlchemy ORM objects,
full-replace persistence of generated schedules, and JSON/CSV export.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

import pandas as pd
from sqlalchemy import func
from sqlalchemy.orm import Session

from leaguesched.db.models import FixtureDB, SeasonDB, TeamDB
from leaguesched.models.fixture import Fixture, GameStatus
from leaguesched.models.season import Season, SeasonStatus, Team

logger = logging.getLogger(__name__)

SCHEDULE_CSV_COLUMNS = [
    "id", "round", "date", "home_team_id", "home_team",
    "away_team_id", "away_team", "status", "location",
]


class SeasonRepository:
    """CRUD for seasons."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, season_id: int) -> Season | None:
        db_obj = self.session.get(SeasonDB, season_id)
        if db_obj is None:
            return None
        return _db_to_season(db_obj)

    def get_all(self) -> list[Season]:
        db_objs = self.session.query(SeasonDB).order_by(SeasonDB.id).all()
        return [_db_to_season(obj) for obj in db_objs]

    def save(self, season: Season) -> None:
        """Insert or update a single season."""
        self.session.merge(_season_to_db(season))
        self.session.commit()


class TeamRepository:
    """CRUD for teams."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, team_id: int) -> Team | None:
        db_obj = self.session.get(TeamDB, team_id)
        if db_obj is None:
            return None
        return _db_to_team(db_obj)

    def get_by_season(self, season_id: int) -> list[Team]:
        """Season roster, ordered by team id."""
        db_objs = (
            self.session.query(TeamDB)
            .filter(TeamDB.season_id == season_id)
            .order_by(TeamDB.id)
            .all()
        )
        return [_db_to_team(obj) for obj in db_objs]

    def save(self, team: Team) -> None:
        self.session.merge(_team_to_db(team))
        self.session.commit()

    def save_many(self, teams: Sequence[Team]) -> int:
        """Bulk upsert teams. Returns count of teams saved."""
        for team in teams:
            self.session.merge(_team_to_db(team))
        self.session.commit()
        logger.info("Saved %d teams to database", len(teams))
        return len(teams)

    def max_id(self) -> int:
        """Highest team id in any season, 0 for an empty table."""
        return self.session.query(func.max(TeamDB.id)).scalar() or 0

    def replace_for_season(self, season_id: int, teams: Sequence[Team]) -> list[Team]:
        """Make ``teams`` the whole roster of a season.

        Teams missing from ``teams`` are removed. If the set of team ids
        changes, the season's fixtures are removed too and must be regenerated.

        Raises:
            ValueError: A team id already belongs to another season.
        """
        new_ids = {team.id for team in teams}
        owned_elsewhere = (
            self.session.query(TeamDB.id)
            .filter(TeamDB.id.in_(sorted(new_ids)), TeamDB.season_id != season_id)
            .all()
        )
        if owned_elsewhere:
            taken = sorted(row.id for row in owned_elsewhere)
            raise ValueError(f"Team ids {taken} already belong to another season")

        old_ids = {
            row.id
            for row in self.session.query(TeamDB.id).filter(TeamDB.season_id == season_id)
        }
        try:
            if old_ids != new_ids:
                FixtureRepository(self.session).delete_for_season(season_id, commit=False)
            (
                self.session.query(TeamDB)
                .filter(TeamDB.season_id == season_id, TeamDB.id.notin_(sorted(new_ids)))
                .delete(synchronize_session=False)
            )
            stored = [
                team.model_copy(update={"season_id": season_id}) for team in teams
            ]
            for team in stored:
                self.session.merge(_team_to_db(team))
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info(
            "Season %d: roster of %d teams replaced with %d", season_id, len(old_ids), len(stored)
        )
        return stored


class FixtureRepository:
    """Persistence for generated schedules."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_season(self, season_id: int) -> list[Fixture]:
        """Fixtures of a season ordered by round, then insertion order."""
        db_objs = (
            self.session.query(FixtureDB)
            .filter(FixtureDB.season_id == season_id)
            .order_by(FixtureDB.round, FixtureDB.id)
            .all()
        )
        return [_db_to_fixture(obj) for obj in db_objs]

    def count_for_season(self, season_id: int) -> int:
        return self.session.query(FixtureDB).filter(FixtureDB.season_id == season_id).count()

    def delete_for_season(self, season_id: int, commit: bool = True) -> int:
        """Delete every fixture of a season. Returns the number removed."""
        removed = (
            self.session.query(FixtureDB)
            .filter(FixtureDB.season_id == season_id)
            .delete(synchronize_session=False)
        )
        if commit:
            self.session.commit()
        return removed

    def replace_for_season(self, season_id: int, fixtures: Sequence[Fixture]) -> list[Fixture]:
        """Swap a season's schedule for ``fixtures`` in one transaction.

        Returns the stored fixtures with their database ids, in the given order.
        """
        try:
            removed = self.delete_for_season(season_id, commit=False)
            db_objs = [_fixture_to_db(f, season_id) for f in fixtures]
            self.session.add_all(db_objs)
            self.session.flush()
            stored = [_db_to_fixture(obj) for obj in db_objs]
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info(
            "Season %d: replaced %d fixtures with %d", season_id, removed, len(stored)
        )
        return stored


def export_snapshot(session: Session, output_path: str | Path) -> dict:
    """Export seasons, teams and fixtures as a JSON snapshot."""
    season_repo = SeasonRepository(session)
    team_repo = TeamRepository(session)
    fixture_repo = FixtureRepository(session)

    seasons = season_repo.get_all()
    teams = [t for s in seasons for t in team_repo.get_by_season(s.id)]
    fixtures = [f for s in seasons for f in fixture_repo.get_by_season(s.id)]

    snapshot = {
        "seasons": [s.model_dump(mode="json") for s in seasons],
        "teams": [t.model_dump(mode="json") for t in teams],
        "fixtures": [f.model_dump(mode="json") for f in fixtures],
        "meta": {
            "season_count": len(seasons),
            "team_count": len(teams),
            "fixture_count": len(fixtures),
        },
    }

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, "w") as f:
        json.dump(snapshot, f, indent=2, ensure_ascii=False)

    logger.info("Exported snapshot to %s: %s", output, snapshot["meta"])
    return snapshot


def schedule_to_frame(
    fixtures: Sequence[Fixture],
    team_names: Mapping[int, str] | None = None,
) -> pd.DataFrame:
    """Tabulate fixtures, one row each, in schedule order."""
    names = team_names or {}
    rows = [
        {
            "id": f.id,
            "round": f.round,
            "date": f.date.isoformat() if f.date else None,
            "home_team_id": f.home_team_id,
            "home_team": names.get(f.home_team_id, str(f.home_team_id)),
            "away_team_id": f.away_team_id,
            "away_team": names.get(f.away_team_id, str(f.away_team_id)),
            "status": f.status.value,
            "location": f.location,
        }
        for f in fixtures
    ]
    return pd.DataFrame(rows, columns=SCHEDULE_CSV_COLUMNS)


def export_schedule_csv(
    fixtures: Sequence[Fixture],
    output_path: str | Path,
    team_names: Mapping[int, str] | None = None,
) -> Path:
    """Write a schedule to CSV. Returns the output path."""
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    schedule_to_frame(fixtures, team_names).to_csv(output, index=False)
    logger.info("Exported %d fixtures to %s", len(fixtures), output)
    return output


# ── Conversion Helpers ──────────────────────────────────────────────────


def _season_to_db(season: Season) -> SeasonDB:
    return SeasonDB(
        id=season.id,
        name=season.name,
        league_name=season.league_name,
        start_date=season.start_date,
        end_date=season.end_date,
        status=season.status.value,
    )


def _db_to_season(db: SeasonDB) -> Season:
    try:
        status = SeasonStatus(db.status)
    except ValueError:
        status = SeasonStatus.DRAFT

    return Season(
        id=db.id,
        name=db.name,
        league_name=db.league_name or "Unknown League",
        start_date=db.start_date,
        end_date=db.end_date,
        status=status,
    )


def _team_to_db(team: Team) -> TeamDB:
    return TeamDB(
        id=team.id,
        name=team.name,
        code=team.code,
        season_id=team.season_id,
    )


def _db_to_team(db: TeamDB) -> Team:
    return Team(id=db.id, name=db.name, code=db.code, season_id=db.season_id)


def _fixture_to_db(fixture: Fixture, season_id: int) -> FixtureDB:
    return FixtureDB(
        season_id=season_id,
        home_team_id=fixture.home_team_id,
        away_team_id=fixture.away_team_id,
        round=fixture.round,
        status=fixture.status.value,
        date=fixture.date,
        location=fixture.location,
    )


def _db_to_fixture(db: FixtureDB) -> Fixture:
    try:
        status = GameStatus(db.status)
    except ValueError:
        status = GameStatus.SCHEDULED

    return Fixture(
        id=db.id,
        season_id=db.season_id,
        home_team_id=db.home_team_id,
        away_team_id=db.away_team_id,
        round=db.round,
        status=status,
        date=db.date,
        location=db.location,
    )
