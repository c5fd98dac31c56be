"""SQLAlchemy ORM models for the leaguesched database.

Maps the Season, Team and Fixture Pydantic models to SQLite tables.
"""

from __future__ import annotations

from sqlalchemy import (
    Column,
    Date,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class SeasonDB(Base):
    """SQLite table for seasons."""

    __tablename__ = "seasons"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    league_name = Column(String(100), default="Unknown League")
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    status = Column(String(20), nullable=False, default="DRAFT")

    def __repr__(self) -> str:
        return f"<SeasonDB {self.name} ({self.status})>"


class TeamDB(Base):
    """SQLite table for teams."""

    __tablename__ = "teams"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False, index=True)
    code = Column(String(5), nullable=False)
    season_id = Column(Integer, ForeignKey("seasons.id"), nullable=True, index=True)

    def __repr__(self) -> str:
        return f"<TeamDB {self.name} ({self.code})>"


class FixtureDB(Base):
    """SQLite table for generated fixtures."""

    __tablename__ = "fixtures"

    id = Column(Integer, primary_key=True, autoincrement=True)
    season_id = Column(Integer, ForeignKey("seasons.id"), nullable=False, index=True)
    home_team_id = Column(Integer, ForeignKey("teams.id"), nullable=False)
    away_team_id = Column(Integer, ForeignKey("teams.id"), nullable=False)
    round = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default="SCHEDULED")
    date = Column(Date, nullable=True)
    location = Column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<FixtureDB R{self.round} {self.home_team_id} v {self.away_team_id}>"
