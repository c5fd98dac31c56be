#!/usr/bin/env python3
"""import_roster.py — Create a season and load its teams from a CSV roster.

Usage:
    python scripts/import_roster.py --season-id 1 --name "Spring 2026" \
        --start-date 2026-03-01 --roster data/teams.csv
    python scripts/import_roster.py --season-id 1 --roster data/teams.csv --status ACTIVE
"""

from __future__ import annotations

import argparse
import datetime as dt
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from leaguesched.utils.runtime import validate_runtime

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger("roster")


def main() -> int:
    parser = argparse.ArgumentParser(description="leaguesched — Import Season Roster")
    parser.add_argument("--season-id", type=int, required=True, help="Season id")
    parser.add_argument("--roster", required=True, help="Roster CSV (Team[, Code, ID])")
    parser.add_argument("--name", default=None, help="Season name (new seasons)")
    parser.add_argument("--league", default="Unknown League", help="League name")
    parser.add_argument(
        "--start-date",
        type=dt.date.fromisoformat,
        default=None,
        help="Season start date, YYYY-MM-DD (default: today for new seasons)",
    )
    parser.add_argument(
        "--status",
        choices=["DRAFT", "ACTIVE", "COMPLETED"],
        default=None,
        help="Season status (default: keep existing, DRAFT for new seasons)",
    )
    parser.add_argument("--db-path", default="data/leagues.db", help="SQLite database path")
    args = parser.parse_args()

    try:
        validate_runtime(db_path=args.db_path)
    except RuntimeError as exc:
        logger.error(str(exc))
        return 1

    from leaguesched.db.repository import SeasonRepository, TeamRepository
    from leaguesched.db.session import get_engine, get_session, init_db
    from leaguesched.importers.roster_csv import load_roster
    from leaguesched.models.season import Season, SeasonStatus

    engine = get_engine(args.db_path)
    init_db(engine)
    session = get_session(engine)

    try:
        team_repo = TeamRepository(session)
        # Ids are global: keep this season's ids, number new teams above all others
        known_ids = {t.name: t.id for t in team_repo.get_by_season(args.season_id)}
        try:
            teams = load_roster(
                args.roster,
                season_id=args.season_id,
                start_id=team_repo.max_id() + 1,
                known_ids=known_ids,
            )
        except (FileNotFoundError, ValueError) as exc:
            logger.error(str(exc))
            return 1

        season_repo = SeasonRepository(session)
        season = season_repo.get(args.season_id)
        if season is None:
            season = Season(
                id=args.season_id,
                name=args.name or f"Season {args.season_id}",
                league_name=args.league,
                start_date=args.start_date or dt.date.today(),
            )
        else:
            updates = {}
            if args.name:
                updates["name"] = args.name
            if args.start_date:
                updates["start_date"] = args.start_date
            season = season.model_copy(update=updates)
        if args.status:
            season = season.model_copy(update={"status": SeasonStatus(args.status)})
        season_repo.save(season)

        try:
            teams = team_repo.replace_for_season(season.id, teams)
        except ValueError as exc:
            logger.error(str(exc))
            return 1
        logger.info(
            "Season %d (%s, %s): %d teams imported from %s",
            season.id, season.name, season.status.value, len(teams), args.roster,
        )
        for team in teams:
            print(f"  {team.id:>4}  {team.code:<5} {team.name}")
    finally:
        session.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
