#!/usr/bin/env python3
"""generate_schedule.py — Generate and store a season's round-robin schedule.

Usage:
    python scripts/generate_schedule.py --season-id 1
    python scripts/generate_schedule.py --season-id 1 --rounds 2 --start-date 2026-03-01
    python scripts/generate_schedule.py --season-id 1 --seed 42 --csv out/schedule.csv
"""

from __future__ import annotations

import argparse
import datetime as dt
import logging
import random
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from leaguesched.utils.runtime import validate_runtime

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger("schedule")


def main() -> int:
    parser = argparse.ArgumentParser(description="leaguesched — Generate Season Schedule")
    parser.add_argument("--season-id", type=int, required=True, help="Season id")
    parser.add_argument(
        "--rounds",
        type=int,
        default=None,
        help="Number of round-robin rounds (default: from rules, 1)",
    )
    parser.add_argument(
        "--start-date",
        type=dt.date.fromisoformat,
        default=None,
        help="Date of round 1, YYYY-MM-DD (default: season start date)",
    )
    parser.add_argument("--interval-days", type=int, default=None, help="Days between rounds")
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible order")
    parser.add_argument("--db-path", default="data/leagues.db", help="SQLite database path")
    parser.add_argument(
        "--rules",
        default=None,
        help="Path to rules.json (default: config/rules.json next to the package)",
    )
    parser.add_argument("--csv", default=None, help="Also export the schedule to this CSV")
    parser.add_argument("--snapshot", default=None, help="Also export a JSON snapshot")
    parser.add_argument("--quiet", "-q", action="store_true", help="Minimal output")
    args = parser.parse_args()

    try:
        validate_runtime(
            db_path=args.db_path,
            rules_path=args.rules,
            check_rules=args.rules is not None,
        )
    except RuntimeError as exc:
        logger.error(str(exc))
        return 1

    from leaguesched.db.repository import (
        TeamRepository,
        export_schedule_csv,
        export_snapshot,
    )
    from leaguesched.db.session import get_engine, get_session, init_db
    from leaguesched.engine.rules import load_rules
    from leaguesched.engine.schedule_service import ScheduleService, SchedulingError

    engine = get_engine(args.db_path)
    init_db(engine)
    session = get_session(engine)

    try:
        try:
            rules = load_rules(args.rules)
            service = ScheduleService(session, rules=rules, rng=random.Random(args.seed))
            summary = service.generate_for_season(
                args.season_id,
                total_rounds=args.rounds,
                start_date=args.start_date,
                interval_days=args.interval_days,
            )
        except (SchedulingError, ValueError, OSError) as exc:
            logger.error(str(exc))
            return 1

        logger.info(summary.message)
        if summary.degraded:
            logger.warning(
                "Rounds %s could not avoid back-to-back fixtures", summary.degraded_rounds
            )

        names = {t.id: t.name for t in TeamRepository(session).get_by_season(args.season_id)}

        if not args.quiet:
            print()
            print(f"  {'Rnd':>3}  {'Date':<10}  {'Home':<25} {'Away':<25}")
            print("  " + "-" * 66)
            for fixture in summary.fixtures:
                date = fixture.date.isoformat() if fixture.date else "-"
                print(
                    f"  {fixture.round:>3}  {date:<10}  "
                    f"{names.get(fixture.home_team_id, '?'):<25} "
                    f"{names.get(fixture.away_team_id, '?'):<25}"
                )
            print()

        if args.csv:
            export_schedule_csv(summary.fixtures, args.csv, team_names=names)
        if args.snapshot:
            export_snapshot(session, args.snapshot)
    finally:
        session.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
