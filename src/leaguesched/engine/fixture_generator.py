"""Fixture generator — round-robin scheduling for league seasons.

Every round is a complete single round-robin: each pair of teams meets
exactly once. Home/away follows round parity (odd rounds keep the roster
order, even rounds swap it), so consecutive rounds mirror each other.

Within a round, fixtures are reshuffled until no team appears in two
consecutive fixtures. The search is bounded; when the budget runs out the
last shuffle is kept and a warning is logged.
"""

from __future__ import annotations

import datetime as dt
import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass, field
from itertools import combinations

from leaguesched.models.fixture import Fixture, GameStatus

logger = logging.getLogger(__name__)

MAX_SHUFFLE_ATTEMPTS = 1000
DEFAULT_INTERVAL_DAYS = 7


@dataclass
class ShuffleOutcome:
    """Ordering produced for one round and whether it met the adjacency rule."""
    fixtures: list[Fixture]
    valid: bool
    attempts: int = 0


@dataclass
class ScheduleResult:
    """Full schedule plus the rounds whose ordering is best-effort only."""
    fixtures: list[Fixture] = field(default_factory=list)
    total_rounds: int = 1
    degraded_rounds: list[int] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.degraded_rounds)

    def round_fixtures(self, round_number: int) -> list[Fixture]:
        return [f for f in self.fixtures if f.round == round_number]


def fixtures_per_round(num_teams: int) -> int:
    """C(n, 2): one fixture per unordered pair."""
    return num_teams * (num_teams - 1) // 2


def total_fixtures(num_teams: int, total_rounds: int) -> int:
    return total_rounds * fixtures_per_round(num_teams)


def generate_pairings(teams: Sequence[int], round_number: int) -> list[Fixture]:
    """Generate one fixture per pair of teams for a single round.

    Args:
        teams: Team ids in roster order. At least 2 are expected.
        round_number: 1-based round. Odd rounds play teams[i] at home
            against teams[j] (i < j); even rounds swap the sides.

    Returns:
        C(n, 2) fixtures in (i, j) order.
    """
    swap = round_number % 2 == 0
    fixtures = []
    for home, away in combinations(teams, 2):
        if swap:
            home, away = away, home
        fixtures.append(
            Fixture(
                home_team_id=home,
                away_team_id=away,
                round=round_number,
                status=GameStatus.SCHEDULED,
            )
        )
    return fixtures


def is_valid_order(fixtures: Sequence[Fixture]) -> bool:
    """True if no two adjacent fixtures share a team."""
    for current, nxt in zip(fixtures, fixtures[1:]):
        if current.shares_team_with(nxt):
            return False
    return True


def shuffle_fixtures(
    fixtures: Sequence[Fixture],
    rng: random.Random | None = None,
    max_attempts: int = MAX_SHUFFLE_ATTEMPTS,
) -> ShuffleOutcome:
    """Reorder a round so no team plays in two consecutive fixtures.

    The given order is tested first. Each retry shuffles a fresh copy of
    the original list (Fisher–Yates via ``Random.shuffle``), never the
    previous failed attempt. Never raises: if ``max_attempts`` shuffles all
    fail, the last one is returned with ``valid=False``.
    """
    rng = rng or random.Random()
    original = list(fixtures)
    candidate = list(original)
    attempts = 0

    while not is_valid_order(candidate) and attempts < max_attempts:
        candidate = list(original)
        rng.shuffle(candidate)
        attempts += 1

    valid = is_valid_order(candidate)
    if not valid:
        logger.warning(
            "Could not separate consecutive fixtures after %d attempts "
            "(%d fixtures); keeping best-effort order",
            attempts, len(original),
        )
    elif attempts:
        logger.debug("Valid fixture order found after %d attempts", attempts)

    return ShuffleOutcome(fixtures=candidate, valid=valid, attempts=attempts)


def generate_schedule_result(
    teams: Sequence[int],
    total_rounds: int | None = 1,
    rng: random.Random | None = None,
    max_attempts: int = MAX_SHUFFLE_ATTEMPTS,
) -> ScheduleResult:
    """Generate every round and report which ones missed the adjacency rule.

    A missing or non-positive ``total_rounds`` means a single round.
    """
    if not total_rounds or total_rounds < 1:
        total_rounds = 1
    rng = rng or random.Random()

    result = ScheduleResult(total_rounds=total_rounds)
    for round_number in range(1, total_rounds + 1):
        pairings = generate_pairings(teams, round_number)
        outcome = shuffle_fixtures(pairings, rng=rng, max_attempts=max_attempts)
        if not outcome.valid:
            result.degraded_rounds.append(round_number)
        result.fixtures.extend(outcome.fixtures)

    logger.info(
        "Generated %d fixtures: %d teams, %d rounds (%d best-effort)",
        len(result.fixtures), len(teams), total_rounds, len(result.degraded_rounds),
    )
    return result


def generate_schedule(
    teams: Sequence[int],
    total_rounds: int | None = 1,
    rng: random.Random | None = None,
    max_attempts: int = MAX_SHUFFLE_ATTEMPTS,
) -> list[Fixture]:
    """Generate the full fixture list, grouped by ascending round."""
    return generate_schedule_result(
        teams, total_rounds=total_rounds, rng=rng, max_attempts=max_attempts,
    ).fixtures


def assign_dates(
    fixtures: Sequence[Fixture],
    start_date: dt.date,
    interval_days: int = DEFAULT_INTERVAL_DAYS,
) -> list[Fixture]:
    """Date each fixture by round: start_date + (round - 1) * interval_days."""
    if interval_days < 0:
        raise ValueError(f"interval_days must be >= 0, got {interval_days}")
    return [
        f.model_copy(update={"date": start_date + dt.timedelta(days=(f.round - 1) * interval_days)})
        for f in fixtures
    ]
