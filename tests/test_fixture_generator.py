"""Tests for the fixture generator — pairings, constrained shuffle, full schedule.

Covers: pair completeness, home/away parity, adjacency validity, the
best-effort fallback when the shuffle budget runs out, and match dates.
"""

from __future__ import annotations

import datetime as dt
import logging
import random
from collections import Counter
from itertools import combinations
from unittest.mock import patch

import pytest

from leaguesched.engine import fixture_generator
from leaguesched.engine.fixture_generator import (
    MAX_SHUFFLE_ATTEMPTS,
    assign_dates,
    fixtures_per_round,
    generate_pairings,
    generate_schedule,
    generate_schedule_result,
    is_valid_order,
    shuffle_fixtures,
    total_fixtures,
)
from leaguesched.models.fixture import Fixture, GameStatus

LOGGER_NAME = "leaguesched.engine.fixture_generator"


def _fx(home: int, away: int, round_number: int = 1) -> Fixture:
    return Fixture(home_team_id=home, away_team_id=away, round=round_number)


def _pairs(fixtures) -> set[frozenset[int]]:
    return {frozenset(f.teams) for f in fixtures}


class RecordingRandom(random.Random):
    """Random that remembers the list it was asked to shuffle each time."""

    def __init__(self, seed: int = 0):
        super().__init__(seed)
        self.seen: list[list[Fixture]] = []

    def shuffle(self, x):
        self.seen.append(list(x))
        super().shuffle(x)


# ── Pairing Generator ─────────────────────────────────────────────────


class TestPairings:
    @pytest.mark.parametrize("n", [2, 3, 4, 5, 8, 11])
    def test_every_pair_once(self, n):
        teams = list(range(1, n + 1))
        fixtures = generate_pairings(teams, 1)
        assert len(fixtures) == n * (n - 1) // 2
        assert _pairs(fixtures) == {frozenset(p) for p in combinations(teams, 2)}

    def test_no_self_pairing(self):
        for f in generate_pairings([3, 9, 27, 81, 243], 2):
            assert f.home_team_id != f.away_team_id

    def test_odd_round_keeps_roster_order(self):
        fixtures = generate_pairings([1, 2, 3, 4], 1)
        assert [f.teams for f in fixtures] == [
            (1, 2), (1, 3), (1, 4), (2, 3), (2, 4), (3, 4),
        ]

    def test_even_round_swaps_sides(self):
        fixtures = generate_pairings([1, 2, 3, 4], 2)
        assert [f.teams for f in fixtures] == [
            (2, 1), (3, 1), (4, 1), (3, 2), (4, 2), (4, 3),
        ]

    def test_roster_order_is_respected(self):
        fixtures = generate_pairings([30, 10, 20], 1)
        assert [f.teams for f in fixtures] == [(30, 10), (30, 20), (10, 20)]

    def test_round_and_status(self):
        fixtures = generate_pairings([1, 2, 3], 5)
        assert all(f.round == 5 for f in fixtures)
        assert all(f.status == GameStatus.SCHEDULED for f in fixtures)
        assert all(f.date is None and f.id is None for f in fixtures)


# ── Validity Predicate ────────────────────────────────────────────────


class TestIsValidOrder:
    def test_empty_and_single(self):
        assert is_valid_order([])
        assert is_valid_order([_fx(1, 2)])

    def test_disjoint_neighbours(self):
        assert is_valid_order([_fx(1, 2), _fx(3, 4), _fx(1, 3), _fx(2, 4)])

    def test_shared_home_team(self):
        assert not is_valid_order([_fx(1, 2), _fx(1, 3)])

    def test_home_meets_away(self):
        assert not is_valid_order([_fx(3, 4), _fx(1, 2), _fx(2, 5)])

    def test_only_adjacent_pairs_matter(self):
        # 1 appears twice but never back to back
        assert is_valid_order([_fx(1, 2), _fx(3, 4), _fx(1, 5)])


# ── Constrained Shuffle ───────────────────────────────────────────────


class TestShuffleFixtures:
    def test_valid_input_returned_untouched(self):
        fixtures = [_fx(1, 2), _fx(3, 4), _fx(5, 6)]
        rng = RecordingRandom()
        outcome = shuffle_fixtures(fixtures, rng=rng)
        assert outcome.valid
        assert outcome.attempts == 0
        assert outcome.fixtures == fixtures
        assert rng.seen == []

    def test_single_fixture(self):
        outcome = shuffle_fixtures([_fx(1, 2)])
        assert outcome.valid
        assert outcome.attempts == 0
        assert len(outcome.fixtures) == 1

    def test_converges_when_orderings_are_plentiful(self):
        # Half of all permutations keep (1,2) and (1,3) apart
        fixtures = [_fx(1, 2), _fx(1, 3), _fx(4, 5), _fx(6, 7)]
        outcome = shuffle_fixtures(fixtures, rng=random.Random(7))
        assert outcome.valid
        assert 1 <= outcome.attempts < MAX_SHUFFLE_ATTEMPTS
        assert is_valid_order(outcome.fixtures)

    def test_preserves_multiset(self):
        fixtures = generate_pairings([1, 2, 3, 4, 5, 6], 1)
        outcome = shuffle_fixtures(fixtures, rng=random.Random(3), max_attempts=50)
        assert len(outcome.fixtures) == len(fixtures)
        assert Counter(f.teams for f in outcome.fixtures) == Counter(f.teams for f in fixtures)

    def test_input_not_mutated(self):
        fixtures = generate_pairings([1, 2, 3, 4], 1)
        before = list(fixtures)
        shuffle_fixtures(fixtures, rng=random.Random(1), max_attempts=20)
        assert fixtures == before

    def test_each_retry_shuffles_the_original(self):
        fixtures = generate_pairings([1, 2, 3], 1)
        rng = RecordingRandom()
        shuffle_fixtures(fixtures, rng=rng, max_attempts=5)
        assert len(rng.seen) == 5
        assert all(seen == fixtures for seen in rng.seen)

    def test_three_teams_exhaust_budget(self, caplog):
        # Any two of the three pairings share a team
        fixtures = generate_pairings([1, 2, 3], 1)
        with caplog.at_level(logging.WARNING, logger=LOGGER_NAME):
            outcome = shuffle_fixtures(fixtures, rng=random.Random(0))
        assert not outcome.valid
        assert outcome.attempts == MAX_SHUFFLE_ATTEMPTS
        assert _pairs(outcome.fixtures) == _pairs(fixtures)
        assert "best-effort" in caplog.text

    def test_forced_exhaustion_never_raises(self, caplog):
        fixtures = [_fx(1, 2), _fx(3, 4), _fx(5, 6), _fx(7, 8)]
        with patch.object(fixture_generator, "is_valid_order", return_value=False):
            with caplog.at_level(logging.WARNING, logger=LOGGER_NAME):
                outcome = shuffle_fixtures(fixtures, rng=random.Random(0), max_attempts=25)
        assert not outcome.valid
        assert outcome.attempts == 25
        assert sorted(f.teams for f in outcome.fixtures) == sorted(f.teams for f in fixtures)
        assert len(caplog.records) == 1
        assert caplog.records[0].levelno == logging.WARNING

    def test_zero_budget_keeps_original(self):
        fixtures = generate_pairings([1, 2, 3], 1)
        outcome = shuffle_fixtures(fixtures, max_attempts=0)
        assert not outcome.valid
        assert outcome.attempts == 0
        assert outcome.fixtures == fixtures

    def test_seeded_rng_is_reproducible(self):
        fixtures = generate_pairings([1, 2, 3, 4, 5], 1)
        a = shuffle_fixtures(fixtures, rng=random.Random(99), max_attempts=30)
        b = shuffle_fixtures(fixtures, rng=random.Random(99), max_attempts=30)
        assert a.fixtures == b.fixtures
        assert a.attempts == b.attempts


# ── Round Orchestrator ────────────────────────────────────────────────


class TestGenerateSchedule:
    def test_fixture_count(self):
        fixtures = generate_schedule([1, 2, 3, 4, 5], 3, rng=random.Random(1), max_attempts=20)
        assert len(fixtures) == total_fixtures(5, 3) == 30

    def test_grouped_by_ascending_round(self):
        fixtures = generate_schedule([1, 2, 3, 4, 5], 4, rng=random.Random(2), max_attempts=20)
        rounds = [f.round for f in fixtures]
        assert rounds == sorted(rounds)
        assert set(rounds) == {1, 2, 3, 4}

    def test_each_round_is_complete_round_robin(self):
        teams = [1, 2, 3, 4, 5, 6]
        fixtures = generate_schedule(teams, 2, rng=random.Random(3), max_attempts=20)
        expected = {frozenset(p) for p in combinations(teams, 2)}
        for r in (1, 2):
            round_fx = [f for f in fixtures if f.round == r]
            assert len(round_fx) == fixtures_per_round(6)
            assert _pairs(round_fx) == expected

    def test_consecutive_rounds_flip_home_and_away(self):
        fixtures = generate_schedule([1, 2, 3, 4, 5], 3, rng=random.Random(4), max_attempts=20)
        by_round: dict[int, dict[frozenset[int], int]] = {}
        for f in fixtures:
            by_round.setdefault(f.round, {})[frozenset(f.teams)] = f.home_team_id
        for k in (1, 2):
            for pair, home in by_round[k].items():
                assert by_round[k + 1][pair] != home

    def test_four_teams_two_rounds(self):
        fixtures = generate_schedule([1, 2, 3, 4], 2, rng=random.Random(5), max_attempts=10)
        natural = {(1, 2), (1, 3), (1, 4), (2, 3), (2, 4), (3, 4)}
        assert len(fixtures) == 12
        assert {f.teams for f in fixtures if f.round == 1} == natural
        assert {f.teams for f in fixtures if f.round == 2} == {(b, a) for a, b in natural}

    def test_two_teams(self):
        fixtures = generate_schedule([7, 8], 1)
        assert [f.teams for f in fixtures] == [(7, 8)]

        fixtures = generate_schedule([7, 8], 2)
        assert [(f.round, f.teams) for f in fixtures] == [(1, (7, 8)), (2, (8, 7))]

    @pytest.mark.parametrize("rounds", [None, 0, -3])
    def test_missing_rounds_default_to_one(self, rounds):
        fixtures = generate_schedule([1, 2, 3], rounds, max_attempts=5)
        assert len(fixtures) == 3
        assert {f.round for f in fixtures} == {1}

    def test_orientation_is_deterministic_order_is_not_required(self):
        a = generate_schedule([1, 2, 3, 4, 5], 2, rng=random.Random(10), max_attempts=20)
        b = generate_schedule([1, 2, 3, 4, 5], 2, rng=random.Random(11), max_attempts=20)
        for r in (1, 2):
            assert {f.teams for f in a if f.round == r} == {f.teams for f in b if f.round == r}

    def test_same_seed_same_schedule(self):
        a = generate_schedule([1, 2, 3, 4, 5], 2, rng=random.Random(12), max_attempts=20)
        b = generate_schedule([1, 2, 3, 4, 5], 2, rng=random.Random(12), max_attempts=20)
        assert a == b


class TestScheduleResult:
    def test_three_teams_every_round_degraded(self):
        result = generate_schedule_result([1, 2, 3], 2, rng=random.Random(0), max_attempts=10)
        assert result.degraded
        assert result.degraded_rounds == [1, 2]
        assert len(result.fixtures) == 6

    def test_two_teams_not_degraded(self):
        result = generate_schedule_result([1, 2], 3)
        assert not result.degraded
        assert result.total_rounds == 3

    def test_round_fixtures(self):
        result = generate_schedule_result([1, 2, 3, 4], 2, rng=random.Random(1), max_attempts=5)
        assert len(result.round_fixtures(2)) == 6
        assert all(f.round == 2 for f in result.round_fixtures(2))

    def test_counts_helpers(self):
        assert fixtures_per_round(2) == 1
        assert fixtures_per_round(10) == 45
        assert total_fixtures(4, 2) == 12


# ── Match Dates ───────────────────────────────────────────────────────


class TestAssignDates:
    def test_weekly_by_round(self):
        fixtures = [_fx(1, 2, 1), _fx(3, 4, 1), _fx(2, 1, 2), _fx(1, 3, 3)]
        dated = assign_dates(fixtures, dt.date(2026, 3, 1))
        assert [f.date for f in dated] == [
            dt.date(2026, 3, 1),
            dt.date(2026, 3, 1),
            dt.date(2026, 3, 8),
            dt.date(2026, 3, 15),
        ]

    def test_custom_interval_keeps_order(self):
        fixtures = [_fx(1, 2, 2), _fx(3, 4, 1)]
        dated = assign_dates(fixtures, dt.date(2026, 1, 1), interval_days=3)
        assert [f.teams for f in dated] == [(1, 2), (3, 4)]
        assert dated[0].date == dt.date(2026, 1, 4)

    def test_originals_untouched(self):
        fixtures = [_fx(1, 2)]
        assign_dates(fixtures, dt.date(2026, 1, 1))
        assert fixtures[0].date is None

    def test_negative_interval_rejected(self):
        with pytest.raises(ValueError):
            assign_dates([_fx(1, 2)], dt.date(2026, 1, 1), interval_days=-1)
