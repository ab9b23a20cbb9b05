"""Tests for the exposure-aware ranking score and the seeded generator."""

import pytest
from conftest import make_player

from slate_optimizer.optimization.models import ExposureState, Lineup, OptimizerConfig
from slate_optimizer.optimization.rng import MODULUS, SeededRandom, attempt_seed
from slate_optimizer.optimization.scoring import (
    effective_max_exposure,
    exposure_deficit,
    min_exposure_target,
    rank_players,
    score_player,
)


class FixedRandom:
    """Stand-in generator returning a constant draw."""

    def __init__(self, value: float = 0.0):
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture
def config() -> OptimizerConfig:
    return OptimizerConfig(num_lineups=10, salary_cap=50000, max_exposure=50)


def test_score_combines_priority_bonus_projection_ceiling_and_jitter(config):
    player = make_player("a", "PG", 8000, 30.0, ceiling=40.0, priority=1, bonus=2)

    score = score_player(player, count=0, iteration=0, config=config, jitter=0.5)

    assert score == pytest.approx(1_000_000 + 20_000 + 30.0 + 80.0 + 0.25)


def test_over_exposed_player_is_penalised_not_removed(config):
    """Exceeding max exposure shrinks the projection term to 0.1%."""
    player = make_player("a", "PG", 8000, 30.0)

    score = score_player(player, count=6, iteration=10, config=config, jitter=0.0)

    assert score == pytest.approx(0.03)
    assert score > 0


def test_player_max_exposure_overrides_batch_default(config):
    capped = make_player("a", "PG", 8000, 30.0, max_exposure=80)
    default = make_player("b", "PG", 8000, 30.0)

    assert effective_max_exposure(capped, config) == 80
    assert effective_max_exposure(default, config) == 50
    assert score_player(capped, count=6, iteration=10, config=config, jitter=0.0) == pytest.approx(30.0)


def test_under_exposed_player_gets_boost_and_deficit_bonus(config):
    player = make_player("a", "PG", 8000, 30.0, min_exposure=50)

    # target 5 appearances, 1 so far, 6 lineups left including this one
    score = score_player(player, count=1, iteration=4, config=config, jitter=0.0)

    assert min_exposure_target(player, 10) == 5
    assert exposure_deficit(player, 1, 10) == 4
    assert score == pytest.approx((30.0 + 4 / 6 * 2) * 1.25)


def test_exposure_target_rounds_up():
    player = make_player("a", "PG", 8000, 30.0, min_exposure=25)
    assert min_exposure_target(player, 10) == 3
    assert min_exposure_target(make_player("b", "PG", 8000, 30.0), 10) == 0


def test_rank_players_breaks_ties_by_salary(config):
    cheap = make_player("cheap", "PG", 5000, 30.0)
    pricey = make_player("pricey", "PG", 7000, 30.0)
    star = make_player("star", "PG", 9000, 45.0)

    ranked = rank_players([cheap, pricey, star], ExposureState(), 0, config, FixedRandom())

    assert [p.player_id for p in ranked] == ["star", "pricey", "cheap"]


def test_exposure_state_counts_lineup_appearances():
    state = ExposureState()
    lineup = Lineup("opt_0_0", {"PG": "a", "SG": "b"}, 10000, 50.0)

    state.record(lineup)
    state.record(lineup)

    assert state.count("a") == 2
    assert state.count("zzz") == 0


def test_seeded_random_is_reproducible():
    first = SeededRandom(attempt_seed(3, 17))
    second = SeededRandom(attempt_seed(3, 17))

    draws = [first.random() for _ in range(20)]

    assert draws == [second.random() for _ in range(20)]
    assert all(0 <= value < 1 for value in draws)


def test_seeded_random_matches_minimal_standard():
    rng = SeededRandom(1)
    assert rng.random() == pytest.approx(16807 / MODULUS)


def test_seeded_random_handles_non_positive_seed():
    rng = SeededRandom(0)
    assert 0 < rng.random() < 1


def test_attempt_seeds_differ_between_attempts():
    assert attempt_seed(0, 0) == 10_104
    assert attempt_seed(0, 1) != attempt_seed(0, 0)
    assert attempt_seed(1, 0) != attempt_seed(0, 0)


def test_shuffle_top_only_permutes_window():
    rng = SeededRandom(42)
    items = list(range(10))

    shuffled = rng.shuffle_top(items, 4)

    assert sorted(shuffled[:4]) == [0, 1, 2, 3]
    assert shuffled[4:] == items[4:]
    assert items == list(range(10))
