"""Exposure-aware ranking score for candidates.

The score is a strict lexicographic-by-magnitude blend:

    priority * 1_000_000            externally computed tier priority
  + bonus * 10_000                  manual selections (locks, teams, matchups)
  + (projection + deficit_bonus) * penalty * min_boost
  + ceiling * 2
  + jitter * 0.5                    per-attempt random tie-breaker

where the exposure terms are evaluated against the batch built so far:

- penalty (0.001) applies once a player's running exposure exceeds its
  ceiling. The ceiling is soft: an over-exposed player can still be chosen
  when nothing better fits.
- min_boost (1.25) applies while exposure is below the player's floor.
- deficit_bonus grows with the number of appearances still missing to reach
  the floor, spread over the lineups still to be built.

The ranking is a preference order only. The slot filler shuffles within a
top-K window of it, so it never acts as a hard precedence.
"""

import math

from .models import ExposureState, OptimizerConfig, PlayerProjection
from .rng import SeededRandom

PRIORITY_WEIGHT = 1_000_000
BONUS_WEIGHT = 10_000
CEILING_WEIGHT = 2.0
JITTER_WEIGHT = 0.5
OVER_EXPOSURE_PENALTY = 0.001
UNDER_EXPOSURE_BOOST = 1.25
DEFICIT_BONUS_WEIGHT = 2.0


def effective_max_exposure(player: PlayerProjection, config: OptimizerConfig) -> float:
    """Player exposure ceiling in percent, falling back to the batch ceiling."""
    if player.max_exposure is not None:
        return player.max_exposure
    return config.max_exposure


def min_exposure_target(player: PlayerProjection, num_lineups: int) -> int:
    """Number of appearances needed to honour the player's exposure floor."""
    if player.min_exposure is None:
        return 0
    return math.ceil(player.min_exposure / 100 * num_lineups)


def exposure_deficit(player: PlayerProjection, count: int, num_lineups: int) -> int:
    """Appearances still missing to reach the exposure floor."""
    return max(0, min_exposure_target(player, num_lineups) - count)


def remaining_lineups(config: OptimizerConfig, iteration: int) -> int:
    """Lineups still to be built, including the current one (at least 1)."""
    return max(1, config.num_lineups - iteration)


def score_player(
    player: PlayerProjection,
    count: int,
    iteration: int,
    config: OptimizerConfig,
    jitter: float,
) -> float:
    """Ranking score of one player for the lineup at ``iteration``.

    Args:
        player: Candidate to score
        count: Appearances of the player in the batch so far
        iteration: Index of the lineup being built
        config: Batch configuration
        jitter: Draw in [0, 1) from the attempt's generator
    """
    exposure_pct = count / max(iteration, 1) * 100
    penalty = OVER_EXPOSURE_PENALTY if exposure_pct > effective_max_exposure(player, config) else 1.0
    min_floor = player.min_exposure or 0.0
    min_boost = UNDER_EXPOSURE_BOOST if exposure_pct < min_floor else 1.0

    deficit = exposure_deficit(player, count, config.num_lineups)
    deficit_bonus = 0.0
    if deficit > 0:
        deficit_bonus = deficit / remaining_lineups(config, iteration) * DEFICIT_BONUS_WEIGHT

    return (
        player.priority * PRIORITY_WEIGHT
        + player.bonus * BONUS_WEIGHT
        + (player.projected_points + deficit_bonus) * penalty * min_boost
        + (player.ceiling or 0.0) * CEILING_WEIGHT
        + jitter * JITTER_WEIGHT
    )


def rank_players(
    players: list[PlayerProjection],
    exposure: ExposureState,
    iteration: int,
    config: OptimizerConfig,
    rng: SeededRandom,
) -> list[PlayerProjection]:
    """Sort players by score descending, ties broken by salary descending.

    One jitter value is drawn per player, in pool order.
    """
    scored = [
        (score_player(player, exposure.count(player.player_id), iteration, config, rng.random()), player)
        for player in players
    ]
    scored.sort(key=lambda entry: (entry[0], entry[1].salary), reverse=True)
    return [player for _, player in scored]
