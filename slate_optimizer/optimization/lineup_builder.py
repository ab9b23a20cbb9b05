"""Randomized backtracking lineup generation for DraftKings NBA classic.

This file builds a portfolio of distinct lineups rather than one optimal
lineup. Each lineup comes from one "attempt":

1. Rank the pool with the exposure-aware score (scoring.py), using a
   generator seeded from the attempt coordinates
2. Place locked players (assignment.py)
3. Place players whose minimum exposure is falling behind (assignment.py)
4. Fill the remaining slots by depth-first search: for each open slot, take
   the top-K eligible players by score, shuffle them, and recurse on the
   first one that fits under the cap. A completed lineup must use nearly the
   whole cap, otherwise the search keeps backtracking.

An attempt either yields a complete lineup or is discarded as a whole. The
iteration controller repeats attempts until the requested number of unique
lineups exists or the attempt budget runs out, updating exposure counts
after every accepted lineup.

Key Concepts for Beginners:

Backtracking: Try a choice, recurse, and undo the choice if the recursion
fails. The slot table in SlotAssignment is only ever changed by
place()/remove() pairs, so failed branches leave no trace.

Exposure: The share of lineups in the batch that contain a player. Floors
are enforced by the required-set stage; ceilings only lower a player's score.

Determinism: All randomness comes from per-attempt seeded generators, so the
same pool and configuration always produce the same batch.
"""

import logging
from collections import Counter
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from .assignment import SlotAssignment, assign_locked, assign_required, build_required_set
from .exceptions import ConstraintInfeasibleError, PoolValidationError
from .models import ExposureState, Lineup, OptimizerConfig, PlayerProjection
from .rng import SeededRandom
from .scoring import rank_players
from .slots import DK_SLOTS

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Outcome of a batch run."""

    lineups: list[Lineup]
    attempts: int
    requested: int
    exposure: dict[str, int] = field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        """True when the requested number of lineups was produced."""
        return len(self.lineups) >= self.requested


def validate_pool(players: list[PlayerProjection]) -> None:
    """Reject pools that cannot fill a roster before any search work.

    Raises:
        PoolValidationError: Pool smaller than the roster, duplicate player
            ids, or a slot with no eligible player
    """
    if len(players) < len(DK_SLOTS):
        raise PoolValidationError(
            f"Optimizer pool too small ({len(players)} players, need at least {len(DK_SLOTS)}). "
            "Relax upstream filters."
        )

    id_counts = Counter(player.player_id for player in players)
    duplicates = sorted(pid for pid, count in id_counts.items() if count > 1)
    if duplicates:
        raise PoolValidationError(f"Duplicate player ids in pool: {', '.join(duplicates)}")

    for slot in DK_SLOTS:
        if not any(slot in player.eligible_slots for player in players):
            raise PoolValidationError(
                f"No eligible players for {slot} after filters. Relax upstream filters.", slot=slot
            )


class LineupBuilder:
    """Generates a batch of unique lineups for one configuration.

    Example:
    ```python
    builder = LineupBuilder(OptimizerConfig(num_lineups=20))
    result = builder.generate_lineups(pool)
    ```
    """

    def __init__(self, config: OptimizerConfig | None = None):
        self.config = config or OptimizerConfig()
        self.attempts = 0

    def build_lineup(
        self,
        players: list[PlayerProjection],
        exposure: ExposureState,
        iteration: int,
        attempt: int,
    ) -> Lineup | None:
        """Run one attempt; returns None when the attempt fails.

        Args:
            players: Validated player pool
            exposure: Appearance counts of the batch so far
            iteration: Index of the lineup being built
            attempt: Running attempt counter, used for seeding and the lineup id
        """
        config = self.config
        rng = SeededRandom.for_attempt(iteration, attempt)
        ranked = rank_players(players, exposure, iteration, config, rng)
        assignment = SlotAssignment()

        try:
            assign_locked(players, assignment, config)
            required = build_required_set(
                players, exposure, iteration, config, len(assignment.open_slots())
            )
            assign_required(required, assignment, iteration, config, rng)
        except ConstraintInfeasibleError as e:
            logger.debug(f"Attempt {attempt} discarded: {e}")
            return None

        if not self._fill_slots(ranked, assignment, rng):
            logger.debug(f"Attempt {attempt} discarded: no near-cap completion found")
            return None

        return Lineup(
            lineup_id=f"opt_{iteration}_{attempt}",
            slots=assignment.slot_ids(),
            total_salary=assignment.total_salary,
            projected_points=round(assignment.total_projection, 2),
        )

    def _fill_slots(
        self, ranked: list[PlayerProjection], assignment: SlotAssignment, rng: SeededRandom
    ) -> bool:
        """Complete every open slot by randomized depth-first search."""
        config = self.config
        min_salary = config.salary_cap - config.cap_slack_threshold
        by_salary_desc = sorted(ranked, key=lambda p: p.salary, reverse=True)

        def salary_bounds(open_count: int) -> tuple[int, int]:
            # Cheapest and priciest completion over all unselected players
            available = [p.salary for p in by_salary_desc if not assignment.contains(p)]
            if len(available) < open_count:
                return config.salary_cap + 1, 0
            return sum(available[len(available) - open_count:]), sum(available[:open_count])

        def fill_from(slot_idx: int) -> bool:
            if slot_idx == len(DK_SLOTS):
                return assignment.total_salary > min_salary
            slot = DK_SLOTS[slot_idx]
            if not assignment.is_open(slot):
                return fill_from(slot_idx + 1)

            open_count = len(DK_SLOTS) - len(assignment)
            cheapest, priciest = salary_bounds(open_count)
            if assignment.total_salary + cheapest > config.salary_cap:
                return False
            if assignment.total_salary + priciest <= min_salary:
                return False

            eligible = [
                p for p in ranked if slot in p.eligible_slots and not assignment.contains(p)
            ]
            window = rng.shuffle_top(eligible[: config.shuffle_window], config.shuffle_window)
            for player in window:
                if not assignment.fits(player, config.salary_cap):
                    continue
                assignment.place(slot, player)
                if fill_from(slot_idx + 1):
                    return True
                assignment.remove(slot)
            return False

        return fill_from(0)

    def iter_lineups(
        self, players: list[PlayerProjection], exposure: ExposureState | None = None
    ) -> Iterator[Lineup]:
        """Yield unique lineups as they are found.

        Stops when the requested count is reached or the attempt budget is
        spent. ``self.attempts`` holds the number of attempts made so far.
        """
        config = self.config
        config.validate()
        validate_pool(players)
        exposure = exposure if exposure is not None else ExposureState()
        seen: set[str] = set()
        found = 0
        self.attempts = 0

        logger.info(
            f"Building {config.num_lineups} lineups from {len(players)} players "
            f"(cap ${config.salary_cap}, budget {config.max_attempts} attempts)"
        )
        while found < config.num_lineups and self.attempts < config.max_attempts:
            lineup = self.build_lineup(players, exposure, found, self.attempts)
            self.attempts += 1
            if lineup is None:
                continue
            if lineup.signature in seen:
                logger.debug(f"Attempt {self.attempts - 1} discarded: duplicate lineup")
                continue
            seen.add(lineup.signature)
            exposure.record(lineup)
            found += 1
            yield lineup

        if found < config.num_lineups:
            logger.warning(
                f"Attempt budget exhausted: generated {found} of {config.num_lineups} lineups "
                f"in {self.attempts} attempts"
            )
        else:
            logger.info(f"Generated {found} lineups in {self.attempts} attempts")

    def generate_lineups(
        self,
        players: list[PlayerProjection],
        on_progress: Callable[[Lineup, int], None] | None = None,
    ) -> BatchResult:
        """Generate the whole batch.

        Args:
            players: Player pool
            on_progress: Called with each accepted lineup and the count so far

        Returns:
            BatchResult, possibly shorter than requested
        """
        exposure = ExposureState()
        lineups = []
        for lineup in self.iter_lineups(players, exposure):
            lineups.append(lineup)
            if on_progress is not None:
                on_progress(lineup, len(lineups))
        return BatchResult(
            lineups=lineups,
            attempts=self.attempts,
            requested=self.config.num_lineups,
            exposure=exposure.as_dict(),
        )
