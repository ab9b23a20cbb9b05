"""Slot assignment table and pre-placement of mandatory players.

A lineup under construction is a SlotAssignment: an explicit slot -> player
table with running salary and projection totals. Every search step places a
player and undoes the placement when it backtracks, so a failed branch always
leaves the table exactly as it found it.

Two stages run before the general slot filler:

1. Locked players: all locked players are placed, most constrained first
   (fewest eligible slots), by recursive backtracking under the cap.
2. Exposure-required players: players whose minimum exposure is falling
   behind are pulled into the lineup. Players that would otherwise miss their
   floor for good are mandatory; a rotating slice of the remaining
   under-exposed players is added on top to spread the catch-up work over
   the rest of the batch.

Either stage raises ConstraintInfeasibleError when it cannot complete, which
ends the current attempt.
"""

import logging
import math
from dataclasses import dataclass

from .exceptions import ConstraintInfeasibleError
from .models import ExposureState, OptimizerConfig, PlayerProjection
from .rng import SeededRandom
from .scoring import exposure_deficit, remaining_lineups
from .slots import DK_SLOTS

logger = logging.getLogger(__name__)


class SlotAssignment:
    """Mutable slot table with undo-on-backtrack semantics."""

    def __init__(self):
        self.slots: dict[str, PlayerProjection] = {}
        self.selected_ids: set[str] = set()
        self.total_salary = 0
        self.total_projection = 0.0

    def __len__(self) -> int:
        return len(self.slots)

    def is_open(self, slot: str) -> bool:
        return slot not in self.slots

    def open_slots(self) -> list[str]:
        return [slot for slot in DK_SLOTS if slot not in self.slots]

    def contains(self, player: PlayerProjection) -> bool:
        return player.player_id in self.selected_ids

    def fits(self, player: PlayerProjection, salary_cap: int) -> bool:
        return self.total_salary + player.salary <= salary_cap

    def place(self, slot: str, player: PlayerProjection) -> None:
        self.slots[slot] = player
        self.selected_ids.add(player.player_id)
        self.total_salary += player.salary
        self.total_projection += player.projected_points

    def remove(self, slot: str) -> PlayerProjection:
        player = self.slots.pop(slot)
        self.selected_ids.discard(player.player_id)
        self.total_salary -= player.salary
        self.total_projection -= player.projected_points
        return player

    def slot_ids(self) -> dict[str, str]:
        """Slot -> player id, in roster slot order."""
        return {slot: self.slots[slot].player_id for slot in DK_SLOTS if slot in self.slots}


def assign_players(
    players: list[PlayerProjection], assignment: SlotAssignment, salary_cap: int
) -> bool:
    """Place every player into an open eligible slot without breaking the cap.

    Players already in the lineup are skipped. Placement order is most
    constrained first. On failure the assignment is left unchanged.
    """
    pending = [player for player in players if not assignment.contains(player)]
    options = sorted(
        ((player, [slot for slot in DK_SLOTS if slot in player.eligible_slots]) for player in pending),
        key=lambda option: len(option[1]),
    )

    def place_from(idx: int) -> bool:
        if idx == len(options):
            return True
        player, slots = options[idx]
        for slot in slots:
            if not assignment.is_open(slot) or not assignment.fits(player, salary_cap):
                continue
            assignment.place(slot, player)
            if place_from(idx + 1):
                return True
            assignment.remove(slot)
        return False

    return place_from(0)


def assign_locked(
    players: list[PlayerProjection], assignment: SlotAssignment, config: OptimizerConfig
) -> None:
    """Place all locked players or raise ConstraintInfeasibleError."""
    locked = [player for player in players if player.locked]
    if not locked:
        return
    if not assign_players(locked, assignment, config.salary_cap):
        raise ConstraintInfeasibleError(
            f"Cannot place {len(locked)} locked players under the ${config.salary_cap} cap"
        )


@dataclass
class DeficitEntry:
    player: PlayerProjection
    deficit: int
    must_include: bool


@dataclass
class RequiredSet:
    """Players the current lineup should contain to keep exposure floors on track."""

    must_include: list[PlayerProjection]
    extras: list[PlayerProjection]
    extra_count: int
    total_deficit: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.must_include and not self.extras


def build_required_set(
    players: list[PlayerProjection],
    exposure: ExposureState,
    iteration: int,
    config: OptimizerConfig,
    open_slot_count: int,
) -> RequiredSet:
    """Split under-exposed players into mandatory and optional picks.

    A player is mandatory when its deficit is at least the number of lineups
    left: skipping it now would make its floor unreachable. The optional
    extras are ranked by deficit, then priority, then projection.
    """
    remaining = remaining_lineups(config, iteration)
    entries = []
    for player in players:
        if player.locked or player.min_exposure is None:
            continue
        deficit = exposure_deficit(player, exposure.count(player.player_id), config.num_lineups)
        if deficit <= 0:
            continue
        entries.append(DeficitEntry(player, deficit, must_include=deficit >= remaining))

    must_include = [
        entry.player
        for entry in sorted(
            (entry for entry in entries if entry.must_include),
            key=lambda entry: entry.deficit,
            reverse=True,
        )
    ]
    extras = [
        entry.player
        for entry in sorted(
            (entry for entry in entries if not entry.must_include),
            key=lambda entry: (entry.deficit, entry.player.priority, entry.player.projected_points),
            reverse=True,
        )
    ]

    total_deficit = sum(entry.deficit for entry in entries)
    desired = max(len(must_include), math.ceil(total_deficit / remaining)) if entries else 0
    extra_count = max(0, min(open_slot_count - len(must_include), desired - len(must_include)))
    return RequiredSet(must_include, extras, min(extra_count, len(extras)), total_deficit)


def assign_required(
    required: RequiredSet,
    assignment: SlotAssignment,
    iteration: int,
    config: OptimizerConfig,
    rng: SeededRandom,
) -> None:
    """Place the mandatory players plus as many rotated extras as will fit.

    The extras slice starts at an offset derived from the iteration and the
    attempt's generator, so successive lineups favour different extras. When
    placement fails the slice shrinks by one; with no extras left and a
    mandatory player still unplaceable the attempt is infeasible.
    """
    if required.is_empty:
        return

    extra_limit = required.extra_count
    extras = required.extras
    while True:
        rotated = extras
        if len(extras) > 1 and extra_limit > 0:
            offset = (iteration + rng.randbelow(len(extras))) % len(extras)
            rotated = extras[offset:] + extras[:offset]

        candidates = required.must_include + rotated[:extra_limit]
        if not candidates:
            return
        if assign_players(candidates, assignment, config.salary_cap):
            if extra_limit < required.extra_count:
                logger.debug(
                    f"Placed {len(candidates)} exposure-required players "
                    f"({required.extra_count - extra_limit} extras dropped)"
                )
            return
        if extra_limit > 0:
            extra_limit -= 1
            continue
        raise ConstraintInfeasibleError(
            f"Cannot place {len(required.must_include)} players needed for minimum exposure"
        )
