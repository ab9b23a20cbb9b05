"""DraftKings NBA classic roster slots and position eligibility.

Eight slots are filled per lineup:

- PG, SG, SF, PF, C: the five primary positions
- G: any guard (PG or SG)
- F: any forward (SF or PF)
- UTIL: any player

Position strings from salary files look like "PG", "PG/SG" or "SF/PF". They
are parsed once per candidate into a set of tags and from there into the set
of slots that candidate may fill, so the search only ever does set lookups.
"""

import re

DK_SLOTS: tuple[str, ...] = ("PG", "SG", "SF", "PF", "C", "G", "F", "UTIL")

PRIMARY_POSITIONS: frozenset[str] = frozenset({"PG", "SG", "SF", "PF", "C"})

# Position tags accepted by each slot; None means any candidate
SLOT_ELIGIBILITY: dict[str, frozenset[str] | None] = {
    "PG": frozenset({"PG"}),
    "SG": frozenset({"SG"}),
    "SF": frozenset({"SF"}),
    "PF": frozenset({"PF"}),
    "C": frozenset({"C"}),
    "G": frozenset({"PG", "SG"}),
    "F": frozenset({"SF", "PF"}),
    "UTIL": None,
}

_POSITION_SPLIT = re.compile(r"[/,|\s]+")


def parse_positions(position: str | None) -> frozenset[str]:
    """Parse a position string into primary position tags.

    Unknown tokens (including roster labels such as "G" or "UTIL" that some
    feeds append) are dropped.
    """
    if not position:
        return frozenset()
    tokens = (token.strip().upper() for token in _POSITION_SPLIT.split(position))
    return frozenset(token for token in tokens if token in PRIMARY_POSITIONS)


def slot_accepts(slot: str, tags: frozenset[str]) -> bool:
    """Check whether a slot accepts a candidate carrying the given tags."""
    if slot not in SLOT_ELIGIBILITY:
        return False
    accepted = SLOT_ELIGIBILITY[slot]
    return accepted is None or not accepted.isdisjoint(tags)


def eligible_slots_for(tags: frozenset[str]) -> frozenset[str]:
    """All slots a candidate with these tags may fill."""
    return frozenset(slot for slot in DK_SLOTS if slot_accepts(slot, tags))


def eligible(candidate, slot: str) -> bool:
    """Whether ``candidate`` may fill ``slot``.

    Uses the eligible slot set precomputed on the candidate at creation.
    """
    return slot in candidate.eligible_slots
