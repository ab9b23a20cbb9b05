"""Tests for roster slot eligibility."""

from conftest import make_player

from slate_optimizer.optimization.slots import (
    DK_SLOTS,
    eligible,
    eligible_slots_for,
    parse_positions,
    slot_accepts,
)


def test_parse_positions_handles_multi_position_strings():
    assert parse_positions("PG/SG") == {"PG", "SG"}
    assert parse_positions(" sf , pf ") == {"SF", "PF"}
    assert parse_positions("PF/C/F/UTIL") == {"PF", "C"}
    assert parse_positions("") == frozenset()
    assert parse_positions(None) == frozenset()


def test_primary_slots_require_their_position():
    assert slot_accepts("PG", frozenset({"PG"}))
    assert not slot_accepts("PG", frozenset({"SG"}))
    assert slot_accepts("C", frozenset({"PF", "C"}))
    assert not slot_accepts("UNKNOWN", frozenset({"PG"}))


def test_combined_slots_accept_either_position():
    assert slot_accepts("G", frozenset({"PG"}))
    assert slot_accepts("G", frozenset({"SG"}))
    assert not slot_accepts("G", frozenset({"SF"}))
    assert slot_accepts("F", frozenset({"PF"}))
    assert not slot_accepts("F", frozenset({"C"}))


def test_util_accepts_anyone():
    assert slot_accepts("UTIL", frozenset())
    assert eligible_slots_for(frozenset()) == {"UTIL"}


def test_player_eligibility_is_precomputed():
    """Eligible slots are derived once from the position string."""
    guard = make_player("g1", "PG/SG", 6000, 30.0)
    big = make_player("b1", "PF/C", 6000, 30.0)

    assert guard.eligible_slots == {"PG", "SG", "G", "UTIL"}
    assert big.eligible_slots == {"PF", "C", "F", "UTIL"}
    assert all(eligible(guard, slot) == (slot in guard.eligible_slots) for slot in DK_SLOTS)
