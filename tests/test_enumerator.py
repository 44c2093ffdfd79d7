"""Test candidate plan enumeration."""
import pytest

from custom_components.ev_chargeulator.domain.enumerator import (
    enumerate_plans,
    split_block_lengths,
)

from .conftest import make_slots


@pytest.mark.parametrize(
    ("slots_to_charge", "split_count", "min_slots", "expected"),
    [
        (4, 1, 1, [4]),
        (5, 2, 1, [3, 2]),
        (7, 3, 2, [3, 2, 2]),
        (8, 3, 1, [3, 3, 2]),
        (4, 2, 2, [2, 2]),
        (4, 3, 2, None),
    ],
)
def test_split_block_lengths(slots_to_charge, split_count, min_slots, expected):
    """Test the remainder goes to the earliest blocks first."""
    assert split_block_lengths(slots_to_charge, split_count, min_slots) == expected


def test_one_candidate_per_split_count():
    """Test two windows beat one long window around a price spike."""
    slots = make_slots([1.1, 1.2, 3.5, 1.4, 1.2, 1.1, 2.4])

    candidates = enumerate_plans(4, 2, 1, slots, 1.0)

    assert len(candidates) == 2
    single, split = candidates
    assert [w.start_index for w in single.windows] == [3]
    assert single.cost == pytest.approx(6.1)
    assert [list(w.indices) for w in split.windows] == [[0, 1], [4, 5]]
    assert split.cost == pytest.approx(4.6)


def test_windows_sorted_by_start():
    """Test windows come out in time order, not placement order."""
    slots = make_slots([2, 2, 9, 1, 1])

    candidates = enumerate_plans(4, 2, 1, slots, 1.0)

    # Second block is placed after the first but lies earlier in time
    assert [w.start_index for w in candidates[1].windows] == [0, 3]


def test_split_count_capped_by_slots_to_charge():
    """Test no more windows than slots are tried."""
    candidates = enumerate_plans(2, 5, 1, make_slots([1, 2, 3, 4]), 1.0)

    assert len(candidates) == 2


def test_minimum_window_length_limits_splits():
    """Test split counts that break the minimum are skipped."""
    candidates = enumerate_plans(3, 3, 2, make_slots([1, 2, 3, 4, 5]), 1.0)

    assert len(candidates) == 1
    assert len(candidates[0].windows[0]) == 3


def test_greedy_placement_can_fail():
    """Test a split is dropped when an early block blocks the later ones."""
    slots = make_slots([5, 1, 1, 5])

    candidates = enumerate_plans(4, 2, 1, slots, 1.0)

    # [2, 2] takes the middle first and leaves two isolated slots
    assert len(candidates) == 1
    assert candidates[0].cost == 12


def test_no_candidates():
    """Test an empty list when nothing fits."""
    assert enumerate_plans(3, 2, 1, make_slots([1, 2]), 1.0) == []
