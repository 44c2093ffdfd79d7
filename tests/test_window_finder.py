"""Test the cheapest window search."""
from datetime import timedelta

from custom_components.ev_chargeulator.domain.window_finder import find_cheapest_window
from custom_components.ev_chargeulator.models import PriceSlot

from .conftest import BASE_TIME, make_slots


def test_finds_cheapest_run():
    """Test the cheapest contiguous run is returned with its start index."""
    slots = make_slots([3, 1, 2, 1, 1])

    window = find_cheapest_window(slots, 2)

    assert window is not None
    assert window.start_index == 3
    assert window.cost == 2
    assert list(window.indices) == [3, 4]
    assert window.start == slots[3].start
    assert window.end == slots[4].end


def test_ties_keep_earliest_run():
    """Test equal cost runs resolve to the earliest start."""
    window = find_cheapest_window(make_slots([1, 1, 1, 1]), 2)

    assert window.start_index == 0


def test_excluded_indices_are_skipped():
    """Test runs touching an excluded index are never chosen."""
    slots = make_slots([3, 1, 2, 1, 1])

    window = find_cheapest_window(slots, 2, excluded_indices={3})

    assert window.start_index == 1
    assert window.cost == 3


def test_gap_breaks_contiguity():
    """Test a run spanning a hole in the forecast is invalid."""
    slots = make_slots([1, 1])
    later = BASE_TIME + timedelta(hours=2)
    slots.append(PriceSlot(start=later, end=later + timedelta(minutes=15), price=0.1))
    slots.append(
        PriceSlot(
            start=later + timedelta(minutes=15),
            end=later + timedelta(minutes=30),
            price=5,
        )
    )

    window = find_cheapest_window(slots, 2)

    # [1] + [2] would be cheapest (1.1) but is not contiguous
    assert window.start_index == 0
    assert window.cost == 2


def test_energy_per_slot_scales_cost():
    """Test cost is price times energy per slot."""
    window = find_cheapest_window(make_slots([2.0, 3.0]), 1, energy_per_slot=1.85)

    assert window.start_index == 0
    assert window.cost == 2.0 * 1.85


def test_no_valid_window():
    """Test None is returned when no run fits."""
    slots = make_slots([1, 2, 3])

    assert find_cheapest_window(slots, 4) is None
    assert find_cheapest_window(slots, 0) is None
    assert find_cheapest_window([], 1) is None
    assert find_cheapest_window(slots, 2, excluded_indices={1}) is None
