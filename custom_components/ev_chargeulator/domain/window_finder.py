"""Cheapest contiguous charge window search."""

from __future__ import annotations

from collections.abc import Container, Sequence

from ..models.data_models import ChargeWindow, PriceSlot


def _is_valid_window(
    slots: Sequence[PriceSlot],
    start: int,
    window_length: int,
    excluded_indices: Container[int],
) -> bool:
    for offset in range(window_length):
        index = start + offset
        if index in excluded_indices:
            return False
        if offset > 0 and slots[index - 1].end != slots[index].start:
            return False
    return True


def find_cheapest_window(
    slots: Sequence[PriceSlot],
    window_length: int,
    excluded_indices: Container[int] = frozenset(),
    energy_per_slot: float = 1.0,
) -> ChargeWindow | None:
    """Find the cheapest valid run of window_length slots.

    A run is valid when none of its indices is excluded and every slot ends
    exactly where the next one starts. Cost is price * energy_per_slot summed
    over the run. Ties keep the earliest run.

    Returns:
        The cheapest ChargeWindow, or None when no valid run exists
    """
    if window_length <= 0 or window_length > len(slots):
        return None

    best: ChargeWindow | None = None
    for start in range(len(slots) - window_length + 1):
        if not _is_valid_window(slots, start, window_length, excluded_indices):
            continue

        window_slots = tuple(slots[start:start + window_length])
        cost = sum(slot.price * energy_per_slot for slot in window_slots)
        if best is None or cost < best.cost:
            best = ChargeWindow(start_index=start, slots=window_slots, cost=cost)

    return best
