"""Candidate plan enumeration over split counts."""

from __future__ import annotations

from collections.abc import Sequence

from ..models.data_models import ChargeWindow, PlanCandidate, PriceSlot
from .window_finder import find_cheapest_window


def split_block_lengths(
    slots_to_charge: int,
    split_count: int,
    min_slots_per_window: int,
) -> list[int] | None:
    """Split slots_to_charge into split_count balanced block lengths.

    Every block starts at min_slots_per_window and the remainder is handed
    out one slot at a time starting at block 0, so earlier blocks take the
    extra slots.

    Returns:
        Block lengths, or None if the minimum already exceeds slots_to_charge
    """
    remainder = slots_to_charge - min_slots_per_window * split_count
    if remainder < 0:
        return None

    blocks = [min_slots_per_window] * split_count
    index = 0
    while remainder > 0:
        blocks[index % split_count] += 1
        remainder -= 1
        index += 1
    return blocks


def _build_candidate(
    blocks: list[int],
    slots: Sequence[PriceSlot],
    energy_per_slot: float,
) -> PlanCandidate | None:
    used: set[int] = set()
    windows: list[ChargeWindow] = []
    for length in blocks:
        window = find_cheapest_window(slots, length, used, energy_per_slot)
        if window is None or len(window) != length:
            return None
        used.update(window.indices)
        windows.append(window)

    windows.sort(key=lambda w: w.start_index)
    return PlanCandidate(
        cost=sum(window.cost for window in windows),
        windows=tuple(windows),
    )


def enumerate_plans(
    slots_to_charge: int,
    max_windows: int,
    min_slots_per_window: int,
    slots: Sequence[PriceSlot],
    energy_per_slot: float,
) -> list[PlanCandidate]:
    """Build one candidate plan per feasible split count.

    For split counts 1..min(slots_to_charge, max_windows) the blocks are
    placed greedily in order, each on the cheapest window that does not
    overlap blocks already placed for the same split count. A split count
    where any block cannot be placed produces no candidate.

    Returns:
        Candidates in split-count order (may be empty)
    """
    candidates: list[PlanCandidate] = []
    for split_count in range(1, min(slots_to_charge, max_windows) + 1):
        blocks = split_block_lengths(slots_to_charge, split_count, min_slots_per_window)
        if blocks is None:
            continue

        candidate = _build_candidate(blocks, slots, energy_per_slot)
        if candidate is not None:
            candidates.append(candidate)

    return candidates
