"""Pure charge plan optimization.

This module contains the core algorithm for picking the cheapest charging
windows from a price forecast. It has NO dependencies on Home Assistant.

Flow:
- work out how much energy (and how many price slots) the battery needs
- fall back to the whole horizon when there are not enough slots
- enumerate one candidate per split count and keep the cheapest
- fold the chosen windows into ChargeSlots with a running SOC
- trim the rounding surplus off the most expensive window edge
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime, timedelta

from ..models.data_models import (
    ChargePlanResult,
    ChargeSlot,
    ChargeWindow,
    InvalidConfigurationError,
    PlanningRequest,
    PlanStatus,
    PriceSlot,
)
from .enumerator import enumerate_plans
from .price_slots import truncate_to_deadline

# Surplus below this many minutes is left in the plan
SURPLUS_TRIM_THRESHOLD_MINUTES = 5


def round_soc(value: float) -> int:
    """Round a SOC percentage half up."""
    return math.floor(value + 0.5)


def validate_planning_config(
    battery_size_kwh: float,
    energy_in_per_slot: float,
    energy_out_per_slot: float,
    min_slots_per_window: int,
    max_windows: int,
) -> None:
    """Reject configuration the optimizer cannot compute with.

    Raises:
        InvalidConfigurationError: on the first invalid value
    """
    if battery_size_kwh <= 0:
        raise InvalidConfigurationError(
            f"Battery size must be positive, got {battery_size_kwh} kWh"
        )
    if energy_out_per_slot <= 0:
        raise InvalidConfigurationError(
            f"Energy out per slot must be positive, got {energy_out_per_slot} kWh"
        )
    if energy_in_per_slot < 0:
        raise InvalidConfigurationError(
            f"Energy in per slot cannot be negative, got {energy_in_per_slot} kWh"
        )
    if min_slots_per_window < 1:
        raise InvalidConfigurationError(
            f"Minimum slots per window must be at least 1, got {min_slots_per_window}"
        )
    if max_windows < 1:
        raise InvalidConfigurationError(
            f"Maximum windows must be at least 1, got {max_windows}"
        )


class ChargePlanOptimizer:
    """Pure charge plan optimization.

    Stateless: every call works on its own inputs and returns a new
    ChargePlanResult.
    """

    @staticmethod
    def calculate(request: PlanningRequest) -> ChargePlanResult:
        """Calculate the plan for a gathered PlanningRequest."""
        return ChargePlanOptimizer.plan(
            current_soc=request.current_soc,
            target_soc=request.target_soc,
            battery_size_kwh=request.battery_size_kwh,
            energy_in_per_slot=request.energy_in_per_slot,
            energy_out_per_slot=request.energy_out_per_slot,
            price_slots=request.price_slots,
            min_slots_per_window=request.min_slots_per_window,
            max_windows=request.max_windows,
            complete_by=request.complete_by,
        )

    @staticmethod
    def plan(
        current_soc: float,
        target_soc: float,
        battery_size_kwh: float,
        energy_in_per_slot: float,
        energy_out_per_slot: float,
        price_slots: Sequence[PriceSlot],
        min_slots_per_window: int = 1,
        max_windows: int = 3,
        complete_by: datetime | None = None,
    ) -> ChargePlanResult:
        """Calculate the cheapest charging plan.

        Args:
            current_soc: Current battery SOC (0-100)
            target_soc: Wanted battery SOC (0-100)
            battery_size_kwh: Usable battery capacity
            energy_in_per_slot: Grid energy drawn per slot, used for cost
            energy_out_per_slot: Energy stored per slot, used for SOC
            price_slots: Time-ordered price forecast
            min_slots_per_window: Shortest allowed charge window
            max_windows: Maximum number of charge windows
            complete_by: Only slots starting before this instant are used

        Returns:
            ChargePlanResult with status telling why it looks the way it does

        Raises:
            InvalidConfigurationError: if sizes or rates are not usable
        """
        validate_planning_config(
            battery_size_kwh,
            energy_in_per_slot,
            energy_out_per_slot,
            min_slots_per_window,
            max_windows,
        )

        # Step 1: Energy needed
        energy_needed = max(0.0, (target_soc - current_soc) / 100.0 * battery_size_kwh)
        if energy_needed <= 0:
            return ChargePlanResult(status=PlanStatus.NO_CHARGING_NEEDED)

        # Step 2: Deadline
        slots = list(price_slots)
        if complete_by is not None:
            slots = truncate_to_deadline(slots, complete_by)

        # Step 3: Slots needed
        slots_to_charge = math.ceil(energy_needed / energy_out_per_slot)

        # Step 4: Not enough slots - charge through the whole horizon
        if len(slots) < slots_to_charge:
            return _whole_range_plan(
                slots,
                current_soc,
                battery_size_kwh,
                energy_in_per_slot,
                energy_out_per_slot,
                energy_needed,
                slots_to_charge,
            )

        # Step 5: Cheapest candidate, first split count wins ties
        candidates = enumerate_plans(
            slots_to_charge,
            max_windows,
            min_slots_per_window,
            slots,
            energy_in_per_slot,
        )
        if not candidates:
            return ChargePlanResult(
                status=PlanStatus.NO_FEASIBLE_PLAN,
                energy_needed=energy_needed,
                slots_to_charge=slots_to_charge,
            )
        best = min(candidates, key=lambda candidate: candidate.cost)

        # Step 6: Build charge slots
        charge_slots, total_energy, total_cost = _fold_windows(
            best.windows,
            current_soc,
            battery_size_kwh,
            energy_in_per_slot,
            energy_out_per_slot,
        )

        # Step 7: Trim the rounding surplus
        slot_minutes = slots[0].duration.total_seconds() / 60.0
        charge_slots, total_energy, total_cost = _trim_surplus(
            charge_slots,
            total_energy,
            total_cost,
            energy_needed,
            current_soc,
            battery_size_kwh,
            energy_in_per_slot,
            energy_out_per_slot,
            slot_minutes,
        )

        return ChargePlanResult(
            charge_slots=charge_slots,
            total_energy=total_energy,
            total_cost=total_cost,
            status=PlanStatus.PLANNED,
            energy_needed=energy_needed,
            slots_to_charge=slots_to_charge,
        )


def _average_price(slots: Sequence[PriceSlot]) -> float:
    return sum(slot.price for slot in slots) / len(slots)


def _whole_range_plan(
    slots: list[PriceSlot],
    current_soc: float,
    battery_size_kwh: float,
    energy_in_per_slot: float,
    energy_out_per_slot: float,
    energy_needed: float,
    slots_to_charge: int,
) -> ChargePlanResult:
    if not slots:
        return ChargePlanResult(
            status=PlanStatus.INSUFFICIENT_SLOTS,
            energy_needed=energy_needed,
            slots_to_charge=slots_to_charge,
        )

    energy = len(slots) * energy_out_per_slot
    cost = sum(slot.price * energy_in_per_slot for slot in slots)
    charge_delta = energy / battery_size_kwh * 100.0
    charge_slot = ChargeSlot(
        start=slots[0].start,
        end=slots[-1].end,
        avg_price=_average_price(slots),
        energy=energy,
        cost=cost,
        price_slots=tuple(slots),
        charge=round_soc(current_soc + charge_delta),
        charge_delta=charge_delta,
    )
    return ChargePlanResult(
        charge_slots=(charge_slot,),
        total_energy=energy,
        total_cost=cost,
        status=PlanStatus.INSUFFICIENT_SLOTS,
        energy_needed=energy_needed,
        slots_to_charge=slots_to_charge,
    )


def _fold_windows(
    windows: Sequence[ChargeWindow],
    current_soc: float,
    battery_size_kwh: float,
    energy_in_per_slot: float,
    energy_out_per_slot: float,
) -> tuple[tuple[ChargeSlot, ...], float, float]:
    charge_slots: list[ChargeSlot] = []
    running_soc, total_energy, total_cost = current_soc, 0.0, 0.0

    for window in windows:
        energy = len(window) * energy_out_per_slot
        cost = sum(slot.price * energy_in_per_slot for slot in window.slots)
        charge_delta = energy / battery_size_kwh * 100.0

        running_soc, total_energy, total_cost = (
            running_soc + charge_delta,
            total_energy + energy,
            total_cost + cost,
        )
        charge_slots.append(
            ChargeSlot(
                start=window.start,
                end=window.end,
                avg_price=_average_price(window.slots),
                energy=energy,
                cost=cost,
                price_slots=window.slots,
                charge=round_soc(running_soc),
                charge_delta=charge_delta,
            )
        )

    return tuple(charge_slots), total_energy, total_cost


def _most_expensive_edge(charge_slots: Sequence[ChargeSlot]) -> tuple[int, bool]:
    """Locate the priciest first/last price slot over all windows.

    Returns:
        (window index, True if it is the window's leading slot)
    """
    max_price = -math.inf
    window_index = -1
    is_leading = True
    for index, charge_slot in enumerate(charge_slots):
        first_price = charge_slot.price_slots[0].price
        if first_price > max_price:
            max_price, window_index, is_leading = first_price, index, True
        last_price = charge_slot.price_slots[-1].price
        if last_price > max_price:
            max_price, window_index, is_leading = last_price, index, False
    return window_index, is_leading


def _trim_surplus(
    charge_slots: tuple[ChargeSlot, ...],
    total_energy: float,
    total_cost: float,
    energy_needed: float,
    current_soc: float,
    battery_size_kwh: float,
    energy_in_per_slot: float,
    energy_out_per_slot: float,
    slot_minutes: float,
) -> tuple[tuple[ChargeSlot, ...], float, float]:
    surplus = total_energy - energy_needed
    surplus_minutes = math.floor(surplus / energy_out_per_slot * slot_minutes)
    if surplus_minutes <= SURPLUS_TRIM_THRESHOLD_MINUTES or not charge_slots:
        return charge_slots, total_energy, total_cost

    window_index, is_leading = _most_expensive_edge(charge_slots)
    target = charge_slots[window_index]
    edge_slot = target.price_slots[0] if is_leading else target.price_slots[-1]
    cost_reduction = edge_slot.price * energy_in_per_slot * (surplus / energy_out_per_slot)

    energy = target.energy - surplus
    charge_delta = energy / battery_size_kwh * 100.0
    baseline = current_soc if window_index == 0 else charge_slots[window_index - 1].charge
    shift = timedelta(minutes=surplus_minutes)

    trimmed = replace(
        target,
        energy=energy,
        cost=target.cost - cost_reduction,
        charge_delta=charge_delta,
        charge=round_soc(baseline + charge_delta),
        start=target.start + shift if is_leading else target.start,
        end=target.end if is_leading else target.end - shift,
    )

    # Later windows start from a lower SOC now
    updated = list(charge_slots[:window_index]) + [trimmed]
    tracker: float = trimmed.charge
    for later in charge_slots[window_index + 1:]:
        later_delta = later.energy / battery_size_kwh * 100.0
        tracker += later_delta
        updated.append(replace(later, charge_delta=later_delta, charge=round_soc(tracker)))

    return tuple(updated), total_energy - surplus, total_cost - cost_reduction
