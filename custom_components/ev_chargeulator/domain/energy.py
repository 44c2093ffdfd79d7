"""Charge rate normalization to energy per price slot."""

from __future__ import annotations

from datetime import timedelta

from ..models.data_models import InvalidConfigurationError

UNIT_KW = "kW"
UNIT_W = "W"
UNIT_KWH = "kWh"
UNIT_WH = "Wh"

ENERGY_UNITS = [UNIT_KW, UNIT_W, UNIT_KWH, UNIT_WH]


def to_kwh_per_slot(value: float, unit: str, slot_hours: float) -> float:
    """Convert a charge rate to kWh delivered in one slot.

    Power units (kW, W) are multiplied by the slot length, energy units
    (kWh, Wh) are taken as already being per slot.

    Raises:
        InvalidConfigurationError: for unknown units or negative values
    """
    if value < 0:
        raise InvalidConfigurationError(f"Charge rate cannot be negative, got {value} {unit}")

    if unit == UNIT_KWH:
        return value
    if unit == UNIT_WH:
        return value / 1000.0
    if unit == UNIT_KW:
        return value * slot_hours
    if unit == UNIT_W:
        return value / 1000.0 * slot_hours
    raise InvalidConfigurationError(f"Unknown charge rate unit: {unit!r}")


def slot_energy_rates(
    in_value: float,
    in_unit: str,
    out_value: float | None,
    out_unit: str | None,
    slot_length: timedelta,
) -> tuple[float, float]:
    """Per-slot (grid side, battery side) energy.

    The battery side falls back to the grid side value and unit when it is
    not configured.
    """
    slot_hours = slot_length.total_seconds() / 3600.0
    energy_in = to_kwh_per_slot(in_value, in_unit, slot_hours)
    energy_out = to_kwh_per_slot(
        in_value if out_value is None else out_value,
        out_unit or in_unit,
        slot_hours,
    )
    return energy_in, energy_out
