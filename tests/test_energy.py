"""Test charge rate conversion."""
from datetime import timedelta

import pytest

from custom_components.ev_chargeulator.domain.energy import (
    slot_energy_rates,
    to_kwh_per_slot,
)
from custom_components.ev_chargeulator.models import InvalidConfigurationError


@pytest.mark.parametrize(
    ("value", "unit", "slot_hours", "expected"),
    [
        (7.4, "kW", 0.25, 1.85),
        (7400, "W", 0.25, 1.85),
        (11.0, "kW", 1.0, 11.0),
        (1.85, "kWh", 0.25, 1.85),
        (1850, "Wh", 0.25, 1.85),
    ],
)
def test_to_kwh_per_slot(value, unit, slot_hours, expected):
    """Test power units scale with slot length and energy units do not."""
    assert to_kwh_per_slot(value, unit, slot_hours) == pytest.approx(expected)


def test_unknown_unit():
    """Test unknown units are rejected."""
    with pytest.raises(InvalidConfigurationError):
        to_kwh_per_slot(7.4, "hp", 0.25)


def test_negative_rate():
    """Test negative rates are rejected."""
    with pytest.raises(InvalidConfigurationError):
        to_kwh_per_slot(-1, "kW", 0.25)


def test_battery_side_defaults_to_grid_side():
    """Test energy out falls back to energy in."""
    energy_in, energy_out = slot_energy_rates(7.4, "kW", None, None, timedelta(minutes=15))

    assert energy_in == pytest.approx(1.85)
    assert energy_out == pytest.approx(1.85)


def test_separate_battery_side():
    """Test charging losses are expressed by a lower energy out."""
    energy_in, energy_out = slot_energy_rates(
        11.0, "kW", 1500, "Wh", timedelta(minutes=15)
    )

    assert energy_in == pytest.approx(2.75)
    assert energy_out == pytest.approx(1.5)


def test_battery_side_value_uses_grid_unit():
    """Test a battery side value without unit reuses the grid unit."""
    _, energy_out = slot_energy_rates(7.4, "kW", 6.8, None, timedelta(hours=1))

    assert energy_out == pytest.approx(6.8)
