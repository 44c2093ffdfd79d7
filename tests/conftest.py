"""Fixtures for testing."""
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from pytest_homeassistant_custom_component.common import MockConfigEntry

from homeassistant.core import HomeAssistant, State
from homeassistant.util import dt as dt_util

from custom_components.ev_chargeulator.const import (
    DOMAIN,
    CONF_BATTERY_SIZE,
    CONF_ENERGY_IN_UNIT,
    CONF_ENERGY_IN_VALUE,
    CONF_MAX_WINDOWS,
    CONF_MIN_SLOTS_PER_WINDOW,
    CONF_PRICE_ENTITY,
    CONF_SOC_ENTITY,
    CONF_TARGET_SOC,
)
from custom_components.ev_chargeulator.models import PriceSlot

PRICE_ENTITY = "sensor.nordpool_kwh_se3"
SOC_ENTITY = "sensor.ev_battery_level"

BASE_TIME = datetime(2026, 1, 1, 0, 0, tzinfo=timezone.utc)

# Cheap night, expensive morning
PRICE_PATTERN = [
    1.8, 1.6, 1.2, 1.1, 0.9, 0.8, 0.8, 0.9,
    1.3, 1.7, 2.4, 2.9, 3.1, 2.8, 2.2, 1.9,
]


def make_slots(prices, start=BASE_TIME, minutes=15):
    """Contiguous PriceSlots with the given prices."""
    step = timedelta(minutes=minutes)
    return [
        PriceSlot(start=start + step * i, end=start + step * (i + 1), price=price)
        for i, price in enumerate(prices)
    ]


def make_raw_prices(prices, start, minutes=15):
    """Nord Pool style raw price entries."""
    step = timedelta(minutes=minutes)
    return [
        {"start": start + step * i, "end": start + step * (i + 1), "value": price}
        for i, price in enumerate(prices)
    ]


def current_quarter():
    """Start of the running 15 minute slot."""
    now = dt_util.now()
    return now.replace(minute=now.minute - now.minute % 15, second=0, microsecond=0)


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations):
    """Enable custom integrations defined in the test dir."""
    return


@pytest.fixture
def config_data():
    """Config entry data for a 60 kWh EV on a 7.4 kW charger."""
    return {
        CONF_PRICE_ENTITY: PRICE_ENTITY,
        CONF_SOC_ENTITY: SOC_ENTITY,
        CONF_BATTERY_SIZE: 60.0,
        CONF_ENERGY_IN_VALUE: 7.4,
        CONF_ENERGY_IN_UNIT: "kW",
        CONF_TARGET_SOC: 60.0,
        CONF_MIN_SLOTS_PER_WINDOW: 1,
        CONF_MAX_WINDOWS: 3,
    }


@pytest.fixture
def mock_config_entry(config_data):
    """Mock a config entry."""
    entry = MagicMock()
    entry.data = config_data
    entry.options = {}
    entry.entry_id = "test_entry_id"
    entry.title = "EV Chargeulator"
    return entry


@pytest.fixture
def mock_ev_states():
    """Mock price forecast and EV SOC states."""
    return {
        PRICE_ENTITY: State(
            PRICE_ENTITY,
            "1.8",
            {
                "unit_of_measurement": "SEK/kWh",
                "raw_today": make_raw_prices(PRICE_PATTERN, current_quarter()),
                "raw_tomorrow": [],
            },
        ),
        SOC_ENTITY: State(
            SOC_ENTITY,
            "50",
            {"unit_of_measurement": "%", "device_class": "battery"},
        ),
    }


@pytest.fixture
def set_ev_states(hass: HomeAssistant, mock_ev_states):
    """Write the mock states into hass."""
    for entity_id, state in mock_ev_states.items():
        hass.states.async_set(entity_id, state.state, state.attributes)
    return mock_ev_states


@pytest.fixture
async def setup_integration(hass: HomeAssistant, set_ev_states, config_data):
    """Set up integration with mock states."""
    entry = MockConfigEntry(domain=DOMAIN, title="EV Chargeulator", data=config_data)
    entry.add_to_hass(hass)

    await hass.config_entries.async_setup(entry.entry_id)
    await hass.async_block_till_done()

    return entry
