"""Test sensor entities."""
import pytest
from homeassistant.core import HomeAssistant

from custom_components.ev_chargeulator.entities.sensors import SENSOR_DEFINITIONS


@pytest.mark.asyncio
async def test_sensors_created(hass: HomeAssistant, setup_integration):
    """Test every sensor definition creates an entity."""
    for definition in SENSOR_DEFINITIONS:
        entity_id = f"sensor.ev_chargeulator_{definition.key}"
        assert hass.states.get(entity_id) is not None, f"{entity_id} not created"


@pytest.mark.asyncio
async def test_plan_sensors(hass: HomeAssistant, setup_integration):
    """Test plan outcome is exposed."""
    status = hass.states.get("sensor.ev_chargeulator_plan_status")
    assert status.state == "planned"
    assert status.attributes["slots_to_charge"] == 4
    assert status.attributes["inputs"]["current_soc"] == 50.0
    assert status.attributes["charge_slots"]
    assert status.attributes["last_error"] is None

    assert int(hass.states.get("sensor.ev_chargeulator_charge_windows").state) >= 1
    assert float(hass.states.get("sensor.ev_chargeulator_planned_energy").state) == pytest.approx(6.0)
    assert float(hass.states.get("sensor.ev_chargeulator_energy_needed").state) == pytest.approx(6.0)
    assert hass.states.get("sensor.ev_chargeulator_projected_soc").state == "60"
    assert hass.states.get("sensor.ev_chargeulator_next_charge_start").state not in ("unknown", "unavailable")
    assert hass.states.get("sensor.ev_chargeulator_next_charge_end").state not in ("unknown", "unavailable")


@pytest.mark.asyncio
async def test_sensors_follow_replan(hass: HomeAssistant, setup_integration):
    """Test sensors refresh when the SOC reaches the target."""
    hass.states.async_set("sensor.ev_battery_level", "60")
    await hass.async_block_till_done()

    assert hass.states.get("sensor.ev_chargeulator_plan_status").state == "no_charging_needed"
    assert hass.states.get("sensor.ev_chargeulator_charge_windows").state == "0"
    assert hass.states.get("sensor.ev_chargeulator_next_charge_start").state == "unknown"


@pytest.mark.asyncio
async def test_sensor_unavailable_input(hass: HomeAssistant, setup_integration):
    """Test a lost price sensor is reported."""
    hass.states.async_set("sensor.nordpool_kwh_se3", "unavailable")
    await hass.async_block_till_done()

    status = hass.states.get("sensor.ev_chargeulator_plan_status")
    assert status.state == "no_data"
    assert status.attributes["last_error"] == "Price or SOC sensor unavailable"
