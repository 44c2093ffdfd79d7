"""Sensor entities using factory pattern.

Add a new sensor = add one entry to SENSOR_DEFINITIONS.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorStateClass,
)
from homeassistant.const import PERCENTAGE, UnitOfEnergy
from homeassistant.core import callback
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.dispatcher import async_dispatcher_connect
from homeassistant.util import dt as dt_util

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback
    from ..core.state import ChargeulatorState

from ..const import DEFAULT_NAME, DOMAIN, SIGNAL_UPDATE
from ..models.data_models import PlanStatus


@dataclass
class SensorDefinition:
    """Definition for a sensor entity."""

    key: str  # Unique identifier
    name: str  # Display name
    value_fn: Callable[[Any], Any]  # Function to get value from state
    attrs_fn: Callable[[Any], dict[str, Any]] | None = None
    unit: str | None = None
    device_class: SensorDeviceClass | None = None
    state_class: SensorStateClass | None = None
    icon: str | None = None
    options: list[str] | None = None


def _next_start(state: ChargeulatorState):
    charge_slot = state.next_charge_slot(dt_util.now())
    return charge_slot.start if charge_slot else None


def _next_end(state: ChargeulatorState):
    charge_slot = state.next_charge_slot(dt_util.now())
    return charge_slot.end if charge_slot else None


def _plan_attributes(state: ChargeulatorState) -> dict[str, Any]:
    attrs = state.current_plan.to_dict()
    attrs["inputs"] = state.inputs.to_dict()
    attrs["last_error"] = state.last_error or None
    attrs["last_calculated"] = (
        state.last_calculated.isoformat() if state.last_calculated else None
    )
    return attrs


SENSOR_DEFINITIONS: list[SensorDefinition] = [
    # Plan outcome
    SensorDefinition(
        key="plan_status",
        name="Plan Status",
        value_fn=lambda s: s.status.value,
        attrs_fn=_plan_attributes,
        device_class=SensorDeviceClass.ENUM,
        options=[status.value for status in PlanStatus],
        icon="mdi:ev-station",
    ),
    SensorDefinition(
        key="charge_windows",
        name="Charge Windows",
        value_fn=lambda s: len(s.current_plan.charge_slots),
        state_class=SensorStateClass.MEASUREMENT,
        icon="mdi:calendar-clock",
    ),

    # Totals
    SensorDefinition(
        key="planned_energy",
        name="Planned Energy",
        value_fn=lambda s: round(s.current_plan.total_energy, 3),
        unit=UnitOfEnergy.KILO_WATT_HOUR,
        device_class=SensorDeviceClass.ENERGY,
        state_class=SensorStateClass.TOTAL,
    ),
    SensorDefinition(
        key="planned_cost",
        name="Planned Cost",
        value_fn=lambda s: round(s.current_plan.total_cost, 4),
        icon="mdi:cash",
    ),
    SensorDefinition(
        key="energy_needed",
        name="Energy Needed",
        value_fn=lambda s: round(s.current_plan.energy_needed, 3),
        unit=UnitOfEnergy.KILO_WATT_HOUR,
        device_class=SensorDeviceClass.ENERGY,
        state_class=SensorStateClass.TOTAL,
    ),
    SensorDefinition(
        key="projected_soc",
        name="Projected SOC",
        value_fn=lambda s: s.projected_soc,
        unit=PERCENTAGE,
        device_class=SensorDeviceClass.BATTERY,
        state_class=SensorStateClass.MEASUREMENT,
    ),

    # Next window
    SensorDefinition(
        key="next_charge_start",
        name="Next Charge Start",
        value_fn=_next_start,
        device_class=SensorDeviceClass.TIMESTAMP,
        icon="mdi:clock-start",
    ),
    SensorDefinition(
        key="next_charge_end",
        name="Next Charge End",
        value_fn=_next_end,
        device_class=SensorDeviceClass.TIMESTAMP,
        icon="mdi:clock-end",
    ),
]


class ChargeulatorSensor(SensorEntity):
    """Generic EV Chargeulator sensor entity."""

    _attr_has_entity_name = True
    _attr_should_poll = False

    def __init__(
        self,
        entry_id: str,
        state: ChargeulatorState,
        definition: SensorDefinition,
    ) -> None:
        """Initialize the sensor."""
        self._state = state
        self._definition = definition

        self._attr_unique_id = f"{entry_id}_{definition.key}"
        self._attr_name = definition.name
        self._attr_native_unit_of_measurement = definition.unit
        self._attr_device_class = definition.device_class
        self._attr_state_class = definition.state_class
        if definition.options:
            self._attr_options = definition.options
        if definition.icon:
            self._attr_icon = definition.icon

        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, entry_id)},
            name=DEFAULT_NAME,
            manufacturer="EV Chargeulator",
        )

    async def async_added_to_hass(self) -> None:
        """Register for updates."""
        self.async_on_remove(
            async_dispatcher_connect(self.hass, SIGNAL_UPDATE, self._handle_update)
        )
        self._handle_update()

    @callback
    def _handle_update(self) -> None:
        """Handle state update."""
        try:
            self._attr_native_value = self._definition.value_fn(self._state)
            if self._definition.attrs_fn:
                self._attr_extra_state_attributes = self._definition.attrs_fn(self._state)
        except (ValueError, TypeError, AttributeError, KeyError):
            self._attr_native_value = None
        self.async_write_ha_state()


async def async_setup_sensors(
    hass: HomeAssistant,
    entry: ConfigEntry,
    state: ChargeulatorState,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up all sensor entities."""
    async_add_entities(
        ChargeulatorSensor(entry.entry_id, state, definition)
        for definition in SENSOR_DEFINITIONS
    )
