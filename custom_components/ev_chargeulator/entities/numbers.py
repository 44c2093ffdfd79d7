"""Number entities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.components.number import NumberEntity, NumberMode
from homeassistant.const import PERCENTAGE, STATE_UNAVAILABLE, STATE_UNKNOWN
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.restore_state import RestoreEntity

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

from ..chargeulator_logging import get_logger
from ..const import DEFAULT_NAME, DOMAIN

ATTR_CONFIGURED_TARGET = "configured_target"


class TargetSocNumber(NumberEntity, RestoreEntity):
    """Number entity for the charging target SOC.

    The configured target is the starting value. Changes made here trigger
    a new plan and survive restarts until the configured target changes.
    """

    _attr_has_entity_name = True
    _attr_native_min_value = 0.0
    _attr_native_max_value = 100.0
    _attr_native_step = 1.0
    _attr_native_unit_of_measurement = PERCENTAGE
    _attr_mode = NumberMode.SLIDER
    _attr_icon = "mdi:battery-charging-high"

    def __init__(
        self,
        entry_id: str,
        coordinator,  # ChargeulatorCoordinator
    ) -> None:
        """Initialize."""
        self._coordinator = coordinator
        self._logger = get_logger()

        self._attr_unique_id = f"{entry_id}_target_soc"
        self._attr_name = "Target SOC"
        self._configured_target = coordinator.state.target_soc_percent
        self._attr_native_value = coordinator.state.target_soc_percent

        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, entry_id)},
            name=DEFAULT_NAME,
            manufacturer="EV Chargeulator",
        )

    async def async_added_to_hass(self) -> None:
        """Restore previous target."""
        await super().async_added_to_hass()

        last_state = await self.async_get_last_state()
        if last_state is None or last_state.state in (STATE_UNKNOWN, STATE_UNAVAILABLE):
            return

        try:
            restored = float(last_state.state)
        except (ValueError, TypeError):
            return

        # An options change replaces any earlier override
        if last_state.attributes.get(ATTR_CONFIGURED_TARGET) != self._configured_target:
            return

        if 0 <= restored <= 100 and restored != self._attr_native_value:
            self._attr_native_value = restored
            self._logger.info("TARGET_SOC_RESTORED", value=restored)
            await self._coordinator.set_target_soc(restored)

    @property
    def extra_state_attributes(self) -> dict:
        """Return extra attributes."""
        return {ATTR_CONFIGURED_TARGET: self._configured_target}

    async def async_set_native_value(self, value: float) -> None:
        """Handle value change from UI."""
        self._logger.info(
            "TARGET_SOC_SET_REQUEST",
            old_value=self._attr_native_value,
            new_value=value,
        )
        await self._coordinator.set_target_soc(value)
        self._attr_native_value = self._coordinator.state.target_soc_percent
        self.async_write_ha_state()


async def async_setup_numbers(
    hass: HomeAssistant,
    entry: ConfigEntry,
    coordinator,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up number entities."""
    async_add_entities([TargetSocNumber(entry.entry_id, coordinator)])
