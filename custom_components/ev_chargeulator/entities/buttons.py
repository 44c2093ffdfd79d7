"""Button entities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.components.button import ButtonEntity
from homeassistant.helpers.device_registry import DeviceInfo

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

from ..chargeulator_logging import get_logger
from ..const import DEFAULT_NAME, DOMAIN


class RecalculatePlanButton(ButtonEntity):
    """Button to manually recalculate the charge plan."""

    _attr_has_entity_name = True
    _attr_icon = "mdi:refresh"

    def __init__(
        self,
        entry_id: str,
        coordinator,
    ) -> None:
        """Initialize."""
        self._coordinator = coordinator
        self._logger = get_logger()

        self._attr_unique_id = f"{entry_id}_recalculate"
        self._attr_name = "Recalculate Plan"

        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, entry_id)},
            name=DEFAULT_NAME,
            manufacturer="EV Chargeulator",
        )

    async def async_press(self) -> None:
        """Handle button press."""
        self._logger.info("RECALCULATE_BUTTON_PRESSED")
        await self._coordinator.recalculate_plan()


async def async_setup_buttons(
    hass: HomeAssistant,
    entry: ConfigEntry,
    coordinator,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up button entities."""
    async_add_entities([RecalculatePlanButton(entry.entry_id, coordinator)])
