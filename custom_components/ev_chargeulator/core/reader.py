"""Entity access layer - single point of access for Home Assistant states.

The coordinator never touches hass.states directly; it asks the
EntityReader for the SOC value and the raw price lists.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.const import STATE_UNAVAILABLE, STATE_UNKNOWN

from ..chargeulator_logging import get_logger
from ..const import ATTR_RAW_TODAY, ATTR_RAW_TOMORROW
from .state import ChargeulatorState

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


class EntityReader:
    """Read planner inputs from Home Assistant entities."""

    def __init__(self, hass: HomeAssistant, state: ChargeulatorState) -> None:
        """Initialize the reader."""
        self.hass = hass
        self.state = state
        self._logger = get_logger()

    def get_sensor_value(self, entity_id: str, sensor_name: str = "sensor") -> float | None:
        """Get numeric value from a sensor.

        Returns:
            Sensor value, or None if it is missing, unavailable or not numeric
        """
        if not entity_id:
            self._logger.warning(f"{sensor_name.upper()}_NOT_CONFIGURED")
            return None

        state = self.hass.states.get(entity_id)
        if state is None:
            self._logger.warning(f"{sensor_name.upper()}_NOT_FOUND", entity_id=entity_id)
            return None

        if state.state in (STATE_UNKNOWN, STATE_UNAVAILABLE):
            self._logger.warning(f"{sensor_name.upper()}_UNAVAILABLE", entity_id=entity_id)
            return None

        try:
            value = float(state.state)
        except (ValueError, TypeError) as ex:
            self._logger.error(
                f"{sensor_name.upper()}_INVALID_VALUE",
                entity_id=entity_id,
                value=state.state,
                error=str(ex),
            )
            return None

        self._logger.debug(f"{sensor_name.upper()}_READ", entity_id=entity_id, value=value)
        return value

    def get_current_soc(self) -> float | None:
        """Get current EV battery SOC percentage (0-100)."""
        soc = self.get_sensor_value(self.state.soc_entity, sensor_name="ev_soc")
        if soc is not None and not 0 <= soc <= 100:
            self._logger.warning("EV_SOC_OUT_OF_RANGE", value=soc)
            return None
        return soc

    def get_raw_prices(self) -> tuple[list[Any], list[Any]] | None:
        """Get the raw today/tomorrow price lists from the price sensor.

        Returns:
            (raw_today, raw_tomorrow) or None if the sensor is not usable
        """
        entity_id = self.state.price_entity
        state = self.hass.states.get(entity_id) if entity_id else None
        if state is None or state.state == STATE_UNAVAILABLE:
            self._logger.warning("PRICE_SENSOR_UNAVAILABLE", entity_id=entity_id)
            return None

        raw_today = state.attributes.get(ATTR_RAW_TODAY) or []
        raw_tomorrow = state.attributes.get(ATTR_RAW_TOMORROW) or []
        if not isinstance(raw_today, list) or not isinstance(raw_tomorrow, list):
            self._logger.error("PRICE_ATTRIBUTES_INVALID", entity_id=entity_id)
            return None

        self._logger.debug(
            "PRICES_READ",
            entity_id=entity_id,
            today=len(raw_today),
            tomorrow=len(raw_tomorrow),
        )
        return raw_today, raw_tomorrow
