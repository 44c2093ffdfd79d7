"""Config flow for EV Chargeulator integration."""
from __future__ import annotations

from typing import Any

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.core import callback
from homeassistant.data_entry_flow import FlowResult
from homeassistant.helpers import selector

from .const import (
    ATTR_RAW_TODAY,
    CONF_BATTERY_SIZE,
    CONF_COMPLETE_BY,
    CONF_ENERGY_IN_UNIT,
    CONF_ENERGY_IN_VALUE,
    CONF_ENERGY_OUT_UNIT,
    CONF_ENERGY_OUT_VALUE,
    CONF_FILE_LOGGING,
    CONF_MAX_WINDOWS,
    CONF_MIN_SLOTS_PER_WINDOW,
    CONF_PRICE_ENTITY,
    CONF_SOC_ENTITY,
    CONF_TARGET_SOC,
    DEFAULT_BATTERY_SIZE,
    DEFAULT_ENERGY_IN_VALUE,
    DEFAULT_ENERGY_UNIT,
    DEFAULT_FILE_LOGGING,
    DEFAULT_MAX_WINDOWS,
    DEFAULT_MIN_SLOTS_PER_WINDOW,
    DEFAULT_NAME,
    DEFAULT_TARGET_SOC,
    DOMAIN,
)
from .domain.energy import ENERGY_UNITS


def _battery_size_selector() -> selector.NumberSelector:
    return selector.NumberSelector(
        selector.NumberSelectorConfig(
            min=1,
            max=250,
            step=0.5,
            unit_of_measurement="kWh",
            mode=selector.NumberSelectorMode.BOX,
        )
    )


def _rate_selector() -> selector.NumberSelector:
    return selector.NumberSelector(
        selector.NumberSelectorConfig(
            min=0,
            max=100000,
            step=0.01,
            mode=selector.NumberSelectorMode.BOX,
        )
    )


def _unit_selector() -> selector.SelectSelector:
    return selector.SelectSelector(
        selector.SelectSelectorConfig(
            options=ENERGY_UNITS,
            mode=selector.SelectSelectorMode.DROPDOWN,
        )
    )


def _target_soc_selector() -> selector.NumberSelector:
    return selector.NumberSelector(
        selector.NumberSelectorConfig(
            min=0,
            max=100,
            step=1,
            unit_of_measurement="%",
            mode=selector.NumberSelectorMode.SLIDER,
        )
    )


def _count_selector(maximum: int) -> selector.NumberSelector:
    return selector.NumberSelector(
        selector.NumberSelectorConfig(
            min=1,
            max=maximum,
            step=1,
            mode=selector.NumberSelectorMode.BOX,
        )
    )


def _validate_rates(user_input: dict[str, Any]) -> dict[str, str]:
    """Check that charge rates are usable."""
    errors: dict[str, str] = {}
    if float(user_input.get(CONF_ENERGY_IN_VALUE, 0)) <= 0:
        errors[CONF_ENERGY_IN_VALUE] = "invalid_rate"
    out_value = user_input.get(CONF_ENERGY_OUT_VALUE)
    if out_value not in (None, "") and float(out_value) <= 0:
        errors[CONF_ENERGY_OUT_VALUE] = "invalid_rate"
    return errors


class ConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for EV Chargeulator."""

    VERSION = 1

    def __init__(self) -> None:
        """Initialize the config flow."""
        self.sensor_info: dict[str, Any] = {}
        self.charging_info: dict[str, Any] = {}

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Step 1: Sensors - price forecast, EV SOC and battery size."""
        errors: dict[str, str] = {}

        if user_input is not None:
            price_state = self.hass.states.get(user_input[CONF_PRICE_ENTITY])
            soc_state = self.hass.states.get(user_input[CONF_SOC_ENTITY])

            if price_state is None:
                errors[CONF_PRICE_ENTITY] = "entity_not_found"
            elif ATTR_RAW_TODAY not in price_state.attributes:
                errors[CONF_PRICE_ENTITY] = "no_price_forecast"
            if soc_state is None:
                errors[CONF_SOC_ENTITY] = "entity_not_found"

            if not errors:
                self.sensor_info = user_input
                return await self.async_step_charging()

        return self.async_show_form(
            step_id="user",
            data_schema=vol.Schema(
                {
                    vol.Required(CONF_PRICE_ENTITY): selector.EntitySelector(
                        selector.EntitySelectorConfig(domain="sensor")
                    ),
                    vol.Required(CONF_SOC_ENTITY): selector.EntitySelector(
                        selector.EntitySelectorConfig(domain="sensor")
                    ),
                    vol.Required(
                        CONF_BATTERY_SIZE, default=DEFAULT_BATTERY_SIZE
                    ): _battery_size_selector(),
                }
            ),
            errors=errors,
        )

    async def async_step_charging(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Step 2: Charge rates - grid side and (optionally) battery side."""
        errors: dict[str, str] = {}

        if user_input is not None:
            errors = _validate_rates(user_input)
            if not errors:
                self.charging_info = user_input
                return await self.async_step_planning()

        return self.async_show_form(
            step_id="charging",
            data_schema=vol.Schema(
                {
                    vol.Required(
                        CONF_ENERGY_IN_VALUE, default=DEFAULT_ENERGY_IN_VALUE
                    ): _rate_selector(),
                    vol.Required(
                        CONF_ENERGY_IN_UNIT, default=DEFAULT_ENERGY_UNIT
                    ): _unit_selector(),
                    vol.Optional(CONF_ENERGY_OUT_VALUE): _rate_selector(),
                    vol.Optional(CONF_ENERGY_OUT_UNIT): _unit_selector(),
                }
            ),
            errors=errors,
        )

    async def async_step_planning(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Step 3: Planning - target, window limits and deadline."""
        if user_input is not None:
            data = {
                **self.sensor_info,
                **self.charging_info,
                **user_input,
            }
            return self.async_create_entry(title=DEFAULT_NAME, data=data)

        return self.async_show_form(
            step_id="planning",
            data_schema=vol.Schema(
                {
                    vol.Required(
                        CONF_TARGET_SOC, default=DEFAULT_TARGET_SOC
                    ): _target_soc_selector(),
                    vol.Required(
                        CONF_MIN_SLOTS_PER_WINDOW, default=DEFAULT_MIN_SLOTS_PER_WINDOW
                    ): _count_selector(96),
                    vol.Required(
                        CONF_MAX_WINDOWS, default=DEFAULT_MAX_WINDOWS
                    ): _count_selector(10),
                    vol.Optional(CONF_COMPLETE_BY): selector.TimeSelector(),
                }
            ),
            errors={},
        )

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> config_entries.OptionsFlow:
        """Create the options flow."""
        return OptionsFlowHandler(config_entry)


class OptionsFlowHandler(config_entries.OptionsFlow):
    """Handle options flow for EV Chargeulator."""

    def __init__(self, config_entry: config_entries.ConfigEntry) -> None:
        """Initialize options flow."""
        self._config_entry = config_entry

    def _get_value(self, key: str, default: Any) -> Any:
        """Get value from options or data with fallback to default."""
        return self._config_entry.options.get(
            key,
            self._config_entry.data.get(key, default)
        )

    def _optional(self, key: str) -> vol.Optional:
        """Optional key, pre-filled only when a value exists."""
        source = self._config_entry.options or self._config_entry.data
        value = source.get(key)
        if value in (None, ""):
            return vol.Optional(key)
        return vol.Optional(key, description={"suggested_value": value})

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Manage the options - single page for simplicity."""
        errors: dict[str, str] = {}

        if user_input is not None:
            errors = _validate_rates(user_input)
            if not errors:
                return self.async_create_entry(title="", data=user_input)

        schema_dict = {
            # Battery
            vol.Required(
                CONF_BATTERY_SIZE,
                default=self._get_value(CONF_BATTERY_SIZE, DEFAULT_BATTERY_SIZE),
            ): _battery_size_selector(),
            # Charge rates
            vol.Required(
                CONF_ENERGY_IN_VALUE,
                default=self._get_value(CONF_ENERGY_IN_VALUE, DEFAULT_ENERGY_IN_VALUE),
            ): _rate_selector(),
            vol.Required(
                CONF_ENERGY_IN_UNIT,
                default=self._get_value(CONF_ENERGY_IN_UNIT, DEFAULT_ENERGY_UNIT),
            ): _unit_selector(),
            self._optional(CONF_ENERGY_OUT_VALUE): _rate_selector(),
            self._optional(CONF_ENERGY_OUT_UNIT): _unit_selector(),
            # Planning
            vol.Required(
                CONF_TARGET_SOC,
                default=self._get_value(CONF_TARGET_SOC, DEFAULT_TARGET_SOC),
            ): _target_soc_selector(),
            vol.Required(
                CONF_MIN_SLOTS_PER_WINDOW,
                default=self._get_value(CONF_MIN_SLOTS_PER_WINDOW, DEFAULT_MIN_SLOTS_PER_WINDOW),
            ): _count_selector(96),
            vol.Required(
                CONF_MAX_WINDOWS,
                default=self._get_value(CONF_MAX_WINDOWS, DEFAULT_MAX_WINDOWS),
            ): _count_selector(10),
            self._optional(CONF_COMPLETE_BY): selector.TimeSelector(),
            # Debugging
            vol.Optional(
                CONF_FILE_LOGGING,
                default=self._get_value(CONF_FILE_LOGGING, DEFAULT_FILE_LOGGING),
            ): selector.BooleanSelector(),
        }

        return self.async_show_form(
            step_id="init",
            data_schema=vol.Schema(schema_dict),
            errors=errors,
        )
