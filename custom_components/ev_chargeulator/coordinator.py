"""EV Chargeulator Coordinator - Thin orchestrator for all components.

It:
- Builds the state from the config entry
- Listens to the price and SOC entities
- Gathers inputs and delegates planning to the domain modules
- Emits events for state changes

It does NOT contain any planning logic.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable

from homeassistant.core import callback
from homeassistant.helpers.event import (
    async_track_point_in_time,
    async_track_state_change_event,
)
from homeassistant.util import dt as dt_util

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import Event, HomeAssistant, ServiceCall

from .chargeulator_logging import get_logger
from .const import (
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
    DEFAULT_TARGET_SOC,
    DOMAIN,
    SERVICE_RECALCULATE,
)
from .core.events import ChargeulatorEvent, ChargeulatorEventBus, EventData
from .core.reader import EntityReader
from .core.state import ChargeulatorState, PlanInputs
from .domain.energy import slot_energy_rates
from .domain.optimizer import ChargePlanOptimizer
from .domain.price_slots import (
    parse_price_slots,
    parse_time_of_day,
    resolve_complete_by,
    slot_duration,
    upcoming_slots,
)
from .models.data_models import InvalidConfigurationError, PlanningRequest, PlanStatus


class ChargeulatorCoordinator:
    """Thin orchestrator for EV Chargeulator.

    Every change of the price or SOC entity triggers a fresh, stateless
    plan calculation.
    """

    def __init__(self, hass: HomeAssistant, entry: ConfigEntry) -> None:
        """Initialize the coordinator."""
        self.hass = hass
        self.entry = entry
        self._listeners: list = []
        self._unsub_window_refresh: Callable[[], None] | None = None
        self._logger = get_logger()

        self._logger.info("COORDINATOR_INIT_START", entry_id=entry.entry_id)

        self.state = self._create_state_from_config()
        self._logger.set_file_logging(self.state.file_logging)

        self.events = ChargeulatorEventBus(hass)
        self.reader = EntityReader(hass, self.state)

        self._logger.info("COORDINATOR_INIT_COMPLETE")

    def _create_state_from_config(self) -> ChargeulatorState:
        """Create state object from config entry."""
        data = self.entry.data
        options = self.entry.options

        def get_config(key: str, default: Any) -> Any:
            return options.get(key, data.get(key, default))

        def get_optional(key: str) -> Any:
            # The options form holds every key, so a missing one was cleared
            return options.get(key) if options else data.get(key)

        energy_out_value = get_optional(CONF_ENERGY_OUT_VALUE)

        return ChargeulatorState(
            # Entity IDs
            price_entity=data.get(CONF_PRICE_ENTITY, ""),
            soc_entity=data.get(CONF_SOC_ENTITY, ""),

            # Battery / charger
            battery_size_kwh=float(get_config(CONF_BATTERY_SIZE, DEFAULT_BATTERY_SIZE)),
            energy_in_value=float(get_config(CONF_ENERGY_IN_VALUE, DEFAULT_ENERGY_IN_VALUE)),
            energy_in_unit=get_config(CONF_ENERGY_IN_UNIT, DEFAULT_ENERGY_UNIT),
            energy_out_value=float(energy_out_value) if energy_out_value not in (None, "") else None,
            energy_out_unit=get_optional(CONF_ENERGY_OUT_UNIT) or None,

            # Planning
            target_soc_percent=float(get_config(CONF_TARGET_SOC, DEFAULT_TARGET_SOC)),
            min_slots_per_window=int(get_config(CONF_MIN_SLOTS_PER_WINDOW, DEFAULT_MIN_SLOTS_PER_WINDOW)),
            max_windows=int(get_config(CONF_MAX_WINDOWS, DEFAULT_MAX_WINDOWS)),
            complete_by=parse_time_of_day(get_optional(CONF_COMPLETE_BY)),

            file_logging=bool(get_config(CONF_FILE_LOGGING, DEFAULT_FILE_LOGGING)),
        )

    async def async_init(self) -> None:
        """Initialize async components."""
        self._setup_state_tracking()
        self._setup_event_handlers()
        self._register_services()
        await self.recalculate_plan()

    def _setup_state_tracking(self) -> None:
        """Recalculate whenever the price or SOC entity changes."""
        entities = [e for e in (self.state.price_entity, self.state.soc_entity) if e]
        if not entities:
            return

        self._listeners.append(
            async_track_state_change_event(self.hass, entities, self._handle_input_change)
        )
        self._logger.debug("STATE_TRACKING_ENABLED", entities=entities)

    def _setup_event_handlers(self) -> None:
        """Follow plan changes to keep the window refresh timer current."""
        for event in (ChargeulatorEvent.PLAN_UPDATED, ChargeulatorEvent.PLAN_FAILED):
            self._listeners.append(self.events.on(event, self._async_plan_changed))

    def _register_services(self) -> None:
        """Register HA services."""
        if self.hass.services.has_service(DOMAIN, SERVICE_RECALCULATE):
            return

        async def handle_recalculate(call: ServiceCall) -> None:
            for coordinator in self.hass.data.get(DOMAIN, {}).values():
                await coordinator.recalculate_plan()

        self.hass.services.async_register(DOMAIN, SERVICE_RECALCULATE, handle_recalculate)
        self._logger.debug("SERVICES_REGISTERED")

    def async_unload(self) -> None:
        """Unload the coordinator."""
        self._cancel_window_refresh()
        for remove in self._listeners:
            remove()
        self._listeners.clear()

        # Service is shared by all entries; the last one removes it
        remaining = [c for c in self.hass.data.get(DOMAIN, {}).values() if c is not self]
        if not remaining:
            self.hass.services.async_remove(DOMAIN, SERVICE_RECALCULATE)
            self._logger.set_file_logging(False)

        self._logger.info("COORDINATOR_UNLOADED")

    # ========== Event Handlers ==========

    @callback
    def _handle_input_change(self, event: Event) -> None:
        """Handle price or SOC entity change."""
        entity_id = event.data.get("entity_id")
        new_state = event.data.get("new_state")
        self._logger.debug(
            "INPUT_CHANGED",
            entity_id=entity_id,
            state=new_state.state if new_state else None,
        )
        self.hass.async_create_task(self._async_input_changed(entity_id))

    async def _async_input_changed(self, entity_id: str | None) -> None:
        """Announce the changed input and replan."""
        if entity_id == self.state.price_entity:
            await self.events.emit(ChargeulatorEvent.PRICES_UPDATED, entity_id=entity_id)
        else:
            await self.events.emit(ChargeulatorEvent.SOC_UPDATED, entity_id=entity_id)
        await self.recalculate_plan()

    async def _async_plan_changed(self, event_data: EventData) -> None:
        """Reschedule the window refresh for the new plan."""
        self._schedule_window_refresh(dt_util.now())

    def _schedule_window_refresh(self, now: datetime) -> None:
        """Refresh entities when the running or next charge window ends."""
        self._cancel_window_refresh()
        charge_slot = self.state.next_charge_slot(now)
        if charge_slot is None:
            return

        self._unsub_window_refresh = async_track_point_in_time(
            self.hass, self._handle_window_end, charge_slot.end
        )
        self._logger.debug("WINDOW_REFRESH_SCHEDULED", at=charge_slot.end.isoformat())

    def _cancel_window_refresh(self) -> None:
        if self._unsub_window_refresh is not None:
            self._unsub_window_refresh()
            self._unsub_window_refresh = None

    @callback
    def _handle_window_end(self, now: datetime) -> None:
        """Handle the end of a charge window."""
        self._unsub_window_refresh = None
        self.hass.async_create_task(self._async_window_ended(now))

    async def _async_window_ended(self, now: datetime) -> None:
        self._logger.info("CHARGE_WINDOW_ENDED", at=now.isoformat())
        await self.events.emit(ChargeulatorEvent.UI_UPDATE)
        self._schedule_window_refresh(now)

    # ========== Plan Calculation ==========

    def _build_request(self) -> PlanningRequest | None:
        """Gather all planner inputs, or None if an input is unavailable."""
        current_soc = self.reader.get_current_soc()
        raw_prices = self.reader.get_raw_prices()
        if current_soc is None or raw_prices is None:
            return None

        now = dt_util.now()
        slots = upcoming_slots(
            parse_price_slots(*raw_prices, default_tz=dt_util.DEFAULT_TIME_ZONE),
            now,
        )
        energy_in, energy_out = slot_energy_rates(
            self.state.energy_in_value,
            self.state.energy_in_unit,
            self.state.energy_out_value,
            self.state.energy_out_unit,
            slot_duration(slots),
        )
        deadline = (
            resolve_complete_by(self.state.complete_by, now)
            if self.state.complete_by is not None
            else None
        )

        self.state.inputs = PlanInputs(
            current_soc=current_soc,
            price_slot_count=len(slots),
            energy_in_per_slot=energy_in,
            energy_out_per_slot=energy_out,
            deadline=deadline,
        )

        return PlanningRequest(
            current_soc=current_soc,
            target_soc=self.state.target_soc_percent,
            battery_size_kwh=self.state.battery_size_kwh,
            energy_in_per_slot=energy_in,
            energy_out_per_slot=energy_out,
            price_slots=slots,
            min_slots_per_window=self.state.min_slots_per_window,
            max_windows=self.state.max_windows,
            complete_by=deadline,
        )

    async def recalculate_plan(self) -> None:
        """Recalculate the charge plan from current entity states."""
        self._logger.separator("RECALCULATE_PLAN")
        now = dt_util.now()

        try:
            request = self._build_request()
            if request is None:
                self.state.set_failure(PlanStatus.NO_DATA, "Price or SOC sensor unavailable", now)
                await self.events.emit(ChargeulatorEvent.SENSOR_ERROR)
                await self.events.emit_plan_failed(PlanStatus.NO_DATA.value, self.state.last_error)
                return

            result = ChargePlanOptimizer.calculate(request)
        except InvalidConfigurationError as ex:
            self._logger.error("PLAN_FAILED", error=str(ex))
            self.state.set_failure(PlanStatus.INVALID_CONFIGURATION, str(ex), now)
            await self.events.emit_plan_failed(PlanStatus.INVALID_CONFIGURATION.value, str(ex))
            return

        self.state.set_plan(result, now)
        self._logger.info(
            "PLAN_CALCULATED",
            status=result.status.value,
            windows=len(result.charge_slots),
            energy_kwh=round(result.total_energy, 3),
            cost=round(result.total_cost, 4),
        )
        self._logger.debug("STATE_SNAPSHOT", **self.state.to_dict())

        await self.events.emit_plan_updated(
            result.status.value,
            len(result.charge_slots),
            result.total_energy,
            result.total_cost,
        )

    # ========== Overrides ==========

    async def set_target_soc(self, value: float) -> None:
        """Set target SOC and replan."""
        self.state.target_soc_percent = value
        self._logger.info("TARGET_SOC_SET", value=value)
        await self.recalculate_plan()
