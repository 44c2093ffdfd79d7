"""Event Bus for component communication.

The coordinator announces plan changes here. Every event is logged, and
plan/UI events are forwarded to Home Assistant so entities refresh.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from homeassistant.helpers.dispatcher import async_dispatcher_send

from ..chargeulator_logging import get_logger
from ..const import SIGNAL_UPDATE

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


class ChargeulatorEvent(str, Enum):
    """Event types for the EV Chargeulator integration."""

    # Inputs
    PRICES_UPDATED = "ev_chargeulator.prices_updated"
    SOC_UPDATED = "ev_chargeulator.soc_updated"

    # Plan
    PLAN_UPDATED = "ev_chargeulator.plan_updated"
    PLAN_FAILED = "ev_chargeulator.plan_failed"

    # Errors
    SENSOR_ERROR = "ev_chargeulator.sensor_error"

    # UI update trigger
    UI_UPDATE = "ev_chargeulator.ui_update"


# Events that make entities refresh
UI_EVENTS = {
    ChargeulatorEvent.PLAN_UPDATED,
    ChargeulatorEvent.PLAN_FAILED,
    ChargeulatorEvent.UI_UPDATE,
}


@dataclass
class EventData:
    """Container for event data."""

    event: ChargeulatorEvent
    timestamp: datetime
    data: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "event": self.event.value,
            "timestamp": self.timestamp.isoformat(),
            "data": self.data,
        }


EventHandler = Callable[[EventData], Awaitable[None]]


class ChargeulatorEventBus:
    """Central event bus for the integration."""

    def __init__(self, hass: HomeAssistant) -> None:
        """Initialize the event bus."""
        self.hass = hass
        self._logger = get_logger()
        self._handlers: dict[ChargeulatorEvent, list[EventHandler]] = {}

    async def emit(self, event: ChargeulatorEvent, **data: Any) -> None:
        """Emit an event to registered handlers and, if needed, to entities."""
        event_data = EventData(event=event, timestamp=datetime.now(), data=data)
        self._logger.debug(f"EVENT_{event.name}", **data)

        for handler in list(self._handlers.get(event, [])):
            try:
                await handler(event_data)
            except Exception as ex:  # noqa: BLE001
                self._logger.error(
                    "EVENT_HANDLER_ERROR",
                    event_name=event.name,
                    handler=getattr(handler, "__name__", repr(handler)),
                    error=str(ex),
                )

        if event in UI_EVENTS:
            async_dispatcher_send(self.hass, SIGNAL_UPDATE)

    def on(self, event: ChargeulatorEvent, handler: EventHandler) -> Callable[[], None]:
        """Register an event handler.

        Returns:
            Unsubscribe function
        """
        self._handlers.setdefault(event, []).append(handler)

        def unsubscribe() -> None:
            self.off(event, handler)

        return unsubscribe

    def off(self, event: ChargeulatorEvent, handler: EventHandler) -> None:
        """Unregister an event handler."""
        if handler in self._handlers.get(event, []):
            self._handlers[event].remove(handler)

    async def emit_plan_updated(
        self,
        status: str,
        windows: int,
        total_energy: float,
        total_cost: float,
    ) -> None:
        """Convenience method to emit plan update event."""
        await self.emit(
            ChargeulatorEvent.PLAN_UPDATED,
            status=status,
            windows=windows,
            total_energy=round(total_energy, 3),
            total_cost=round(total_cost, 4),
        )

    async def emit_plan_failed(self, status: str, error: str) -> None:
        """Convenience method to emit plan failure event."""
        await self.emit(ChargeulatorEvent.PLAN_FAILED, status=status, error=error)
