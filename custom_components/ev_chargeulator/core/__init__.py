"""Core module for EV Chargeulator.

Contains the fundamental building blocks:
- State: Single source of truth for all state
- Events: Event bus for component communication
- Reader: Access layer for HA entity states
"""

from .state import ChargeulatorState, PlanInputs
from .events import ChargeulatorEventBus, ChargeulatorEvent
from .reader import EntityReader

__all__ = [
    "ChargeulatorState",
    "PlanInputs",
    "ChargeulatorEventBus",
    "ChargeulatorEvent",
    "EntityReader",
]
