"""Entities module - HA entity definitions using factory pattern.

All entities are thin wrappers that:
- Read from ChargeulatorState
- Delegate actions to the coordinator
"""

from .sensors import async_setup_sensors, SENSOR_DEFINITIONS
from .numbers import async_setup_numbers
from .buttons import async_setup_buttons

__all__ = [
    "async_setup_sensors",
    "async_setup_numbers",
    "async_setup_buttons",
    "SENSOR_DEFINITIONS",
]
