"""Data models for EV Chargeulator integration."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any


class InvalidConfigurationError(ValueError):
    """Raised when planning input makes the calculation meaningless."""


class PlanStatus(str, Enum):
    """Outcome of a plan calculation."""

    PLANNED = "planned"
    NO_CHARGING_NEEDED = "no_charging_needed"
    INSUFFICIENT_SLOTS = "insufficient_slots"
    NO_FEASIBLE_PLAN = "no_feasible_plan"
    INVALID_CONFIGURATION = "invalid_configuration"
    NO_DATA = "no_data"


@dataclass(frozen=True)
class PriceSlot:
    """One forecast price interval."""

    start: datetime
    end: datetime
    price: float

    @property
    def duration(self) -> timedelta:
        """Length of the interval."""
        return self.end - self.start


@dataclass(frozen=True)
class ChargeWindow:
    """Contiguous run of price slots taken from a slot sequence.

    start_index is the position of the first slot in the sequence the
    window was cut from.
    """

    start_index: int
    slots: tuple[PriceSlot, ...]
    cost: float

    @property
    def indices(self) -> range:
        """Absolute indices covered by this window."""
        return range(self.start_index, self.start_index + len(self.slots))

    @property
    def start(self) -> datetime:
        return self.slots[0].start

    @property
    def end(self) -> datetime:
        return self.slots[-1].end

    def __len__(self) -> int:
        return len(self.slots)


@dataclass(frozen=True)
class PlanCandidate:
    """A complete split of the required slots into windows."""

    cost: float
    windows: tuple[ChargeWindow, ...]


@dataclass(frozen=True)
class ChargeSlot:
    """One committed charging interval of the final plan."""

    start: datetime
    end: datetime
    avg_price: float
    energy: float
    cost: float
    price_slots: tuple[PriceSlot, ...]
    charge: int
    charge_delta: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for state attributes/logging."""
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "avg_price": round(self.avg_price, 4),
            "energy_kwh": round(self.energy, 3),
            "cost": round(self.cost, 4),
            "charge": self.charge,
            "charge_delta": round(self.charge_delta, 2),
            "price_slot_count": len(self.price_slots),
        }


@dataclass(frozen=True)
class ChargePlanResult:
    """Final output of the optimizer."""

    charge_slots: tuple[ChargeSlot, ...] = ()
    total_energy: float = 0.0
    total_cost: float = 0.0
    status: PlanStatus = PlanStatus.PLANNED

    # Diagnostics
    energy_needed: float = 0.0
    slots_to_charge: int = 0

    @property
    def has_charging(self) -> bool:
        """Check if the plan contains any charging interval."""
        return bool(self.charge_slots)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for state attributes/logging."""
        return {
            "status": self.status.value,
            "total_energy_kwh": round(self.total_energy, 3),
            "total_cost": round(self.total_cost, 4),
            "energy_needed_kwh": round(self.energy_needed, 3),
            "slots_to_charge": self.slots_to_charge,
            "charge_slots": [slot.to_dict() for slot in self.charge_slots],
        }


@dataclass
class PlanningRequest:
    """Inputs gathered by the coordinator for one plan calculation."""

    current_soc: float
    target_soc: float
    battery_size_kwh: float
    energy_in_per_slot: float
    energy_out_per_slot: float
    price_slots: list[PriceSlot] = field(default_factory=list)
    min_slots_per_window: int = 1
    max_windows: int = 3
    complete_by: datetime | None = None
