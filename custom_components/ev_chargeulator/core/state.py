"""Single Source of Truth - All state in one place.

ChargeulatorState holds the configuration, the last inputs read from Home
Assistant and the current plan. Entities only read from it; the coordinator
is the only writer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time
from typing import Any

from ..models.data_models import ChargePlanResult, ChargeSlot, PlanStatus


@dataclass
class PlanInputs:
    """Inputs used for the last plan calculation."""

    current_soc: float | None = None
    price_slot_count: int = 0
    energy_in_per_slot: float = 0.0
    energy_out_per_slot: float = 0.0
    deadline: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/attributes."""
        return {
            "current_soc": self.current_soc,
            "price_slot_count": self.price_slot_count,
            "energy_in_per_slot_kwh": round(self.energy_in_per_slot, 3),
            "energy_out_per_slot_kwh": round(self.energy_out_per_slot, 3),
            "deadline": self.deadline.isoformat() if self.deadline else None,
        }


@dataclass
class ChargeulatorState:
    """Complete state for the integration."""

    # Entity IDs
    price_entity: str = ""
    soc_entity: str = ""

    # Battery / charger config
    battery_size_kwh: float = 60.0
    energy_in_value: float = 7.0
    energy_in_unit: str = "kW"
    energy_out_value: float | None = None
    energy_out_unit: str | None = None

    # Planning config
    target_soc_percent: float = 90.0
    min_slots_per_window: int = 1
    max_windows: int = 3
    complete_by: time | None = None

    file_logging: bool = False

    # Runtime
    inputs: PlanInputs = field(default_factory=PlanInputs)
    current_plan: ChargePlanResult = field(
        default_factory=lambda: ChargePlanResult(status=PlanStatus.NO_DATA)
    )
    last_error: str = ""
    last_calculated: datetime | None = None

    @property
    def status(self) -> PlanStatus:
        """Status of the current plan."""
        return self.current_plan.status

    def next_charge_slot(self, now: datetime) -> ChargeSlot | None:
        """First planned interval that has not ended yet."""
        for charge_slot in self.current_plan.charge_slots:
            if charge_slot.end > now:
                return charge_slot
        return None

    @property
    def projected_soc(self) -> int | None:
        """SOC at the end of the last planned interval."""
        if not self.current_plan.charge_slots:
            return None
        return self.current_plan.charge_slots[-1].charge

    def set_plan(self, plan: ChargePlanResult, when: datetime) -> None:
        """Store a new plan."""
        self.current_plan = plan
        self.last_error = ""
        self.last_calculated = when

    def set_failure(self, status: PlanStatus, error: str, when: datetime) -> None:
        """Store a failed calculation."""
        self.current_plan = ChargePlanResult(status=status)
        self.last_error = error
        self.last_calculated = when

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for diagnostics."""
        return {
            "config": {
                "price_entity": self.price_entity,
                "soc_entity": self.soc_entity,
                "battery_size_kwh": self.battery_size_kwh,
                "energy_in": f"{self.energy_in_value} {self.energy_in_unit}",
                "energy_out": (
                    f"{self.energy_out_value} {self.energy_out_unit or self.energy_in_unit}"
                    if self.energy_out_value is not None
                    else None
                ),
                "target_soc_percent": self.target_soc_percent,
                "min_slots_per_window": self.min_slots_per_window,
                "max_windows": self.max_windows,
                "complete_by": self.complete_by.isoformat() if self.complete_by else None,
            },
            "inputs": self.inputs.to_dict(),
            "plan": self.current_plan.to_dict(),
            "last_error": self.last_error,
            "last_calculated": self.last_calculated.isoformat() if self.last_calculated else None,
        }
