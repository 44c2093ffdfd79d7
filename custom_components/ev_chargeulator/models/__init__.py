"""Data models for EV Chargeulator."""

from .data_models import (
    ChargePlanResult,
    ChargeSlot,
    ChargeWindow,
    InvalidConfigurationError,
    PlanCandidate,
    PlanningRequest,
    PlanStatus,
    PriceSlot,
)

__all__ = [
    "ChargePlanResult",
    "ChargeSlot",
    "ChargeWindow",
    "InvalidConfigurationError",
    "PlanCandidate",
    "PlanningRequest",
    "PlanStatus",
    "PriceSlot",
]
