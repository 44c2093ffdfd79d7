"""Unified logging module for EV Chargeulator."""

from .unified_logger import ChargeulatorLogger, DailyEventHandler, get_logger

__all__ = ["ChargeulatorLogger", "DailyEventHandler", "get_logger"]
