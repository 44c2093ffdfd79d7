"""Price forecast preparation.

Turns the raw price lists published by Nord Pool style sensors into clean,
time-ordered PriceSlot sequences for the optimizer. Pure Python, no Home
Assistant imports.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, time, timedelta, tzinfo
from typing import Any

from ..models.data_models import PriceSlot

_LOGGER = logging.getLogger(__name__)

DEFAULT_SLOT_DURATION = timedelta(minutes=15)

# Keys price sensors use for the slot price
PRICE_KEYS = ("value", "price")


def _parse_instant(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip().strip("'\""))
        except ValueError:
            return None
    return None


def _localize(
    start: datetime,
    end: datetime,
    default_tz: tzinfo | None,
) -> tuple[datetime, datetime]:
    """Give naive bounds a time zone.

    A short bound without offset borrows it from the other bound, so
    "2026-01-01T00:00" up to "2026-01-01T00:15:00+01:00" stays one slot.
    Anything still naive falls back to default_tz.
    """
    if start.tzinfo is None and end.tzinfo is not None:
        start = start.replace(tzinfo=end.tzinfo)
    elif end.tzinfo is None and start.tzinfo is not None:
        end = end.replace(tzinfo=start.tzinfo)
    if start.tzinfo is None and default_tz is not None:
        start = start.replace(tzinfo=default_tz)
        end = end.replace(tzinfo=default_tz)
    return start, end


def _parse_price(entry: Mapping[str, Any]) -> float | None:
    for key in PRICE_KEYS:
        if key not in entry or entry[key] is None:
            continue
        try:
            price = float(entry[key])
        except (TypeError, ValueError):
            return None
        return price if math.isfinite(price) else None
    return None


def parse_price_entry(
    entry: Any,
    default_tz: tzinfo | None = None,
) -> PriceSlot | None:
    """Parse one raw price entry, or None if it is malformed."""
    if not isinstance(entry, Mapping):
        return None

    start = _parse_instant(entry.get("start"))
    end = _parse_instant(entry.get("end"))
    price = _parse_price(entry)
    if start is None or end is None or price is None:
        return None

    start, end = _localize(start, end, default_tz)
    if end <= start:
        return None

    return PriceSlot(start=start, end=end, price=price)


def parse_price_slots(
    raw_today: Iterable[Any] | None,
    raw_tomorrow: Iterable[Any] | None = None,
    default_tz: tzinfo | None = None,
) -> list[PriceSlot]:
    """Combine today's and tomorrow's raw prices into one slot sequence.

    Malformed entries are dropped. The result is sorted by start and holds
    at most one slot per start instant (the first one seen).
    """
    slots: list[PriceSlot] = []
    skipped = 0
    for entry in [*(raw_today or []), *(raw_tomorrow or [])]:
        slot = parse_price_entry(entry, default_tz)
        if slot is None:
            skipped += 1
            continue
        slots.append(slot)

    if skipped:
        _LOGGER.debug("Skipped %d malformed price entries", skipped)

    unique: dict[datetime, PriceSlot] = {}
    for slot in slots:
        unique.setdefault(slot.start, slot)
    return sorted(unique.values(), key=lambda slot: slot.start)


def upcoming_slots(slots: Iterable[PriceSlot], now: datetime) -> list[PriceSlot]:
    """Drop slots that have already ended."""
    return [slot for slot in slots if slot.end > now]


def parse_time_of_day(value: Any) -> time | None:
    """Parse a "HH:MM[:SS]" string (or time) as used by time selectors."""
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value
    try:
        if isinstance(value, Mapping):
            return time(
                int(value.get("hours", value.get("hour", 0))),
                int(value.get("minutes", value.get("minute", 0))),
            )
        return time.fromisoformat(str(value).strip())
    except (TypeError, ValueError):
        _LOGGER.warning("Invalid time of day %r ignored", value)
        return None


def resolve_complete_by(time_of_day: time, now: datetime) -> datetime:
    """Next instant at time_of_day, rolling to tomorrow if already past."""
    deadline = now.replace(
        hour=time_of_day.hour,
        minute=time_of_day.minute,
        second=time_of_day.second,
        microsecond=0,
    )
    if deadline <= now:
        deadline += timedelta(days=1)
    return deadline


def truncate_to_deadline(slots: Iterable[PriceSlot], deadline: datetime) -> list[PriceSlot]:
    """Keep only slots starting before the deadline."""
    return [slot for slot in slots if slot.start < deadline]


def slot_duration(
    slots: Sequence[PriceSlot],
    default: timedelta = DEFAULT_SLOT_DURATION,
) -> timedelta:
    """Duration of the forecast slots, taken from the first one."""
    if not slots:
        return default
    return slots[0].duration
