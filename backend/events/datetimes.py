# backend/events/datetimes.py
"""
Conversion between the datetime-local form value and SQL DATETIME text,
plus human-readable display strings.

    form     2025-12-27T14:30
    storage  2025-12-27 14:30:00
    display  December 27, 2025 at 2:30 PM
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping, Optional, Union
import logging
import re

from dateutil import parser as dtparse

from .schemas import (
    EventDisplay,
    EventRecord,
    is_form_datetime,
    storage_text,
)

logger = logging.getLogger(__name__)

FORM_SEPARATOR = "T"
STORAGE_SEPARATOR = " "

NOT_SCHEDULED = "Not scheduled"
INVALID_DATETIME = "Invalid Date/Time"
NOT_AVAILABLE = "N/A"

_STORAGE_PREFIX_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}")


class InvalidFormat(ValueError):
    """A converter received a value that does not have the expected shape."""

    def __init__(self, value: Any, expected: str):
        self.value = value
        self.expected = expected
        super().__init__(f"Invalid date/time {value!r}: expected {expected}")


# ───────────────────────── form <-> storage ──────────────────────────
def to_storage(form_value: Optional[str]) -> str:
    """``2025-12-27T14:30`` -> ``2025-12-27 14:30:00``. Empty stays empty."""
    if not form_value:
        return ""
    if not is_form_datetime(form_value):
        raise InvalidFormat(form_value, "YYYY-MM-DDTHH:MM")
    return form_value.replace(FORM_SEPARATOR, STORAGE_SEPARATOR, 1) + ":00"


def to_form(storage_value: Union[str, datetime, None]) -> str:
    """
    ``2025-12-27 14:30:00`` -> ``2025-12-27T14:30``.

    Everything after the minutes (seconds, fractions, offsets) is dropped.
    A ``datetime`` is rendered as storage text first.
    """
    if isinstance(storage_value, datetime):
        storage_value = storage_text(storage_value)
    if not storage_value:
        return ""
    if not isinstance(storage_value, str) or not _STORAGE_PREFIX_RE.match(storage_value):
        raise InvalidFormat(storage_value, "YYYY-MM-DD HH:MM[:SS]")
    head = storage_value[:16]
    return head[:10] + FORM_SEPARATOR + head[11:]


# ───────────────────────── display ───────────────────────────────────
def _clock(dt: datetime) -> str:
    hour = dt.hour % 12 or 12
    return f"{hour}:{dt:%M} {'PM' if dt.hour >= 12 else 'AM'}"


def _display_fields(start: Optional[str]) -> dict[str, str]:
    if not start:
        return {
            "start_formatted": NOT_SCHEDULED,
            "start_short": NOT_AVAILABLE,
            "start_date": NOT_AVAILABLE,
            "start_time": NOT_AVAILABLE,
        }
    try:
        dt = dtparse.parse(start)
    except (ValueError, OverflowError):
        logger.warning("Cannot display start value %r", start)
        return {
            "start_formatted": INVALID_DATETIME,
            "start_short": NOT_AVAILABLE,
            "start_date": NOT_AVAILABLE,
            "start_time": NOT_AVAILABLE,
        }
    return {
        "start_formatted": f"{dt:%B} {dt.day}, {dt.year} at {_clock(dt)}",
        "start_short": f"{dt:%b} {dt.day}, {dt.year} - {_clock(dt)}",
        "start_date": f"{dt:%B} {dt.day}, {dt.year}",
        "start_time": _clock(dt),
    }


def format_for_display(record: Union[EventRecord, Mapping[str, Any], Any]) -> EventDisplay:
    """
    Return the record with ``start_formatted``, ``start_short``,
    ``start_date`` and ``start_time`` filled in.

    Accepts an ``EventRecord``, a mapping or an ORM ``Event``. A missing
    start gives "Not scheduled", an unreadable one "Invalid Date/Time";
    neither raises.
    """
    if not isinstance(record, EventRecord):
        record = EventRecord.model_validate(record)
    data = record.model_dump()
    data.update(_display_fields(record.start))
    return EventDisplay(**data)


def format_records_for_display(records: Iterable[Any]) -> list[EventDisplay]:
    return [format_for_display(r) for r in records]
