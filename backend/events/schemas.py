# backend/events/schemas.py
from __future__ import annotations
from typing import Any, Optional
from datetime import datetime
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import NAME_MAX_LENGTH, LOCATION_MAX_LENGTH

# <input type="datetime-local"> value, minute precision
FORM_DATETIME_FORMAT = "%Y-%m-%dT%H:%M"
# SQL DATETIME text
STORAGE_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

FORM_DATETIME_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}$")


def storage_text(dt: datetime) -> str:
    """DATETIME text for ``dt``; the year is always four digits."""
    # %Y is not zero-padded for years below 1000 on glibc
    return f"{dt.year:04d}-{dt:%m-%d %H:%M:%S}"


def is_form_datetime(value: Any) -> bool:
    """True when ``value`` has exactly the ``YYYY-MM-DDTHH:MM`` shape."""
    return isinstance(value, str) and FORM_DATETIME_RE.fullmatch(value) is not None


class EventForm(BaseModel):
    """Submitted create/update form. ``start`` is the datetime-local value."""
    name:     str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    location: str = Field(min_length=1, max_length=LOCATION_MAX_LENGTH)
    start:    str

    @field_validator("name", "location", mode="before")
    @classmethod
    def _strip(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("start")
    @classmethod
    def _valid_form_datetime(cls, v: str) -> str:
        if not v:
            raise ValueError("The event start field is required.")
        if not is_form_datetime(v):
            raise ValueError("The event start field must be a valid date and time (YYYY-MM-DDTHH:MM).")
        try:
            datetime.strptime(v, FORM_DATETIME_FORMAT)
        except ValueError:
            raise ValueError("The event start field must be a real calendar date and time.") from None
        return v


class EventRecord(BaseModel):
    """An event row as read back from storage; ``start`` is storage text."""
    id:       Optional[int] = None
    name:     Optional[str] = None
    location: Optional[str] = None
    start:    Optional[str] = None
    model_config = ConfigDict(from_attributes=True)  # allow from ORM

    @field_validator("start", mode="before")
    @classmethod
    def _datetime_to_storage(cls, v: Any) -> Any:
        if isinstance(v, datetime):
            return storage_text(v)
        return v


class EventDisplay(EventRecord):
    """Event record plus the derived display strings."""
    start_formatted: str
    start_short:     str
    start_date:      str
    start_time:      str


class EventFormData(BaseModel):
    """Values used to fill the create/edit form."""
    id:       Optional[int] = None
    name:     str = ""
    location: str = ""
    start:    str = ""  # form format


class PaginationOut(BaseModel):
    page:        int
    per_page:    int
    total_rows:  int
    total_pages: int
    offset:      int
    showing:     str


class EventPage(BaseModel):
    """Response schema for a page of events."""
    rows:       list[EventDisplay]
    pagination: PaginationOut


class PerPageOptions(BaseModel):
    options:        list[int]
    default_index:  int
