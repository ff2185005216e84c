# backend/events/repository.py
"""
Persistence for event rows.

Callers hand over and get back ``start`` as storage text
(``YYYY-MM-DD HH:MM:SS``); the column itself is a DATETIME.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional
import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .datetimes import InvalidFormat, to_form
from .models import Event
from .schemas import STORAGE_DATETIME_FORMAT, EventFormData, EventRecord

logger = logging.getLogger(__name__)


def _parse_storage(value: str) -> datetime:
    try:
        return datetime.strptime(value, STORAGE_DATETIME_FORMAT)
    except (TypeError, ValueError):
        raise InvalidFormat(value, "YYYY-MM-DD HH:MM:SS") from None


class EventRepo:
    @staticmethod
    def fetch(db: Session, limit: int, offset: int) -> list[EventRecord]:
        q = select(Event).order_by(Event.id.asc()).limit(limit).offset(offset)
        rows = db.execute(q).scalars().all()
        return [EventRecord.model_validate(r) for r in rows]

    @staticmethod
    def count(db: Session) -> int:
        return db.execute(select(func.count()).select_from(Event)).scalar_one()

    @staticmethod
    def get_by_id(db: Session, event_id: int) -> Optional[EventRecord]:
        ev = db.get(Event, event_id)
        return EventRecord.model_validate(ev) if ev else None

    @staticmethod
    def get_form_data(db: Session, event_id: int) -> Optional[EventFormData]:
        """Existing row shaped for the edit form, start in datetime-local format."""
        record = EventRepo.get_by_id(db, event_id)
        if not record:
            return None
        return EventFormData(
            id=record.id,
            name=record.name or "",
            location=record.location or "",
            start=to_form(record.start),
        )

    @staticmethod
    def insert(db: Session, data: Mapping[str, Any]) -> EventRecord:
        ev = Event(
            name=data["name"],
            location=data["location"],
            start=_parse_storage(data["start"]),
        )
        db.add(ev)
        db.commit()
        db.refresh(ev)
        logger.info("Created event %s", ev.id)
        return EventRecord.model_validate(ev)

    @staticmethod
    def update(db: Session, event_id: int, data: Mapping[str, Any]) -> Optional[EventRecord]:
        ev = db.get(Event, event_id)
        if not ev:
            return None
        ev.name = data["name"]
        ev.location = data["location"]
        ev.start = _parse_storage(data["start"])
        db.commit()
        db.refresh(ev)
        logger.info("Updated event %s", ev.id)
        return EventRecord.model_validate(ev)

    @staticmethod
    def delete(db: Session, event_id: int) -> bool:
        ev = db.get(Event, event_id)
        if not ev:
            return False
        db.delete(ev)
        db.commit()
        logger.info("Deleted event %s", event_id)
        return True
