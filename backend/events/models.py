from __future__ import annotations
from datetime import datetime

from sqlalchemy import Integer, String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base

NAME_MAX_LENGTH = 100
LOCATION_MAX_LENGTH = 100


class Event(Base):
    __tablename__ = "events"

    id:       Mapped[int]      = mapped_column(Integer, primary_key=True, index=True)
    name:     Mapped[str]      = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    location: Mapped[str]      = mapped_column(String(LOCATION_MAX_LENGTH), nullable=False)
    start:    Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
