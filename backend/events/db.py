# backend/events/db.py
"""Engine, session factory and declarative base for the events table."""

from __future__ import annotations

from typing import Generator
from os import getenv
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

# scheme prefix -> driver-qualified prefix
_DRIVERS = {
    "postgres://": "postgresql+psycopg2://",
    "postgresql://": "postgresql+psycopg2://",
    "mysql://": "mysql+pymysql://",
}


def normalize_db_url(url: str) -> str:
    """Pin bare Postgres/MySQL URLs to the driver this project installs."""
    for bare, pinned in _DRIVERS.items():
        if url.startswith(bare):
            return pinned + url[len(bare):]
    return url


def make_engine(url: str) -> Engine:
    kwargs = {"echo": False, "future": True}
    if url.startswith("sqlite"):
        # sessions cross the threadpool FastAPI runs sync endpoints in
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs["pool_pre_ping"] = True
    return create_engine(url, **kwargs)


def make_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, autoflush=False, autocommit=False, future=True)


RAW_URL = getenv("DATABASE_URL")
DB_URL = normalize_db_url(RAW_URL) if RAW_URL else f"sqlite:///{Path(__file__).resolve().parents[1] / 'events.db'}"

engine = make_engine(DB_URL)
SessionLocal = make_session_factory(engine)


class Base(DeclarativeBase):
    pass


def get_db() -> Generator:
    """Per-request session; always closed when the request finishes."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
