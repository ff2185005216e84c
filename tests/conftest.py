"""
Shared fixtures: a throwaway SQLite database per test and an API client bound to it.
"""

import pytest
from fastapi.testclient import TestClient

from events.db import Base, get_db, make_engine, make_session_factory
from events.main import app


@pytest.fixture
def session_factory(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'test_events.db'}")
    Base.metadata.create_all(bind=engine)
    try:
        yield make_session_factory(engine)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db_session(session_factory):
    """Create test database session"""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def sample_form():
    return {"name": "Launch Party", "location": "Main Hall", "start": "2025-12-27T14:30"}
