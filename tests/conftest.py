"""Shared fixtures: in-memory database, fake clock, API test client."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, update
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from main import app
from models.text_record import TextRecord
from records.store import RecordStore


class FakeClock:
    """Callable clock returning a settable Unix time."""

    def __init__(self, now: int = 1_700_000_000):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@pytest.fixture
def engine():
    """One in-memory SQLite database shared by every session of a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(db, clock):
    return RecordStore(db, clock=clock)


@pytest.fixture
def api(session_factory):
    """TestClient whose requests use the in-memory database."""

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def force_expire(engine):
    """Move a record's expiry into the past, bypassing the API."""

    def _expire(text_id: str) -> None:
        with engine.begin() as conn:
            conn.execute(
                update(TextRecord).where(TextRecord.id == text_id).values(expires_at=0)
            )

    return _expire
