import logging
import os

# Keep the application engine off disk; tests bind their own engine below
os.environ.setdefault("DATABASE_URL", "sqlite://")

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.session import Session

from badgemint.core.celery_config import celery_app
from badgemint.database.db import Base, get_db
from badgemint.main import app
from badgemint.services import events as event_service

T0 = 1_700_000_000

ORGANIZER = "0x1111111111111111111111111111111111111111"
ALICE = "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"
BOB = "0xbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb"
CAROL = "0xcccccccccccccccccccccccccccccccccccccccc"


class FrozenClock:
    """Stand-in for badgemint.core.clock.now that only moves when told to."""

    def __init__(self, current: int):
        self.current = current

    def __call__(self) -> int:
        return self.current

    def advance(self, seconds: int) -> int:
        self.current += seconds
        return self.current

    def set(self, value: int) -> int:
        self.current = value
        return self.current


@pytest.fixture(autouse=True)
def frozen_clock(monkeypatch: pytest.MonkeyPatch) -> FrozenClock:
    clock = FrozenClock(T0)
    monkeypatch.setattr("badgemint.core.clock.now", clock)
    return clock


@pytest.fixture
def session_factory(tmp_path):
    """A fresh SQLite file per test so threads get their own connections."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'badgemint.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory) -> Session:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch: pytest.MonkeyPatch):
    """Route the event lock through an in-process Redis."""
    client = fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
    monkeypatch.setattr("badgemint.services.locks.get_redis_client", lambda: client)
    return client


@pytest.fixture(autouse=True)
def eager_celery(monkeypatch: pytest.MonkeyPatch, session_factory):
    # Run tasks inline against the test database instead of a broker
    monkeypatch.setattr(celery_app.conf, "task_always_eager", True)
    monkeypatch.setattr("badgemint.tasks.SessionLocal", session_factory)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db: Session = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def notifications(caplog: pytest.LogCaptureFixture):
    """Return a function listing (name, payload) of emitted notifications."""
    caplog.set_level(logging.INFO, logger="badgemint.notifications")

    def collected(name: str | None = None) -> list[tuple[str, dict]]:
        return [
            (record.notification, record.payload)
            for record in caplog.records
            if getattr(record, "notification", None) and (name is None or record.notification == name)
        ]

    return collected


@pytest.fixture
def make_event(db_session: Session):
    """Create an event with a [T0+10, T0+100] window via the registry service."""

    def _make_event(**overrides):
        fields = {
            "organizer": ORGANIZER,
            "name": "DevCon Workshop",
            "description": "Hands-on session",
            "image_uri": "ipfs://bafybadge",
            "start_time": T0 + 10,
            "end_time": T0 + 100,
            "max_attendees": 10,
        }
        fields.update(overrides)
        return event_service.create_event(db_session, **fields)

    return _make_event


def wallet(n: int) -> str:
    return f"0x{n:040x}"
