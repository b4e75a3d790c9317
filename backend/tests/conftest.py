"""Pytest fixtures — SQLite database, pinned clock and a recording email sender."""
import os

# Must be set before daily_checkin.config is imported
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["EMAIL_SEND_DELAY_SECONDS"] = "0"
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import date, datetime
from typing import Optional

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from daily_checkin.database import Base, get_db
from daily_checkin.dependencies import get_clock, get_email_sender
from daily_checkin.main import app
from daily_checkin.services.clock import FixedClock

# Import all models so they register with Base.metadata
from daily_checkin.models.user import User, UserRole          # noqa: F401
from daily_checkin.models.contact import EmergencyContact     # noqa: F401
from daily_checkin.models.check_in import CheckIn             # noqa: F401
from daily_checkin.models.scan_run import ScanRun             # noqa: F401

SQLITE_URL = "sqlite:///./test.db"

# "Today" for every test unless a test moves the clock
TODAY = datetime(2024, 1, 15, 10, 0, 0)


class RecordingSender:
    """Stands in for EmailSender; remembers every message instead of sending it."""

    def __init__(self):
        self.sent: list[dict] = []
        self.fail_for: set[str] = set()

    @property
    def configured(self) -> bool:
        return True

    def send(self, to: str, subject: str, text: str, html: Optional[str] = None) -> bool:
        if to in self.fail_for:
            return False
        self.sent.append({"to": to, "subject": subject, "text": text, "html": html})
        return True

    @property
    def recipients(self) -> list[str]:
        return [m["to"] for m in self.sent]


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory):
    """Yield a database session, closed after the test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def clock():
    return FixedClock(TODAY)


@pytest.fixture(scope="function")
def sender():
    return RecordingSender()


@pytest.fixture(scope="function")
def client(session_factory, clock, sender):
    """FastAPI TestClient with database, clock and email sender overridden."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_email_sender] = lambda: sender
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def register_user(client: TestClient, username: str = "alice", password: str = "secret123",
                  email: Optional[str] = None) -> dict:
    """Helper — POST /api/auth/register (leaves the client logged in) and return the user."""
    body = {"username": username, "password": password}
    if email is not None:
        body["email"] = email
    resp = client.post("/api/auth/register", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()["user"]


def login(client: TestClient, username: str, password: str = "secret123") -> dict:
    resp = client.post("/api/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["user"]


def add_contact(client: TestClient, name: str, email: str) -> dict:
    resp = client.post("/api/contacts/", json={"name": name, "email": email})
    assert resp.status_code == 201, resp.text
    return resp.json()["contact"]


def make_user(db, username: str, **fields) -> User:
    """Insert a user directly, bypassing the API."""
    user = User(username=username, password_hash="x", **fields)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def add_check_ins(db, user_id: int, *days: str) -> None:
    """Insert check-in rows for the given YYYY-MM-DD days."""
    for day in days:
        db.add(CheckIn(user_id=user_id, check_in_date=day))
    db.commit()


def add_contacts(db, user_id: int, *emails: str) -> None:
    for i, email in enumerate(emails, start=1):
        db.add(EmergencyContact(user_id=user_id, name=f"Contact {i}", email=email))
    db.commit()


def d(day: str) -> date:
    return date.fromisoformat(day)
