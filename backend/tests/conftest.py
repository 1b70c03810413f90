"""Pytest fixtures — file-backed SQLite database, fresh for every test."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from gamenight.database import Base, get_db
from gamenight.errors import DeliveryFailure
from gamenight.main import app
from gamenight.services.email_service import EmailSender, get_email_sender

SQLITE_URL = "sqlite:///./test.db"


class FakeEmailSender(EmailSender):
    """Records outgoing mail; set ``fail`` to simulate a provider outage."""

    def __init__(self):
        self.sent = []
        self.fail = False

    def _deliver(self, to_address, subject, html_body, text_body):
        if self.fail:
            raise DeliveryFailure("SMTP connection refused")
        self.sent.append({"to": to_address, "subject": subject, "html": html_body, "text": text_body})


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False, "timeout": 30})

    # WAL lets the concurrent vote test read while another thread writes
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
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
    """Yield a database session for direct service calls and assertions."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def outbox():
    return FakeEmailSender()


@pytest.fixture(scope="function")
def client(session_factory, outbox):
    """TestClient with the database and email sender dependencies overridden."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_email_sender] = lambda: outbox
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers: drive the API and return response JSON
# ---------------------------------------------------------------------------
def as_user(user: dict) -> dict:
    """Query params acting as a signed-in user."""
    return {"actor_user_id": user["user_id"]}


def as_token(guest: dict) -> dict:
    """Query params acting through a guest's invite token."""
    return {"invite_token": guest["invite_token"]}


def create_test_user(client: TestClient, name: str = "Test User", email: str = None) -> dict:
    resp = client.post("/api/users/", json={"display_name": name, "email": email})
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_game_night(client: TestClient, host: dict, title: str = "Friday Game Night", **fields) -> dict:
    payload = {"host_id": host["user_id"], "title": title, "date": "2026-11-20", **fields}
    resp = client.post("/api/game-nights/", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def add_guest(client: TestClient, event: dict, host: dict, **payload) -> dict:
    """POST a guest as the host; returns the full GuestAdded body."""
    resp = client.post(f"/api/game-nights/{event['event_id']}/guests/", params=as_user(host), json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def set_status(client: TestClient, event: dict, host: dict, status: str):
    return client.post(
        f"/api/game-nights/{event['event_id']}/status", params=as_user(host), json={"status": status},
    )


def add_lineup_entry(client: TestClient, event: dict, host: dict, **payload) -> dict:
    resp = client.post(f"/api/game-nights/{event['event_id']}/lineup/", params=as_user(host), json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()
