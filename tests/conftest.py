"""Shared fixtures for the messaging test-suite."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Settings are read once and cached, so the environment must be ready before
# any application module is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["APP_TIMEZONE"] = "UTC"
os.environ["MESSAGE_EMAIL_SCHEDULER_ENABLED"] = "false"
os.environ.pop("SENDGRID_API_KEY", None)
os.environ.pop("SENDGRID_SENDER", None)

from campusshare.domain.entities import UserProfile  # noqa: E402
from campusshare.infrastructure import database  # noqa: E402
from campusshare.infrastructure import models  # noqa: E402,F401
from campusshare.infrastructure.repositories import UserRepository  # noqa: E402
from campusshare.infrastructure.security import create_access_token  # noqa: E402


class FakeHandle:
    """Websocket stand-in recording every JSON frame pushed to it."""

    def __init__(self, *, fail: bool = False) -> None:
        self.frames: list[Any] = []
        self.fail = fail

    async def send_json(self, data: Any) -> None:
        if self.fail:
            raise RuntimeError("connection closed")
        self.frames.append(data)


class RecordingPublisher:
    """Publisher stand-in remembering what would have been pushed."""

    def __init__(self) -> None:
        self.events: list[tuple[int, str, Any]] = []

    def broadcast_to_user(self, user_id: int, event: str, payload: Any) -> None:
        self.events.append((user_id, event, payload))

    def events_named(self, event: str) -> list[tuple[int, str, Any]]:
        return [entry for entry in self.events if entry[1] == event]


@pytest.fixture(autouse=True)
def reset_database():
    """Give every test an empty schema."""

    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)
    database.Base.metadata.create_all(bind=database.engine)
    yield


@pytest.fixture()
def db_session():
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_user(db_session):
    """Return a factory creating users with predictable usernames and emails."""

    def _make_user(username: str, *, email: str | None = "", name: str | None = None) -> UserProfile:
        return UserRepository(db_session).create(
            name=name or username.title(),
            username=username,
            email=f"{username}@example.com" if email == "" else email,
        )

    return _make_user


@pytest.fixture()
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture()
def make_handle():
    return FakeHandle


@pytest.fixture()
def auth_headers():
    """Return a helper building the bearer header for a user."""

    def _auth_headers(user: UserProfile) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _auth_headers


@pytest.fixture()
def client():
    """Return a test client bound to a fresh application instance."""

    pytest.importorskip("httpx")
    from fastapi.testclient import TestClient

    from main import create_app

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client
