"""
Test configuration and fixtures.

Sets up an in-memory SQLite database and a fake auth provider, and turns off
CSRF and rate limiting so route tests exercise the handlers directly.
"""

import os
from datetime import datetime, timedelta, timezone

import pytest

# Must be set BEFORE any import of slotly.config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CSRF_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECURITY_HEADERS_ENABLED"] = "true"
os.environ["COOKIE_SECURE"] = "false"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
os.environ["REDIS_URL"] = "redis://localhost:1/0"

from fastapi.testclient import TestClient  # noqa: E402

from slotly.auth import AuthProviderError, AuthSession, Identity, get_auth_client  # noqa: E402
from slotly.database import Base, SessionLocal, engine  # noqa: E402
from slotly.main import app  # noqa: E402
from slotly.models import EventType, Profile  # noqa: E402

ALICE = Identity(
    user_id="user-alice",
    email="alice@example.com",
    full_name="Alice Example",
    avatar_url=None,
)
BOB = Identity(user_id="user-bob", email="bob@example.com", full_name="Bob Builder")

ALICE_TOKEN = "alice-token"
BOB_TOKEN = "bob-token"


class FakeAuthClient:
    """Stands in for the hosted auth provider"""

    def __init__(self):
        self.users = {ALICE_TOKEN: ALICE, BOB_TOKEN: BOB}
        self.codes = {}
        self.unreachable = False
        self.exchanged = []

    async def get_user(self, access_token):
        if self.unreachable:
            raise AuthProviderError("Auth provider unreachable")
        return self.users.get(access_token)

    async def exchange_code_for_session(self, code, code_verifier=None):
        self.exchanged.append((code, code_verifier))
        identity = self.codes.get(code)
        if identity is None:
            raise AuthProviderError("invalid code")
        token = f"session-for-{identity.user_id}"
        self.users[token] = identity
        return AuthSession(
            access_token=token, refresh_token="refresh", expires_in=3600, identity=identity
        )


@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def auth_provider():
    fake = FakeAuthClient()
    app.dependency_overrides[get_auth_client] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_auth_client, None)


@pytest.fixture
def client(auth_provider):
    with TestClient(app) as test_client:
        yield test_client


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def sign_in(test_client, token):
    """Put a session cookie on the client, as the auth callback would"""
    test_client.cookies.set("sb-auth-token", token)


def make_profile(db, identity, username=None, **fields):
    profile = Profile(
        id=identity.user_id,
        username=username,
        full_name=fields.pop("full_name", identity.full_name),
        **fields,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


_BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


def make_event_type(db, owner, minutes_after_base=0, **fields):
    values = {
        "title": "Intro Call",
        "event_slug": "intro-call",
        "duration_minutes": 30,
        "location_type": "zoom",
        "created_at": _BASE_TIME + timedelta(minutes=minutes_after_base),
    }
    values.update(fields)
    event_type = EventType(user_id=owner.user_id, **values)
    db.add(event_type)
    db.commit()
    db.refresh(event_type)
    return event_type
