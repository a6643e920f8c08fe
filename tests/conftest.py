"""
Test configuration and fixtures for ShipTrack tests.

The app runs against an in-memory SQLite database and a test signing secret,
both swapped in through ``app.dependency_overrides``.
"""

import os

os.environ.setdefault("POSTGRES_DSN", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shiptrack.api.deps import get_db
from shiptrack.core.config import Settings, get_settings
from shiptrack.db.session import Base
from shiptrack.db.models import User
from shiptrack.main import app
from shiptrack.security.identity import AuthContext
from shiptrack.security.utils import now_utc

TEST_SECRET = "test-secret"
FUTURE_ETA = "2030-01-01T12:00:00Z"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def test_settings():
    return Settings(POSTGRES_DSN="sqlite://", JWT_SECRET=TEST_SECRET, JWT_ALGORITHM="HS256")


@pytest.fixture
def client(session_factory, test_settings):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    """Register (if needed) and log in, returning Authorization headers."""

    def _login(email: str = "a@x.com", password: str = "secret1") -> dict:
        r = client.post("/api/auth/register", json={"email": email, "password": password})
        assert r.status_code in (201, 409), r.text
        r = client.post("/api/auth/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        return {"Authorization": f"Bearer {r.json()['token']}"}

    return _login


@pytest.fixture
def user(db):
    """A user row inserted directly, for service-level tests."""
    u = User(email="svc@x.com", password_hash="x", created_at=now_utc(), updated_at=now_utc())
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


@pytest.fixture
def identity(user):
    return AuthContext(user_id=user.id, email=user.email)
