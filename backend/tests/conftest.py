# Set test environment before any application or db imports.
import os

os.environ["TESTING"] = "true"
os.environ["TESTING_DATABASE_URL"] = "sqlite:///:memory:"
os.environ["AUTH_JWT_SECRET"] = "test-secret-for-jwt-signing"
os.environ["IMPORT_API_KEY"] = "test-import-key"

import time
import uuid

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.orm import Session

from db import SessionLocal, get_db
from discovery_core.cache import app_cache
from main import app
from models import Base
from models.user import User
from repositories.location_repository import create_location, get_or_create_aspect, set_aspect_rating
from repositories.review_repository import add_external_review
from utils import config


def _get_engine():
    """Engine used by the app (in-memory when TESTING=true)."""
    return SessionLocal.kw["bind"]


@pytest.fixture(scope="session")
def engine():
    """One in-memory engine per test run; create tables once."""
    eng = _get_engine()
    Base.metadata.create_all(eng)
    return eng


@pytest.fixture
def db_session(engine):
    """Function-scoped session; commits release savepoints and the outer transaction is rolled back."""
    connection = engine.connect()
    trans = connection.begin()
    session = Session(bind=connection, join_transaction_mode="create_savepoint")
    try:
        yield session
    finally:
        session.close()
        if trans.is_active:
            trans.rollback()
        connection.close()


@pytest.fixture(autouse=True)
def clear_cache():
    """Cache is process-wide; keep tests independent."""
    app_cache.clear()
    yield
    app_cache.clear()


def _override_get_db(session):
    """Return a generator that yields the given session (for dependency override)."""
    def override():
        yield session
    return override


@pytest.fixture
def client(db_session):
    """API test client; overrides get_db to use the test db_session, cleared on teardown."""
    app.dependency_overrides[get_db] = _override_get_db(db_session)
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


def make_token(user_id: str, email: str | None = None, expires_in: int = 3600, **claims) -> str:
    """Sign an access token the way the identity provider does."""
    payload = {
        "sub": user_id,
        "aud": config.AUTH_JWT_AUDIENCE,
        "exp": int(time.time()) + expires_in,
        "email": email or f"{user_id[:8]}@example.com",
        "user_metadata": {"avatar_url": f"https://img.example.com/{user_id[:8]}.png"},
    }
    payload.update(claims)
    return jwt.encode(payload, config.AUTH_JWT_SECRET, algorithm=config.AUTH_JWT_ALGORITHM)


def auth_headers(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def user_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def other_user_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def make_user(db_session):
    """Create an app_user row."""
    def _make(user_id: str | None = None) -> User:
        user = User(id=user_id or str(uuid.uuid4()), email=None)
        db_session.add(user)
        db_session.commit()
        return user
    return _make


@pytest.fixture
def make_location(db_session):
    """
    Create a location with optional imported reviews and aspect ratings.
    aspects maps aspect name -> rating.
    """
    def _make(
        name: str = "Sample Place",
        latitude: float = 41.8781,
        longitude: float = -87.6298,
        *,
        reviews: list[int] | None = None,
        aspects: dict[str, float] | None = None,
        opening_hours=None,
        category_id: int | None = None,
    ):
        loc = create_location(
            db_session,
            name,
            latitude,
            longitude,
            category_id=category_id,
            opening_hours=opening_hours if opening_hours is not None else "N/A",
        )
        for rating in reviews or []:
            add_external_review(db_session, location_id=loc.id, rating=rating, body="Imported review text")
        for aspect_name, rating in (aspects or {}).items():
            aspect = get_or_create_aspect(db_session, aspect_name)
            set_aspect_rating(db_session, loc.id, aspect.id, rating)
        db_session.refresh(loc)
        return loc
    return _make


@pytest.fixture
def headers_for():
    """headers_for(user_id) -> Authorization header dict with a valid bearer token."""
    return auth_headers


@pytest.fixture
def make_location_aspects(db_session):
    """make_location_aspects(*names) -> tuple of aspect ids, creating aspects as needed."""
    def _ids(*names: str) -> tuple[int, ...]:
        return tuple(get_or_create_aspect(db_session, name).id for name in names)
    return _ids
