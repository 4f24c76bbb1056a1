"""Database engine and session for SQLite (dev) / PostgreSQL (prod)."""
from collections.abc import Callable, Generator
import logging
import os
import time
from typing import TypeVar

from sqlalchemy import create_engine, event
from sqlalchemy.exc import DBAPIError, DisconnectionError, OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from discovery_core.geo import haversine_km
from utils.config import DATABASE_URL, DB_RETRY_ATTEMPTS, DB_RETRY_DELAY_MS

LOG = logging.getLogger(__name__)

T = TypeVar("T")

# Runtime safety: when TESTING=true, never use production DB.
if os.environ.get("TESTING") == "true":
    url = DATABASE_URL
    if "discovery.db" in url or (":memory:" not in url and "test" not in url.lower().split("?")[0]):
        raise RuntimeError(
            "Tests must not run against production. Set TESTING_DATABASE_URL to sqlite:///:memory: "
            "(or another test URL containing :memory: or 'test')."
        )

_connect_args = {"check_same_thread": False} if "sqlite" in DATABASE_URL else {}
# In-memory SQLite: use one connection so all sessions share the same DB.
_engine_kw = {"connect_args": _connect_args, "echo": False}
if "sqlite" in DATABASE_URL and ":memory:" in DATABASE_URL:
    _engine_kw["poolclass"] = StaticPool

_engine = create_engine(DATABASE_URL, **_engine_kw)


def register_sqlite_functions(engine) -> None:
    """
    Enable foreign keys and register haversine_km on every SQLite connection.
    BEGIN is emitted by SQLAlchemy instead of the sqlite3 driver so savepoints nest inside the outer transaction.
    """

    @event.listens_for(engine, "connect")
    def _sqlite_setup(dbapi_conn, connection_record):
        dbapi_conn.isolation_level = None
        dbapi_conn.execute("PRAGMA foreign_keys=ON")
        dbapi_conn.create_function("haversine_km", 4, _sqlite_haversine_km, deterministic=True)

    @event.listens_for(engine, "begin")
    def _sqlite_begin(conn):
        conn.exec_driver_sql("BEGIN")


def _sqlite_haversine_km(lat1, lon1, lat2, lon2):
    if None in (lat1, lon1, lat2, lon2):
        return None
    return haversine_km(lat1, lon1, lat2, lon2)


if "sqlite" in DATABASE_URL:
    register_sqlite_functions(_engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_engine)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: yield a DB session and close after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


_TRANSIENT_MESSAGES = (
    "connection refused",
    "server closed the connection",
    "connection pool timeout",
    "could not connect",
    "prepared statement",
)


def is_transient_error(exc: BaseException) -> bool:
    """True for connection-level failures worth retrying."""
    if isinstance(exc, DisconnectionError):
        return True
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True
    if isinstance(exc, OperationalError):
        message = str(exc).lower()
        return any(m in message for m in _TRANSIENT_MESSAGES)
    return False


def with_db_retry(
    session: Session,
    operation: Callable[[], T],
    attempts: int = DB_RETRY_ATTEMPTS,
    delay_ms: int = DB_RETRY_DELAY_MS,
) -> T:
    """
    Run a read-only operation on session, retrying transient connection errors with linear back-off.
    The session is rolled back before each retry so it can reconnect.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return operation()
        except (DBAPIError, DisconnectionError) as exc:
            if not is_transient_error(exc) or attempt >= attempts:
                raise
            LOG.warning("Database operation failed (attempt %d/%d): %s", attempt, attempts, exc)
            session.rollback()
            time.sleep(delay_ms * attempt / 1000.0)
