"""Integration tests: retrying a read after the connection drops mid-session."""
import sqlite3

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

import db
from db import with_db_retry
from models import Base
from models.location import Location
from repositories.location_repository import get_location

pytestmark = pytest.mark.integration


@pytest.fixture
def file_engine(tmp_path, monkeypatch):
    """File-backed SQLite engine (reconnectable) holding one location."""
    monkeypatch.setattr(db.time, "sleep", lambda s: None)
    engine = create_engine(f"sqlite:///{tmp_path / 'retry.db'}")
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        session.add(Location(id="loc-x", name="Chicago Riverwalk", latitude=41.888, longitude=-87.625))
        session.commit()
    yield engine
    engine.dispose()


def _drop_connection_once(engine, failures: dict) -> None:
    """First statement fails and is reported as a disconnect, invalidating the connection."""

    @event.listens_for(engine, "do_execute")
    def _fail(cursor, statement, parameters, context):
        if failures["raised"] == 0:
            failures["raised"] += 1
            raise sqlite3.OperationalError("disk I/O error")
        return False

    @event.listens_for(engine, "handle_error")
    def _as_disconnect(ctx):
        if failures["flagged"] == 0:
            failures["flagged"] += 1
            ctx.is_disconnect = True


def test_read_succeeds_after_dropped_connection(file_engine):
    failures = {"raised": 0, "flagged": 0}
    _drop_connection_once(file_engine, failures)
    with Session(file_engine) as session:
        loc = with_db_retry(session, lambda: get_location(session, "loc-x"), attempts=3, delay_ms=1)
    assert loc is not None
    assert loc.name == "Chicago Riverwalk"
    assert failures == {"raised": 1, "flagged": 1}


def test_dropped_connection_without_retries_left_raises(file_engine):
    _drop_connection_once(file_engine, {"raised": 0, "flagged": 0})
    with Session(file_engine) as session:
        with pytest.raises(DBAPIError) as exc:
            with_db_retry(session, lambda: get_location(session, "loc-x"), attempts=1, delay_ms=1)
    assert exc.value.connection_invalidated
