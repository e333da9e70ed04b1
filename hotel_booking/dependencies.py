"""
FastAPI dependency injection providers.

Routes receive the database engine, the lifecycle event sink and the lifecycle
facade through these providers. All of them can be replaced in tests through
app.dependency_overrides.

Testing Example:
    >>> from fastapi.testclient import TestClient
    >>> from hotel_booking.dependencies import get_db_engine
    >>>
    >>> app.dependency_overrides[get_db_engine] = lambda: sqlite_engine
    >>> client = TestClient(app)
    >>> response = client.post("/holds", json={"room_id": "R1"})
"""

from __future__ import annotations

from typing import Generator

from fastapi import Depends
from sqlalchemy.engine import Engine

from hotel_booking.db.engine import engine
from hotel_booking.services.events import EventSink, LoggingEventSink
from hotel_booking.services.lifecycle import BookingLifecycle
from hotel_booking.services.locks import KeyedLock

# Lock registries live for the whole process so that concurrent requests
# confirming the same hold (or cancelling the same reservation) serialise.
_hold_locks = KeyedLock()
_reservation_locks = KeyedLock()
_event_sink = LoggingEventSink()


def get_db_engine() -> Generator[Engine, None, None]:
    """
    Provide database engine for dependency injection.

    Yields:
        Engine: SQLAlchemy database engine
    """
    yield engine


def get_event_sink() -> EventSink:
    return _event_sink


def get_lifecycle(
    db_engine: Engine = Depends(get_db_engine),
    events: EventSink = Depends(get_event_sink),
) -> BookingLifecycle:
    """
    Provide the lifecycle facade bound to the request's engine.

    Args:
        db_engine: Engine from get_db_engine
        events: Sink from get_event_sink

    Returns:
        BookingLifecycle: Facade sharing the process-wide lock registries
    """
    return BookingLifecycle.from_engine(
        db_engine,
        events=events,
        hold_locks=_hold_locks,
        reservation_locks=_reservation_locks,
    )
