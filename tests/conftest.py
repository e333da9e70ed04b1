"""
Shared fixtures.

DATABASE_URL must be set before hotel_booking.config is imported, so it is
defaulted here to a throwaway SQLite file. Tests that touch the database get
their own file-backed SQLite engine with every table created from the ORM
metadata.
"""

from __future__ import annotations

import os
import tempfile
from datetime import datetime, timedelta, timezone
from typing import Generator

os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite:///{os.path.join(tempfile.gettempdir(), 'hotel_booking_test.db')}",
)

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402

from hotel_booking.db.gateway import SqlGateway  # noqa: E402
from hotel_booking.models import holds, payments, reservations  # noqa: E402,F401
from hotel_booking.models.base import Base  # noqa: E402
from hotel_booking.services.events import RecordingEventSink  # noqa: E402
from hotel_booking.services.lifecycle import BookingLifecycle  # noqa: E402


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 5, 20, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def db_engine(tmp_path) -> Generator[Engine, None, None]:
    """File-backed SQLite engine with all tables created."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'booking.db'}",
        future=True,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def gateway(db_engine: Engine, clock: FakeClock) -> SqlGateway:
    return SqlGateway(db_engine, clock=clock)


@pytest.fixture
def events() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def lifecycle(gateway: SqlGateway, events: RecordingEventSink, clock: FakeClock) -> BookingLifecycle:
    return BookingLifecycle(gateway, events=events, clock=clock)
