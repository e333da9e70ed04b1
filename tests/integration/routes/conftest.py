"""
Fixtures for route tests: the real app bound to a per-test SQLite engine.
"""

from __future__ import annotations

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from hotel_booking.dependencies import get_db_engine, get_event_sink
from hotel_booking.main import app


@pytest.fixture
def client(db_engine, events) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_db_engine] = lambda: db_engine
    app.dependency_overrides[get_event_sink] = lambda: events
    yield TestClient(app)
    app.dependency_overrides.clear()
