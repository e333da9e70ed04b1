"""
Lifecycle event publication.

Components that produce lifecycle events receive an EventSink at construction
time. The default sink drops events; LoggingEventSink writes them to the
structured log, which is enough for downstream log-based consumers until a
message broker is wired in.
"""

from __future__ import annotations

from typing import Any, Protocol

import structlog

logger = structlog.get_logger(__name__)

HOLD_CREATED = "hold.created"
HOLD_RELEASED = "hold.released"
RESERVATION_CREATED = "reservation.created"
RESERVATION_CONFIRMED = "reservation.confirmed"
RESERVATION_CANCELLED = "reservation.cancelled"


class EventSink(Protocol):
    def publish(self, event_type: str, payload: dict[str, Any]) -> None: ...


class NullEventSink:
    """Sink used when no publisher is configured."""

    def publish(self, event_type: str, payload: dict[str, Any]) -> None:
        return None


class LoggingEventSink:
    """Emit each lifecycle event as a structured log line."""

    def publish(self, event_type: str, payload: dict[str, Any]) -> None:
        logger.info("lifecycle_event", event_type=event_type, **payload)


class RecordingEventSink:
    """Keeps published events in memory; handy for tests and local debugging."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def publish(self, event_type: str, payload: dict[str, Any]) -> None:
        self.events.append((event_type, payload))

    def types(self) -> list[str]:
        return [event_type for event_type, _ in self.events]
