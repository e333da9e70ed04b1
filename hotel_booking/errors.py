"""
Exception taxonomy for the booking core.

Lifecycle operations raise these; the lifecycle facade and the HTTP routes
decide which ones become structured failure results and which propagate.
"""

from __future__ import annotations

from typing import Any


class BookingError(Exception):
    """Base class for every error raised by the booking core."""


class ValidationError(BookingError):
    """Malformed input: bad date ordering, missing required id, non-positive duration."""


class NotFound(BookingError):
    """Operation on an unknown reservation, hold, room assignment or discount."""


class HoldInvalid(BookingError):
    """Hold missing, expired or already confirmed at confirmation time."""


class UpstreamError(BookingError):
    """
    Booking authority unreachable, timed out or answered with a non-success status.

    Attributes:
        status_code: Status to mirror back to the caller (503 for transport failures)
        content: Raw upstream body, or a description of the transport failure
    """

    def __init__(self, status_code: int, content: Any, message: str | None = None) -> None:
        super().__init__(message or f"Booking authority returned {status_code}")
        self.status_code = status_code
        self.content = content


class UpstreamUnparseable(BookingError):
    """Booking authority answered successfully but no reservation id could be read."""

    def __init__(self, status_code: int, content: Any) -> None:
        super().__init__("Could not determine reservation id from booking authority response")
        self.status_code = status_code
        self.content = content


class StorageFault(BookingError):
    """Persistence gateway failure not otherwise classified."""
