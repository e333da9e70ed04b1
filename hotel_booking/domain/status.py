"""
Classification of free-text reservation statuses.

overall_status is written by more than one system (this service, the booking
authority, manual back-office edits) and has no fixed vocabulary. Everything
that needs to know whether a reservation still occupies its room goes through
ReservationStatus.from_text so the lenient matching lives in one place.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ReservationStatus(str, Enum):
    ACTIVE = "ACTIVA"
    CANCELLED = "CANCELADA"
    EXPIRED = "EXPIRADO"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_text(cls, value: Optional[str]) -> "ReservationStatus":
        """
        Normalise a stored status: trim, upper-case, then substring match.

        Example:
            >>> ReservationStatus.from_text("  Cancelada ")
            <ReservationStatus.CANCELLED: 'CANCELADA'>
            >>> ReservationStatus.from_text("PRE-EXPIRADO")
            <ReservationStatus.EXPIRED: 'EXPIRADO'>
        """
        text = (value or "").strip().upper()
        if cls.CANCELLED.value in text:
            return cls.CANCELLED
        if cls.EXPIRED.value in text:
            return cls.EXPIRED
        if cls.ACTIVE.value in text:
            return cls.ACTIVE
        return cls.UNKNOWN

    @property
    def is_terminal(self) -> bool:
        return self in (ReservationStatus.CANCELLED, ReservationStatus.EXPIRED)

    @property
    def occupies_room(self) -> bool:
        # Unknown statuses still block the calendar
        return not self.is_terminal


class HoldStatus(str, Enum):
    ACTIVE = "active"
    CONFIRMED = "confirmed"
