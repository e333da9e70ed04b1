"""Hold Manager: time-bounded holds on rooms, expired lazily on read."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from typing import Callable, Optional

import structlog

from hotel_booking.db.gateway import SqlGateway
from hotel_booking.domain.records import Hold, is_expired
from hotel_booking.domain.status import HoldStatus
from hotel_booking.errors import NotFound, ValidationError
from hotel_booking.metrics import holds_created, holds_purged, holds_released
from hotel_booking.services.events import HOLD_CREATED, HOLD_RELEASED, EventSink, NullEventSink
from hotel_booking.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


class HoldManager:
    """
    Creates, queries, releases and expires room holds.

    Expiry is never enforced by a background process: a hold whose end
    timestamp has passed is simply treated as expired wherever it is read.
    purge_expired() exists for housekeeping only.
    """

    def __init__(
        self,
        gateway: SqlGateway,
        events: Optional[EventSink] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.gateway = gateway
        self.events = events or NullEventSink()
        self.clock = clock

    def create_hold(
        self,
        room_id: str,
        duration_seconds: int,
        hold_id: Optional[str] = None,
        reservation_id: Optional[int] = None,
    ) -> Hold:
        """
        Place a hold on a room for duration_seconds starting now.

        Args:
            room_id: Room to hold
            duration_seconds: Hold lifetime, must be positive
            hold_id: Caller-supplied token (a random one is generated if omitted)
            reservation_id: Reservation already linked to the hold, if any

        Returns:
            Hold: The persisted hold with status "active"

        Raises:
            ValidationError: If room_id is empty, the duration is not positive
                or the hold id is already taken
        """
        room_id = (room_id or "").strip()
        if not room_id:
            raise ValidationError("room_id is required")
        if duration_seconds is None or duration_seconds <= 0:
            raise ValidationError("duration_seconds must be greater than zero")

        now = self.clock()
        hold = Hold(
            hold_id=hold_id or uuid.uuid4().hex,
            room_id=room_id,
            reservation_id=reservation_id,
            duration_seconds=duration_seconds,
            starts_at=now,
            ends_at=now + timedelta(seconds=duration_seconds),
            status=HoldStatus.ACTIVE.value,
        )
        self.gateway.create_hold(hold)

        holds_created.inc()
        logger.info(
            "hold_created",
            hold_id=hold.hold_id,
            room_id=room_id,
            ends_at=hold.ends_at.isoformat(),
        )
        self.events.publish(
            HOLD_CREATED,
            {"hold_id": hold.hold_id, "room_id": room_id, "ends_at": hold.ends_at.isoformat()},
        )
        return hold

    def get_hold(self, hold_id: str) -> Hold:
        hold = self.gateway.get_hold(hold_id)
        if hold is None:
            raise NotFound(f"Hold {hold_id} not found")
        return hold

    def list_holds(self) -> list[Hold]:
        return self.gateway.list_holds()

    def list_holds_for_room(self, room_id: str) -> list[Hold]:
        return self.gateway.list_holds_for_room(room_id)

    def update_hold_status(self, hold_id: str, status: str) -> Hold:
        """
        Change a hold's status ("active" or "confirmed").

        Raises:
            ValidationError: If the status is not a known hold status
            NotFound: If the hold does not exist
        """
        if status not in {s.value for s in HoldStatus}:
            raise ValidationError(f"Unknown hold status {status!r}")
        updated = self.gateway.update_hold(hold_id, {"status": status})
        if updated is None:
            raise NotFound(f"Hold {hold_id} not found")
        return updated

    def mark_confirmed(self, hold_id: str, reservation_id: int) -> Optional[Hold]:
        return self.gateway.update_hold(
            hold_id, {"status": HoldStatus.CONFIRMED.value, "reservation_id": reservation_id}
        )

    def release_hold(self, hold_id: str) -> bool:
        """
        Remove a hold, freeing the room. Releasing an absent hold returns False.
        """
        deleted = self.gateway.delete_hold(hold_id)
        if deleted:
            holds_released.inc()
            logger.info("hold_released", hold_id=hold_id)
            self.events.publish(HOLD_RELEASED, {"hold_id": hold_id})
        return deleted

    def is_expired(self, hold: Hold, now: Optional[datetime] = None) -> bool:
        return is_expired(hold, now or self.clock())

    def purge_expired(self) -> int:
        """Delete every active hold that has already expired; returns how many."""
        count = self.gateway.delete_expired_holds(self.clock())
        holds_purged.inc(count)
        return count
