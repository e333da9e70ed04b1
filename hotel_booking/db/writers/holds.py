from datetime import datetime
from typing import Any

import structlog
from sqlalchemy import delete, insert, update
from sqlalchemy.engine import Connection

from hotel_booking.domain.records import Hold as HoldRecord
from hotel_booking.domain.status import HoldStatus
from hotel_booking.models.holds import Hold

logger = structlog.get_logger(__name__)


def insert_hold(conn: Connection, hold: HoldRecord) -> None:
    """
    Persist a new hold.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        hold (HoldRecord): Hold with its computed start/end timestamps.
    """
    conn.execute(
        insert(Hold).values(
            hold_id=hold.hold_id,
            room_id=hold.room_id,
            reservation_id=hold.reservation_id,
            duration_seconds=hold.duration_seconds,
            starts_at=hold.starts_at,
            ends_at=hold.ends_at,
            status=hold.status,
        )
    )


def update_hold(conn: Connection, hold_id: str, data: dict[str, Any]) -> bool:
    """
    Update mutable hold fields (status, reservation_id).

    Returns:
        bool: True if the hold existed.
    """
    result = conn.execute(update(Hold).where(Hold.hold_id == hold_id).values(**data))
    return result.rowcount > 0


def delete_hold(conn: Connection, hold_id: str) -> bool:
    result = conn.execute(delete(Hold).where(Hold.hold_id == hold_id))
    return result.rowcount > 0


def delete_expired_holds(conn: Connection, now: datetime) -> int:
    """
    Remove active holds whose end timestamp has passed.

    Confirmed holds are kept: they record which hold produced which reservation.

    Returns:
        int: Number of holds removed.
    """
    result = conn.execute(
        delete(Hold).where(Hold.status == HoldStatus.ACTIVE.value, Hold.ends_at < now)
    )
    logger.info("expired_holds_deleted", count=result.rowcount)
    return int(result.rowcount)
