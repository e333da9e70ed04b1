from datetime import datetime
from typing import Any, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from hotel_booking.domain.records import Hold
from hotel_booking.models.holds import Hold as HoldRow
from hotel_booking.utils.datetime import ensure_utc


def to_hold(row: Mapping[str, Any]) -> Hold:
    starts_at: datetime = ensure_utc(row["starts_at"])  # type: ignore[assignment]
    ends_at: datetime = ensure_utc(row["ends_at"])  # type: ignore[assignment]
    return Hold(
        hold_id=row["hold_id"],
        room_id=row["room_id"],
        reservation_id=row["reservation_id"],
        duration_seconds=row["duration_seconds"],
        starts_at=starts_at,
        ends_at=ends_at,
        status=row["status"],
    )


def get_hold(conn: Connection, hold_id: str) -> Optional[Hold]:
    """
    Fetch a hold by its opaque id.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        hold_id (str): Hold token.

    Returns:
        Optional[Hold]: The hold, expired or not, or None if it does not exist.
    """
    row = conn.execute(select(HoldRow).where(HoldRow.hold_id == hold_id)).mappings().fetchone()
    return to_hold(row) if row else None


def list_holds(conn: Connection) -> list[Hold]:
    rows = conn.execute(select(HoldRow)).mappings().all()
    return [to_hold(row) for row in rows]


def list_holds_for_room(conn: Connection, room_id: str) -> list[Hold]:
    """Fetch every hold on a room, in no particular order."""
    rows = conn.execute(select(HoldRow).where(HoldRow.room_id == room_id)).mappings().all()
    return [to_hold(row) for row in rows]
