from decimal import Decimal
from typing import Any, Mapping, Optional

from sqlalchemy import func, select
from sqlalchemy.engine import Connection

from hotel_booking.domain.records import DiscountApplication, Reservation, RoomAssignment
from hotel_booking.models.payments import Payment
from hotel_booking.models.reservations import DiscountApplication as DiscountApplicationRow
from hotel_booking.models.reservations import Reservation as ReservationRow
from hotel_booking.models.reservations import RoomAssignment as RoomAssignmentRow
from hotel_booking.utils.datetime import ensure_utc


def to_reservation(row: Mapping[str, Any]) -> Reservation:
    return Reservation(
        id=row["id"],
        user_id=row["user_id"],
        external_user_id=row["external_user_id"],
        total_cost=row["total_cost"],
        registered_at=ensure_utc(row["registered_at"]),
        start_date=row["start_date"],
        end_date=row["end_date"],
        overall_status=row["overall_status"],
        is_active=bool(row["is_active"]),
        updated_at=ensure_utc(row["updated_at"]),
    )


def to_room_assignment(row: Mapping[str, Any]) -> RoomAssignment:
    return RoomAssignment(
        id=row["id"],
        room_id=row["room_id"],
        reservation_id=row["reservation_id"],
        capacity=row["capacity"],
        computed_cost=row["computed_cost"],
        discount=row["discount"],
        tax=row["tax"],
        is_active=bool(row["is_active"]),
        updated_at=ensure_utc(row["updated_at"]),
    )


def get_reservation(conn: Connection, reservation_id: int) -> Optional[Reservation]:
    """
    Fetch a single reservation by id.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        reservation_id (int): Reservation primary key.

    Returns:
        Optional[Reservation]: The reservation, or None if it does not exist.
    """
    row = (
        conn.execute(select(ReservationRow).where(ReservationRow.id == reservation_id))
        .mappings()
        .fetchone()
    )
    return to_reservation(row) if row else None


def list_reservations(conn: Connection) -> list[Reservation]:
    """Fetch every reservation, whatever its status."""
    rows = conn.execute(select(ReservationRow).order_by(ReservationRow.id)).mappings().all()
    return [to_reservation(row) for row in rows]


def list_room_assignments(conn: Connection) -> list[RoomAssignment]:
    """Fetch every room assignment."""
    rows = conn.execute(select(RoomAssignmentRow).order_by(RoomAssignmentRow.id)).mappings().all()
    return [to_room_assignment(row) for row in rows]


def list_room_assignments_for_reservation(
    conn: Connection, reservation_id: int
) -> list[RoomAssignment]:
    """
    Fetch the room assignments of one reservation.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        reservation_id (int): Owning reservation id.

    Returns:
        list[RoomAssignment]: Assignments ordered by id (empty if none).
    """
    rows = (
        conn.execute(
            select(RoomAssignmentRow)
            .where(RoomAssignmentRow.reservation_id == reservation_id)
            .order_by(RoomAssignmentRow.id)
        )
        .mappings()
        .all()
    )
    return [to_room_assignment(row) for row in rows]


def get_room_assignment(conn: Connection, assignment_id: int) -> Optional[RoomAssignment]:
    row = (
        conn.execute(select(RoomAssignmentRow).where(RoomAssignmentRow.id == assignment_id))
        .mappings()
        .fetchone()
    )
    return to_room_assignment(row) if row else None


def list_discount_applications(conn: Connection, assignment_id: int) -> list[DiscountApplication]:
    """Fetch the discounts applied to one room assignment."""
    rows = (
        conn.execute(
            select(DiscountApplicationRow)
            .where(DiscountApplicationRow.assignment_id == assignment_id)
            .order_by(DiscountApplicationRow.discount_id)
        )
        .mappings()
        .all()
    )
    return [
        DiscountApplication(
            assignment_id=row["assignment_id"],
            discount_id=row["discount_id"],
            amount=row["amount"],
            is_active=bool(row["is_active"]),
            updated_at=ensure_utc(row["updated_at"]),
        )
        for row in rows
    ]


def total_paid(conn: Connection, reservation_id: int) -> Decimal:
    """
    Sum of every payment recorded for a reservation.

    Returns:
        Decimal: Amount paid so far (0 when there are no payments).
    """
    value = conn.execute(
        select(func.coalesce(func.sum(Payment.total_amount), 0)).where(
            Payment.reservation_id == reservation_id
        )
    ).scalar_one()
    return Decimal(str(value))


def get_payment_for_hold(conn: Connection, hold_id: str) -> Optional[dict[str, Any]]:
    """
    Fetch the payment previously recorded for a hold confirmation, if any.

    Returns:
        Optional[dict]: Dict with 'id' and 'total_amount' or None if not found
    """
    row = (
        conn.execute(
            select(Payment.id, Payment.total_amount).where(Payment.hold_id == hold_id)
        )
        .mappings()
        .fetchone()
    )
    return dict(row) if row else None
