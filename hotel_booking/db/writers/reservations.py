from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

import structlog
from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Connection

from hotel_booking.db.readers.reservations import total_paid
from hotel_booking.domain.records import CancellationOutcome, ReservationDraft
from hotel_booking.domain.status import ReservationStatus
from hotel_booking.models.reservations import DiscountApplication, Reservation, RoomAssignment

logger = structlog.get_logger(__name__)


def insert_reservation(conn: Connection, draft: ReservationDraft, now: datetime) -> int:
    """
    Insert a new reservation and return its storage-assigned id.

    Args:
        conn (Connection): SQLAlchemy DB connection (inside a transaction).
        draft (ReservationDraft): Validated reservation fields.
        now (datetime): Registration timestamp.

    Returns:
        int: New reservation id.
    """
    result = conn.execute(
        insert(Reservation).values(
            user_id=draft.user_id,
            external_user_id=draft.external_user_id,
            total_cost=draft.total_cost,
            registered_at=now,
            start_date=draft.start_date,
            end_date=draft.end_date,
            overall_status=draft.overall_status,
            is_active=draft.is_active,
            updated_at=now,
        )
    )
    return int(result.inserted_primary_key[0])


def update_reservation(
    conn: Connection, reservation_id: int, data: dict[str, Any], now: datetime
) -> bool:
    """
    Update status fields of an existing reservation.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        reservation_id (int): Reservation id.
        data (dict): Fields to update (overall_status and/or is_active).
        now (datetime): Modification timestamp.

    Returns:
        bool: True if a row was updated.
    """
    stmt = (
        update(Reservation)
        .where(Reservation.id == reservation_id)
        .values(**data, updated_at=now)
    )
    return conn.execute(stmt).rowcount > 0


def deactivate_room_assignments(conn: Connection, reservation_id: int, now: datetime) -> None:
    conn.execute(
        update(RoomAssignment)
        .where(RoomAssignment.reservation_id == reservation_id)
        .values(is_active=False, updated_at=now)
    )


def soft_cancel_reservation(conn: Connection, reservation_id: int, now: datetime) -> None:
    """
    Logically cancel a reservation: is_active=false, overall_status CANCELADA.

    Room assignments are deactivated with it; nothing is physically deleted.
    """
    update_reservation(
        conn,
        reservation_id,
        {"overall_status": ReservationStatus.CANCELLED.value, "is_active": False},
        now,
    )
    deactivate_room_assignments(conn, reservation_id, now)


def cancel_reservation_with_refund(
    conn: Connection, reservation_id: int, now: datetime
) -> CancellationOutcome:
    """
    Cancel an active reservation and compute the refundable amount in one transaction.

    Policy: only reservations whose status normalises to ACTIVA can be cancelled
    this way. The refund is everything paid for the reservation so far.

    Args:
        conn (Connection): SQLAlchemy DB connection (inside a transaction).
        reservation_id (int): Reservation to cancel.
        now (datetime): Modification timestamp.

    Returns:
        CancellationOutcome: ok=False with a reason when nothing was processed.
    """
    row = (
        conn.execute(
            select(Reservation.overall_status)
            .where(Reservation.id == reservation_id)
            .with_for_update()
        )
        .mappings()
        .fetchone()
    )

    if row is None:
        return CancellationOutcome(ok=False, message=f"Reservation {reservation_id} not found")

    status = ReservationStatus.from_text(row["overall_status"])
    if status is not ReservationStatus.ACTIVE:
        return CancellationOutcome(
            ok=False,
            message=(
                f"Reservation {reservation_id} cannot be cancelled "
                f"(status={row['overall_status']!r})"
            ),
        )

    refund: Decimal = total_paid(conn, reservation_id)
    soft_cancel_reservation(conn, reservation_id, now)

    logger.info("reservation_cancelled_with_refund", reservation_id=reservation_id, refund=str(refund))
    return CancellationOutcome(
        ok=True, refund_amount=refund, message="Reservation cancelled successfully"
    )


def insert_room_assignment(conn: Connection, data: dict[str, Any], now: datetime) -> int:
    """
    Link a room to a reservation.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        data (dict): room_id, reservation_id and optional capacity/cost/discount/tax.
        now (datetime): Modification timestamp.

    Returns:
        int: New assignment id.
    """
    result = conn.execute(
        insert(RoomAssignment).values(**data, is_active=data.get("is_active", True), updated_at=now)
    )
    return int(result.inserted_primary_key[0])


def delete_room_assignment(conn: Connection, assignment_id: int) -> bool:
    conn.execute(
        delete(DiscountApplication).where(DiscountApplication.assignment_id == assignment_id)
    )
    result = conn.execute(delete(RoomAssignment).where(RoomAssignment.id == assignment_id))
    return result.rowcount > 0


def insert_discount_application(
    conn: Connection,
    assignment_id: int,
    discount_id: int,
    amount: Optional[Decimal],
    now: datetime,
) -> None:
    conn.execute(
        insert(DiscountApplication).values(
            assignment_id=assignment_id,
            discount_id=discount_id,
            amount=amount,
            is_active=True,
            updated_at=now,
        )
    )


def delete_discount_application(conn: Connection, assignment_id: int, discount_id: int) -> bool:
    result = conn.execute(
        delete(DiscountApplication).where(
            DiscountApplication.assignment_id == assignment_id,
            DiscountApplication.discount_id == discount_id,
        )
    )
    return result.rowcount > 0
