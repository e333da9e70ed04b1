from datetime import datetime
from decimal import Decimal

import structlog
from sqlalchemy import insert, select
from sqlalchemy.engine import Connection

from hotel_booking.db.readers.reservations import get_payment_for_hold
from hotel_booking.domain.records import PaymentDetails, PaymentOutcome
from hotel_booking.models.payments import Payment
from hotel_booking.models.reservations import Reservation

logger = structlog.get_logger(__name__)


def insert_payment(
    conn: Connection, reservation_id: int, details: PaymentDetails, now: datetime
) -> PaymentOutcome:
    """
    Record the payment for a confirmed reservation.

    The amount charged is the reservation's total cost. When details.hold_id is
    set it acts as an idempotency key: a second insert for the same hold returns
    the payment already recorded instead of charging again.

    Args:
        conn (Connection): SQLAlchemy DB connection (inside a transaction).
        reservation_id (int): Reservation being paid.
        details (PaymentDetails): Payer, method and accounts.
        now (datetime): Creation timestamp.

    Returns:
        PaymentOutcome: ok=False with a reason when the payment cannot be recorded.
    """
    if details.hold_id:
        existing = get_payment_for_hold(conn, details.hold_id)
        if existing:
            logger.info(
                "payment_already_recorded",
                hold_id=details.hold_id,
                payment_id=existing["id"],
            )
            return PaymentOutcome(
                ok=True,
                payment_id=existing["id"],
                total_amount=Decimal(str(existing["total_amount"])),
                message="Payment already recorded for this hold",
                duplicate=True,
            )

    row = (
        conn.execute(
            select(Reservation.total_cost).where(Reservation.id == reservation_id)
        )
        .mappings()
        .fetchone()
    )
    if row is None:
        return PaymentOutcome(ok=False, message=f"Reservation {reservation_id} not found")

    amount = Decimal(str(row["total_cost"] or 0))
    result = conn.execute(
        insert(Payment).values(
            reservation_id=reservation_id,
            hold_id=details.hold_id,
            user_id=details.user_id,
            external_user_id=details.external_user_id,
            payment_method_id=details.payment_method_id,
            source_account=details.source_account,
            destination_account=details.destination_account,
            total_amount=amount,
            created_at=now,
        )
    )
    payment_id = int(result.inserted_primary_key[0])

    return PaymentOutcome(
        ok=True, payment_id=payment_id, total_amount=amount, message="Payment recorded"
    )
