"""
Persistence gateway used by the lifecycle services.

Wraps the reader/writer functions behind one object bound to an Engine, opens
a connection or transaction per call, and turns driver errors into
StorageFault so that services only ever see the booking error taxonomy.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Iterator, Optional

import structlog
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from hotel_booking.db.readers import holds as hold_readers
from hotel_booking.db.readers import reservations as reservation_readers
from hotel_booking.db.writers import holds as hold_writers
from hotel_booking.db.writers import payments as payment_writers
from hotel_booking.db.writers import reservations as reservation_writers
from hotel_booking.domain.records import (
    CancellationOutcome,
    DiscountApplication,
    Hold,
    PaymentDetails,
    PaymentOutcome,
    Reservation,
    ReservationDraft,
    RoomAssignment,
)
from hotel_booking.errors import StorageFault, ValidationError
from hotel_booking.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


class SqlGateway:
    """
    SQLAlchemy-backed persistence gateway.

    Args:
        engine: Engine to run every statement on
        clock: Source of "now" for registration/modification timestamps
    """

    def __init__(self, engine: Engine, clock: Callable[[], datetime] = utc_now) -> None:
        self.engine = engine
        self.clock = clock

    @contextmanager
    def _transaction(self) -> Iterator[Connection]:
        try:
            with self.engine.begin() as conn:
                yield conn
        except SQLAlchemyError as e:
            logger.exception("storage_fault", error=str(e))
            raise StorageFault(str(e)) from e

    @contextmanager
    def _connection(self) -> Iterator[Connection]:
        try:
            with self.engine.connect() as conn:
                yield conn
        except SQLAlchemyError as e:
            logger.exception("storage_fault", error=str(e))
            raise StorageFault(str(e)) from e

    # ------------------------------------------------------------------
    # Reservations
    # ------------------------------------------------------------------

    def create_reservation(self, draft: ReservationDraft) -> Reservation:
        with self._transaction() as conn:
            reservation_id = reservation_writers.insert_reservation(conn, draft, self.clock())
            created = reservation_readers.get_reservation(conn, reservation_id)
        if created is None:
            raise StorageFault(f"Reservation {reservation_id} was not readable after insert")
        return created

    def get_reservation(self, reservation_id: int) -> Optional[Reservation]:
        with self._connection() as conn:
            return reservation_readers.get_reservation(conn, reservation_id)

    def list_reservations(self) -> list[Reservation]:
        with self._connection() as conn:
            return reservation_readers.list_reservations(conn)

    def update_reservation(
        self, reservation_id: int, fields: dict[str, Any]
    ) -> Optional[Reservation]:
        with self._transaction() as conn:
            if not reservation_writers.update_reservation(
                conn, reservation_id, fields, self.clock()
            ):
                return None
            return reservation_readers.get_reservation(conn, reservation_id)

    def soft_cancel_reservation(self, reservation_id: int) -> None:
        with self._transaction() as conn:
            reservation_writers.soft_cancel_reservation(conn, reservation_id, self.clock())

    def cancel_reservation_with_refund(self, reservation_id: int) -> CancellationOutcome:
        with self._transaction() as conn:
            return reservation_writers.cancel_reservation_with_refund(
                conn, reservation_id, self.clock()
            )

    # ------------------------------------------------------------------
    # Room assignments and discounts
    # ------------------------------------------------------------------

    def list_room_assignments(self) -> list[RoomAssignment]:
        with self._connection() as conn:
            return reservation_readers.list_room_assignments(conn)

    def list_room_assignments_for_reservation(self, reservation_id: int) -> list[RoomAssignment]:
        with self._connection() as conn:
            return reservation_readers.list_room_assignments_for_reservation(conn, reservation_id)

    def get_room_assignment(self, assignment_id: int) -> Optional[RoomAssignment]:
        with self._connection() as conn:
            return reservation_readers.get_room_assignment(conn, assignment_id)

    def create_room_assignment(self, data: dict[str, Any]) -> RoomAssignment:
        with self._transaction() as conn:
            existing = reservation_readers.list_room_assignments_for_reservation(
                conn, data["reservation_id"]
            )
            if any(a.room_id == data["room_id"] for a in existing):
                raise ValidationError(
                    f"Room {data['room_id']} is already assigned to "
                    f"reservation {data['reservation_id']}"
                )
            assignment_id = reservation_writers.insert_room_assignment(conn, data, self.clock())
            created = reservation_readers.get_room_assignment(conn, assignment_id)
        if created is None:
            raise StorageFault(f"Room assignment {assignment_id} was not readable after insert")
        return created

    def delete_room_assignment(self, assignment_id: int) -> bool:
        with self._transaction() as conn:
            return reservation_writers.delete_room_assignment(conn, assignment_id)

    def create_discount_application(
        self, assignment_id: int, discount_id: int, amount: Optional[Decimal]
    ) -> DiscountApplication:
        with self._transaction() as conn:
            applied = reservation_readers.list_discount_applications(conn, assignment_id)
            if any(d.discount_id == discount_id for d in applied):
                raise ValidationError(
                    f"Discount {discount_id} is already applied to assignment {assignment_id}"
                )
            reservation_writers.insert_discount_application(
                conn, assignment_id, discount_id, amount, self.clock()
            )
            applied = reservation_readers.list_discount_applications(conn, assignment_id)
        return next(d for d in applied if d.discount_id == discount_id)

    def list_discount_applications(self, assignment_id: int) -> list[DiscountApplication]:
        with self._connection() as conn:
            return reservation_readers.list_discount_applications(conn, assignment_id)

    def delete_discount_application(self, assignment_id: int, discount_id: int) -> bool:
        with self._transaction() as conn:
            return reservation_writers.delete_discount_application(
                conn, assignment_id, discount_id
            )

    # ------------------------------------------------------------------
    # Holds
    # ------------------------------------------------------------------

    def create_hold(self, hold: Hold) -> Hold:
        with self._transaction() as conn:
            if hold_readers.get_hold(conn, hold.hold_id) is not None:
                raise ValidationError(f"Hold {hold.hold_id} already exists")
            hold_writers.insert_hold(conn, hold)
        return hold

    def get_hold(self, hold_id: str) -> Optional[Hold]:
        with self._connection() as conn:
            return hold_readers.get_hold(conn, hold_id)

    def list_holds(self) -> list[Hold]:
        with self._connection() as conn:
            return hold_readers.list_holds(conn)

    def list_holds_for_room(self, room_id: str) -> list[Hold]:
        with self._connection() as conn:
            return hold_readers.list_holds_for_room(conn, room_id)

    def update_hold(self, hold_id: str, fields: dict[str, Any]) -> Optional[Hold]:
        with self._transaction() as conn:
            if not hold_writers.update_hold(conn, hold_id, fields):
                return None
            return hold_readers.get_hold(conn, hold_id)

    def delete_hold(self, hold_id: str) -> bool:
        with self._transaction() as conn:
            return hold_writers.delete_hold(conn, hold_id)

    def delete_expired_holds(self, now: datetime) -> int:
        with self._transaction() as conn:
            return hold_writers.delete_expired_holds(conn, now)

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    def insert_payment(self, reservation_id: int, details: PaymentDetails) -> PaymentOutcome:
        # The unique hold_id column rejects a concurrent duplicate with a StorageFault
        with self._transaction() as conn:
            return payment_writers.insert_payment(conn, reservation_id, details, self.clock())
