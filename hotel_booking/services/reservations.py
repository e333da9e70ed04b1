"""
Reservation State Machine.

    Draft --create--> Active --cancel--> Cancelled
                        |
                        +--(status set to EXPIRADO)--> Expired

Cancelled and Expired are terminal. Cancellation is logical only: the row
stays, is_active goes false and overall_status becomes "CANCELADA".
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

import structlog

from hotel_booking.db.gateway import SqlGateway
from hotel_booking.domain.records import (
    DiscountApplication,
    Reservation,
    ReservationDraft,
    RoomAssignment,
)
from hotel_booking.errors import NotFound, ValidationError
from hotel_booking.services.events import RESERVATION_CREATED, EventSink, NullEventSink

logger = structlog.get_logger(__name__)


class ReservationStateMachine:
    def __init__(self, gateway: SqlGateway, events: Optional[EventSink] = None) -> None:
        self.gateway = gateway
        self.events = events or NullEventSink()

    def create(self, draft: ReservationDraft) -> Reservation:
        """
        Persist a draft reservation (Draft -> Active).

        Raises:
            ValidationError: If a date is missing or start_date is after end_date
        """
        if draft.start_date is None or draft.end_date is None:
            raise ValidationError("start_date and end_date are required")
        if draft.start_date > draft.end_date:
            raise ValidationError(
                f"start_date {draft.start_date} is after end_date {draft.end_date}"
            )

        reservation = self.gateway.create_reservation(draft)
        logger.info(
            "reservation_created",
            reservation_id=reservation.id,
            start_date=str(reservation.start_date),
            end_date=str(reservation.end_date),
        )
        self.events.publish(RESERVATION_CREATED, {"reservation_id": reservation.id})
        return reservation

    def get(self, reservation_id: int) -> Reservation:
        reservation = self.gateway.get_reservation(reservation_id)
        if reservation is None:
            raise NotFound(f"Reservation {reservation_id} not found")
        return reservation

    def list_all(self) -> list[Reservation]:
        return self.gateway.list_reservations()

    def update(
        self,
        reservation_id: int,
        overall_status: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Reservation:
        """
        Change the status fields of an active reservation (Active -> Active).

        Only overall_status and the active flag can be changed this way; an
        administrative update may also move the reservation to a terminal status.

        Raises:
            NotFound: If the reservation does not exist
            ValidationError: If nothing is being changed or the reservation is terminal
        """
        fields: dict[str, object] = {}
        if overall_status is not None:
            fields["overall_status"] = overall_status
        if is_active is not None:
            fields["is_active"] = is_active
        if not fields:
            raise ValidationError("No fields to update")

        current = self.get(reservation_id)
        if current.status.is_terminal:
            raise ValidationError(
                f"Reservation {reservation_id} is {current.status.name.lower()} and cannot change"
            )

        updated = self.gateway.update_reservation(reservation_id, fields)
        if updated is None:
            raise NotFound(f"Reservation {reservation_id} not found")

        logger.info("reservation_updated", reservation_id=reservation_id, fields=list(fields))
        return updated

    def cancel(self, reservation_id: int) -> Reservation:
        """
        Logically cancel a reservation (Active -> Cancelled).

        Cancelling a reservation that is already cancelled or expired succeeds
        without touching it.

        Raises:
            NotFound: If the reservation does not exist
        """
        current = self.get(reservation_id)
        if current.status.is_terminal:
            logger.info(
                "reservation_cancel_noop",
                reservation_id=reservation_id,
                status=current.overall_status,
            )
            return current

        self.gateway.soft_cancel_reservation(reservation_id)
        logger.info("reservation_soft_cancelled", reservation_id=reservation_id)
        return self.get(reservation_id)

    # Room assignments ------------------------------------------------------

    def add_room(
        self,
        reservation_id: int,
        room_id: str,
        capacity: Optional[int] = None,
        computed_cost: Optional[Decimal] = None,
        discount: Optional[Decimal] = None,
        tax: Optional[Decimal] = None,
    ) -> RoomAssignment:
        """
        Assign a room to an existing reservation.

        Raises:
            ValidationError: If room_id is empty or the room is already assigned
            NotFound: If the reservation does not exist
        """
        if not room_id:
            raise ValidationError("room_id is required")
        self.get(reservation_id)
        return self.gateway.create_room_assignment(
            {
                "room_id": room_id,
                "reservation_id": reservation_id,
                "capacity": capacity,
                "computed_cost": computed_cost,
                "discount": discount,
                "tax": tax,
            }
        )

    def rooms(self, reservation_id: int) -> list[RoomAssignment]:
        self.get(reservation_id)
        return self.gateway.list_room_assignments_for_reservation(reservation_id)

    def remove_room(self, assignment_id: int) -> bool:
        return self.gateway.delete_room_assignment(assignment_id)

    # Discounts -------------------------------------------------------------

    def add_discount(
        self, assignment_id: int, discount_id: int, amount: Optional[Decimal] = None
    ) -> DiscountApplication:
        if self.gateway.get_room_assignment(assignment_id) is None:
            raise NotFound(f"Room assignment {assignment_id} not found")
        return self.gateway.create_discount_application(assignment_id, discount_id, amount)

    def discounts(self, assignment_id: int) -> list[DiscountApplication]:
        if self.gateway.get_room_assignment(assignment_id) is None:
            raise NotFound(f"Room assignment {assignment_id} not found")
        return self.gateway.list_discount_applications(assignment_id)

    def remove_discount(self, assignment_id: int, discount_id: int) -> bool:
        return self.gateway.delete_discount_application(assignment_id, discount_id)
