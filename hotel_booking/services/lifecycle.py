"""
Lifecycle facade.

The single entry point transports use to reach the booking core. Expected
business failures (ValidationError, NotFound) come back as an OperationResult
with success=False; HoldInvalid, UpstreamError, UpstreamUnparseable and
StorageFault propagate so that the transport can map them to a status code.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Optional

import structlog
from sqlalchemy.engine import Engine

from hotel_booking.db.gateway import SqlGateway
from hotel_booking.domain.records import GuestDetails, Hold, OperationResult, ReservationDraft
from hotel_booking.errors import NotFound, ValidationError
from hotel_booking.network.booking_authority import create_booking
from hotel_booking.services.availability import AvailabilityAggregator
from hotel_booking.services.cancellation import CancellationOrchestrator, CancellationResult
from hotel_booking.services.confirmation import BookingCall, ConfirmationOrchestrator
from hotel_booking.services.events import EventSink, NullEventSink
from hotel_booking.services.holds import HoldManager
from hotel_booking.services.locks import KeyedLock
from hotel_booking.services.reservations import ReservationStateMachine
from hotel_booking.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


class BookingLifecycle:
    """
    Wires the hold, reservation, availability, confirmation and cancellation
    components around one persistence gateway and one event sink.

    Args:
        gateway: Persistence gateway shared by every component
        events: Lifecycle event sink (events are dropped when omitted)
        book: Booking authority call used by confirmation
        clock: Source of "now" for hold timestamps and expiry checks
        hold_locks: Registry serialising confirmations per hold id
        reservation_locks: Registry serialising cancellations per reservation id
    """

    def __init__(
        self,
        gateway: SqlGateway,
        events: Optional[EventSink] = None,
        book: BookingCall = create_booking,
        clock: Callable[[], datetime] = utc_now,
        hold_locks: Optional[KeyedLock] = None,
        reservation_locks: Optional[KeyedLock] = None,
    ) -> None:
        self.gateway = gateway
        self.events = events or NullEventSink()
        self.holds = HoldManager(gateway, self.events, clock)
        self.reservations = ReservationStateMachine(gateway, self.events)
        self.availability = AvailabilityAggregator(gateway)
        self.confirmation = ConfirmationOrchestrator(
            gateway, self.holds, book, self.events, locks=hold_locks
        )
        self.cancellation = CancellationOrchestrator(
            gateway, self.events, locks=reservation_locks
        )

    @classmethod
    def from_engine(cls, engine: Engine, **kwargs: Any) -> BookingLifecycle:
        return cls(SqlGateway(engine), **kwargs)

    def _run(self, operation: str, func: Callable[[], Any], message: str = "") -> OperationResult:
        try:
            data = func()
        except NotFound as e:
            logger.info("operation_not_found", operation=operation, reason=str(e))
            return OperationResult(success=False, message=str(e), not_found=True)
        except ValidationError as e:
            logger.info("operation_rejected", operation=operation, reason=str(e))
            return OperationResult(success=False, message=str(e))
        return OperationResult(success=True, message=message, data=data)

    # Holds -----------------------------------------------------------------

    def create_hold(
        self,
        room_id: str,
        duration_seconds: int,
        hold_id: Optional[str] = None,
        reservation_id: Optional[int] = None,
    ) -> OperationResult:
        return self._run(
            "create_hold",
            lambda: self.holds.create_hold(room_id, duration_seconds, hold_id, reservation_id),
            "Hold created",
        )

    def get_hold(self, hold_id: str) -> OperationResult:
        return self._run("get_hold", lambda: self.holds.get_hold(hold_id))

    def list_holds(self) -> OperationResult:
        return self._run("list_holds", self.holds.list_holds)

    def list_holds_for_room(self, room_id: str) -> OperationResult:
        return self._run("list_holds_for_room", lambda: self.holds.list_holds_for_room(room_id))

    def update_hold_status(self, hold_id: str, status: str) -> OperationResult:
        return self._run(
            "update_hold_status",
            lambda: self.holds.update_hold_status(hold_id, status),
            "Hold updated",
        )

    def release_hold(self, hold_id: str) -> OperationResult:
        if self.holds.release_hold(hold_id):
            return OperationResult(success=True, message=f"Hold {hold_id} released")
        return OperationResult(success=False, message=f"Hold {hold_id} not found", not_found=True)

    def hold_is_expired(self, hold: Hold) -> bool:
        return self.holds.is_expired(hold)

    def purge_expired_holds(self) -> int:
        return self.holds.purge_expired()

    # Reservations ----------------------------------------------------------

    def create_reservation(self, draft: ReservationDraft) -> OperationResult:
        return self._run(
            "create_reservation", lambda: self.reservations.create(draft), "Reservation created"
        )

    def get_reservation(self, reservation_id: int) -> OperationResult:
        return self._run("get_reservation", lambda: self.reservations.get(reservation_id))

    def list_reservations(self) -> OperationResult:
        return self._run("list_reservations", self.reservations.list_all)

    def update_reservation(
        self,
        reservation_id: int,
        overall_status: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> OperationResult:
        return self._run(
            "update_reservation",
            lambda: self.reservations.update(reservation_id, overall_status, is_active),
            "Reservation updated",
        )

    def delete_reservation(self, reservation_id: int) -> OperationResult:
        """Logical delete through the state machine; no refund is computed."""
        return self._run(
            "delete_reservation",
            lambda: self.reservations.cancel(reservation_id),
            "Reservation cancelled",
        )

    def add_room_assignment(
        self,
        reservation_id: int,
        room_id: str,
        capacity: Optional[int] = None,
        computed_cost: Optional[Decimal] = None,
        discount: Optional[Decimal] = None,
        tax: Optional[Decimal] = None,
    ) -> OperationResult:
        return self._run(
            "add_room_assignment",
            lambda: self.reservations.add_room(
                reservation_id, room_id, capacity, computed_cost, discount, tax
            ),
            "Room assigned",
        )

    def list_room_assignments(self, reservation_id: int) -> OperationResult:
        return self._run("list_room_assignments", lambda: self.reservations.rooms(reservation_id))

    def remove_room_assignment(self, assignment_id: int) -> OperationResult:
        if self.reservations.remove_room(assignment_id):
            return OperationResult(success=True, message=f"Room assignment {assignment_id} removed")
        return OperationResult(
            success=False, message=f"Room assignment {assignment_id} not found", not_found=True
        )

    def add_discount(
        self, assignment_id: int, discount_id: int, amount: Optional[Decimal] = None
    ) -> OperationResult:
        return self._run(
            "add_discount",
            lambda: self.reservations.add_discount(assignment_id, discount_id, amount),
            "Discount applied",
        )

    def list_discounts(self, assignment_id: int) -> OperationResult:
        return self._run("list_discounts", lambda: self.reservations.discounts(assignment_id))

    def remove_discount(self, assignment_id: int, discount_id: int) -> OperationResult:
        if self.reservations.remove_discount(assignment_id, discount_id):
            return OperationResult(success=True, message=f"Discount {discount_id} removed")
        return OperationResult(
            success=False,
            message=f"Discount {discount_id} is not applied to assignment {assignment_id}",
            not_found=True,
        )

    # Orchestration ---------------------------------------------------------

    def confirm_hold(
        self,
        hold_id: str,
        guest: GuestDetails,
        start_date: date,
        end_date: date,
        guest_count: int = 1,
        room_id: Optional[str] = None,
        payment_method_id: Optional[int] = None,
    ) -> OperationResult:
        """
        Confirm a hold with the booking authority and record its payment.

        The OperationResult carries a ConfirmationResult in data. HoldInvalid,
        UpstreamError and UpstreamUnparseable are raised, not wrapped.
        """
        return self._run(
            "confirm_hold",
            lambda: self.confirmation.confirm(
                hold_id,
                guest,
                start_date,
                end_date,
                guest_count=guest_count,
                room_id=room_id,
                payment_method_id=payment_method_id,
            ),
            "Reservation confirmed",
        )

    def cancel_reservation(self, reservation_id: Optional[int]) -> CancellationResult:
        return self.cancellation.cancel(reservation_id)

    def occupied_dates(self, room_id: str) -> list[date]:
        return self.availability.occupied_dates(room_id)
