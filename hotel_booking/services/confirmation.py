"""
Confirmation Orchestrator: hold -> definitive reservation -> payment.

This is a two-step saga keyed by hold id, not a distributed transaction:

1. The booking authority creates the reservation. Its answer is the
   authoritative success signal; if it fails nothing local is written.
2. The payment is recorded locally. A failure here is logged and reported in
   the result but never turns the confirmation into an error, the booking
   already exists upstream and payments are reconciled separately. The hold id
   is the payment's idempotency key.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Optional, Tuple

import structlog

from hotel_booking.config import DEFAULT_PAYMENT_METHOD_ID, PAYMENT_DESTINATION_ACCOUNT
from hotel_booking.db.gateway import SqlGateway
from hotel_booking.domain.records import (
    BookingRequest,
    GuestDetails,
    Hold,
    PaymentDetails,
    PaymentOutcome,
)
from hotel_booking.errors import (
    HoldInvalid,
    StorageFault,
    UpstreamError,
    UpstreamUnparseable,
    ValidationError,
)
from hotel_booking.metrics import confirmations_total, payments_total
from hotel_booking.network.booking_authority import create_booking
from hotel_booking.normalizers.booking_authority import extract_reservation_id
from hotel_booking.services.events import RESERVATION_CONFIRMED, EventSink, NullEventSink
from hotel_booking.services.holds import HoldManager
from hotel_booking.services.locks import KeyedLock

logger = structlog.get_logger(__name__)

BookingCall = Callable[[BookingRequest], Tuple[int, Any]]


@dataclass
class ConfirmationResult:
    """
    Outcome of a successful confirmation.

    status_code and content are the booking authority's answer, echoed verbatim
    to the caller whatever happened to the payment.
    """

    status_code: int
    content: Any
    reservation_id: int
    payment: PaymentOutcome


class ConfirmationOrchestrator:
    def __init__(
        self,
        gateway: SqlGateway,
        holds: HoldManager,
        book: BookingCall = create_booking,
        events: Optional[EventSink] = None,
        locks: Optional[KeyedLock] = None,
        payment_method_id: int = DEFAULT_PAYMENT_METHOD_ID,
        destination_account: int = PAYMENT_DESTINATION_ACCOUNT,
    ) -> None:
        self.gateway = gateway
        self.holds = holds
        self.book = book
        self.events = events or NullEventSink()
        self.locks = locks if locks is not None else KeyedLock()
        self.payment_method_id = payment_method_id
        self.destination_account = destination_account

    def confirm(
        self,
        hold_id: str,
        guest: GuestDetails,
        start_date: date,
        end_date: date,
        guest_count: int = 1,
        room_id: Optional[str] = None,
        payment_method_id: Optional[int] = None,
    ) -> ConfirmationResult:
        """
        Turn a live hold into a confirmed reservation and record its payment.

        Args:
            hold_id: Hold being confirmed
            guest: Guest identity sent to the booking authority
            start_date: First night
            end_date: Last night
            guest_count: Number of guests
            room_id: Room the caller believes is held; must match the hold if given
            payment_method_id: Overrides the default payment method

        Returns:
            ConfirmationResult: Upstream answer, reservation id and payment outcome

        Raises:
            ValidationError: If the date range is inverted
            HoldInvalid: If the hold is missing, expired, already confirmed or
                belongs to another room
            UpstreamError: If the booking authority fails or rejects the booking
            UpstreamUnparseable: If no reservation id can be read from its answer
        """
        if start_date > end_date:
            raise ValidationError(f"start_date {start_date} is after end_date {end_date}")

        with self.locks.locked(hold_id):
            hold = self._check_hold(hold_id, self.gateway.get_hold(hold_id), room_id)

            logger.info("confirming_hold", hold_id=hold_id, room_id=hold.room_id)
            request = BookingRequest(
                room_id=hold.room_id,
                hold_id=hold_id,
                guest=guest,
                start_date=start_date,
                end_date=end_date,
                guest_count=guest_count,
            )

            try:
                status_code, content = self.book(request)
            except UpstreamError:
                confirmations_total.labels(outcome="upstream_error").inc()
                raise

            reservation_id = extract_reservation_id(content)
            if reservation_id is None:
                confirmations_total.labels(outcome="upstream_unparseable").inc()
                logger.warning(
                    "reservation_id_missing_from_response", hold_id=hold_id, content=content
                )
                raise UpstreamUnparseable(status_code, content)

            self._link_hold(hold_id, reservation_id)
            payment = self._record_payment(reservation_id, hold_id, payment_method_id)

        confirmations_total.labels(outcome="success").inc()
        self.events.publish(
            RESERVATION_CONFIRMED,
            {
                "reservation_id": reservation_id,
                "hold_id": hold_id,
                "room_id": hold.room_id,
                "payment_recorded": payment.ok,
            },
        )
        return ConfirmationResult(
            status_code=status_code,
            content=content,
            reservation_id=reservation_id,
            payment=payment,
        )

    def _check_hold(self, hold_id: str, hold: Optional[Hold], room_id: Optional[str]) -> Hold:
        reason = None
        if hold is None:
            reason = "not found"
        elif hold.is_confirmed:
            reason = "already confirmed"
        elif self.holds.is_expired(hold):
            reason = "expired"
        elif room_id and room_id != hold.room_id:
            reason = f"belongs to room {hold.room_id}"

        if reason or hold is None:
            confirmations_total.labels(outcome="hold_invalid").inc()
            logger.warning("hold_invalid", hold_id=hold_id, reason=reason)
            raise HoldInvalid(f"Hold {hold_id} {reason}")
        return hold

    def _link_hold(self, hold_id: str, reservation_id: int) -> None:
        try:
            self.holds.mark_confirmed(hold_id, reservation_id)
        except StorageFault:
            logger.exception("hold_link_failed", hold_id=hold_id, reservation_id=reservation_id)

    def _record_payment(
        self, reservation_id: int, hold_id: str, payment_method_id: Optional[int]
    ) -> PaymentOutcome:
        details = PaymentDetails(
            payment_method_id=payment_method_id or self.payment_method_id,
            hold_id=hold_id,
            source_account=0,
            destination_account=self.destination_account,
        )
        try:
            outcome = self.gateway.insert_payment(reservation_id, details)
        except Exception as e:
            # The reservation is confirmed upstream; the payment is reconciled later
            payments_total.labels(outcome="failed").inc()
            logger.exception(
                "payment_insert_failed", reservation_id=reservation_id, hold_id=hold_id
            )
            return PaymentOutcome(ok=False, message=f"Payment not recorded: {e}")

        if not outcome.ok:
            payments_total.labels(outcome="failed").inc()
            logger.error(
                "payment_insert_rejected",
                reservation_id=reservation_id,
                hold_id=hold_id,
                reason=outcome.message,
            )
        else:
            payments_total.labels(outcome="duplicate" if outcome.duplicate else "inserted").inc()
            logger.info(
                "payment_recorded",
                reservation_id=reservation_id,
                payment_id=outcome.payment_id,
                total_amount=str(outcome.total_amount),
            )
        return outcome
