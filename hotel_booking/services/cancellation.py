"""Cancellation Orchestrator: cancel a reservation and report what to refund."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

import structlog

from hotel_booking.db.gateway import SqlGateway
from hotel_booking.errors import StorageFault
from hotel_booking.metrics import cancellations_total
from hotel_booking.services.events import RESERVATION_CANCELLED, EventSink, NullEventSink
from hotel_booking.services.locks import KeyedLock

logger = structlog.get_logger(__name__)


@dataclass
class CancellationResult:
    success: bool
    refund_amount: Decimal = Decimal("0")
    message: str = ""


class CancellationOrchestrator:
    def __init__(
        self,
        gateway: SqlGateway,
        events: Optional[EventSink] = None,
        locks: Optional[KeyedLock] = None,
    ) -> None:
        self.gateway = gateway
        self.events = events or NullEventSink()
        self.locks = locks if locks is not None else KeyedLock()

    def cancel(self, reservation_id: Optional[int]) -> CancellationResult:
        """
        Cancel an active reservation and return the amount to refund.

        The refund is the sum of the payments recorded against the reservation.
        A reservation that is not active (already cancelled, expired, unknown)
        is reported as not processed rather than raised.

        Args:
            reservation_id: Reservation to cancel

        Returns:
            CancellationResult: success flag, refund amount and a human readable message
        """
        if not reservation_id:
            return CancellationResult(success=False, message="reservation id is required")

        with self.locks.locked(reservation_id):
            try:
                outcome = self.gateway.cancel_reservation_with_refund(reservation_id)
            except StorageFault as e:
                cancellations_total.labels(outcome="storage_error").inc()
                logger.error("cancellation_storage_error", reservation_id=reservation_id, error=str(e))
                return CancellationResult(success=False, message=f"Database error: {e}")

        if not outcome.ok:
            cancellations_total.labels(outcome="rejected").inc()
            logger.info(
                "cancellation_not_processed", reservation_id=reservation_id, reason=outcome.message
            )
            return CancellationResult(success=False, message=outcome.message)

        cancellations_total.labels(outcome="success").inc()
        logger.info(
            "reservation_cancelled",
            reservation_id=reservation_id,
            refund_amount=str(outcome.refund_amount),
        )
        self.events.publish(
            RESERVATION_CANCELLED,
            {"reservation_id": reservation_id, "refund_amount": str(outcome.refund_amount)},
        )
        return CancellationResult(
            success=True, refund_amount=outcome.refund_amount, message=outcome.message
        )
