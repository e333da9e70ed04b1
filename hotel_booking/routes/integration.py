"""
Integration endpoints used by partner channels to confirm holds and cancel
reservations through the booking authority.
"""

from __future__ import annotations

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse, Response

from hotel_booking.dependencies import get_lifecycle
from hotel_booking.domain.records import GuestDetails
from hotel_booking.errors import HoldInvalid, UpstreamError, UpstreamUnparseable
from hotel_booking.routes._helpers import mirror_upstream, unwrap_or_raise
from hotel_booking.schemas.integration import CancellationOut, ConfirmReservationPayload
from hotel_booking.services.confirmation import ConfirmationResult
from hotel_booking.services.lifecycle import BookingLifecycle

logger = structlog.get_logger(__name__)
router = APIRouter()

PAYMENT_RECORDED_HEADER = "X-Payment-Recorded"


@router.post("/reservations/confirm")
def confirm_reservation(
    payload: ConfirmReservationPayload,
    lifecycle: BookingLifecycle = Depends(get_lifecycle),
) -> Response:
    """
    Confirm a hold into a definitive reservation.

    The booking authority's status code and body are echoed verbatim, both on
    success and on failure. Whether the local payment record was written is
    reported in the X-Payment-Recorded header; a failed payment insert never
    turns a confirmed booking into an error.

    Args:
        payload: Hold id, guest identity, date range and guest count

    Returns:
        Response: The booking authority's answer

    Raises:
        HTTPException: 409 if the hold is missing, expired or already confirmed
    """
    guest = GuestDetails(
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        document_type=payload.document_type,
        document_number=payload.document_number,
    )
    try:
        result = lifecycle.confirm_hold(
            payload.hold_id,
            guest,
            payload.start_date,
            payload.end_date,
            guest_count=payload.guest_count,
            room_id=payload.room_id,
            payment_method_id=payload.payment_method_id,
        )
        confirmation: ConfirmationResult = unwrap_or_raise(result)

        response = mirror_upstream(confirmation.status_code, confirmation.content)
        response.headers[PAYMENT_RECORDED_HEADER] = str(confirmation.payment.ok).lower()
        return response

    except HoldInvalid as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except (UpstreamError, UpstreamUnparseable) as e:
        logger.warning(
            "confirmation_upstream_failure",
            hold_id=payload.hold_id,
            status_code=e.status_code,
            error=str(e),
        )
        return mirror_upstream(e.status_code, e.content)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("confirmation_failed", hold_id=payload.hold_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/reservations/cancel", response_model=CancellationOut)
def cancel_reservation(
    reservation_id: Optional[int] = Query(None, alias="idReserva", description="Reservation to cancel"),
    lifecycle: BookingLifecycle = Depends(get_lifecycle),
) -> JSONResponse:
    """
    Cancel a reservation and report the amount to refund.

    Business failures (missing id, unknown reservation, already cancelled,
    database error) are answered with 200 and success=false.

    Example:
        >>> DELETE /integration/reservations/cancel?idReserva=42
        {"success": false, "refund_amount": 0.0, "message": "Reservation 42 not found"}
    """
    try:
        result = lifecycle.cancel_reservation(reservation_id)
        body = CancellationOut(
            success=result.success,
            refund_amount=result.refund_amount,
            message=result.message,
        )
        return JSONResponse(content=body.model_dump(mode="json"))

    except Exception as e:
        logger.exception("cancellation_failed", reservation_id=reservation_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
