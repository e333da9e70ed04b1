import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from hotel_booking.dependencies import get_lifecycle
from hotel_booking.domain.records import ReservationDraft
from hotel_booking.routes._helpers import unwrap_or_raise
from hotel_booking.schemas.reservations import (
    DiscountCreatePayload,
    DiscountOut,
    ReservationCreatePayload,
    ReservationOut,
    ReservationUpdatePayload,
    RoomAssignmentCreatePayload,
    RoomAssignmentOut,
)
from hotel_booking.services.lifecycle import BookingLifecycle

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/reservations", status_code=status.HTTP_201_CREATED, response_model=ReservationOut)
def create_reservation(
    payload: ReservationCreatePayload,
    lifecycle: BookingLifecycle = Depends(get_lifecycle),
) -> ReservationOut:
    """
    Create a reservation directly (without going through a hold).

    Args:
        payload: Dates, guest ids, total cost and initial status

    Returns:
        ReservationOut: The stored reservation with its assigned id
    """
    try:
        draft = ReservationDraft(**payload.model_dump())
        reservation = unwrap_or_raise(lifecycle.create_reservation(draft))
        return ReservationOut.model_validate(reservation)

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("reservation_creation_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/reservations", response_model=list[ReservationOut])
def list_reservations(lifecycle: BookingLifecycle = Depends(get_lifecycle)) -> list[ReservationOut]:
    try:
        reservations = unwrap_or_raise(lifecycle.list_reservations())
        return [ReservationOut.model_validate(r) for r in reservations]

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("reservation_listing_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/reservations/{reservation_id}", response_model=ReservationOut)
def get_reservation(
    reservation_id: int, lifecycle: BookingLifecycle = Depends(get_lifecycle)
) -> ReservationOut:
    try:
        reservation = unwrap_or_raise(lifecycle.get_reservation(reservation_id))
        return ReservationOut.model_validate(reservation)

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("reservation_lookup_failed", reservation_id=reservation_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.patch("/reservations/{reservation_id}", response_model=ReservationOut)
def update_reservation(
    reservation_id: int,
    payload: ReservationUpdatePayload,
    lifecycle: BookingLifecycle = Depends(get_lifecycle),
) -> ReservationOut:
    """
    Update a reservation's overall status and/or active flag.

    Returns 400 when nothing is being changed or the reservation is already
    cancelled or expired.
    """
    try:
        result = lifecycle.update_reservation(
            reservation_id,
            overall_status=payload.overall_status,
            is_active=payload.is_active,
        )
        return ReservationOut.model_validate(unwrap_or_raise(result))

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("reservation_update_failed", reservation_id=reservation_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/reservations/{reservation_id}", status_code=status.HTTP_200_OK)
def delete_reservation(
    reservation_id: int, lifecycle: BookingLifecycle = Depends(get_lifecycle)
) -> dict[str, str]:
    """
    Logically delete a reservation (status CANCELADA, inactive). The row is kept.

    Returns:
        dict: Message confirming the cancellation
    """
    try:
        result = lifecycle.delete_reservation(reservation_id)
        unwrap_or_raise(result)
        return {"message": f"Reservation {reservation_id} cancelled"}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("reservation_deletion_failed", reservation_id=reservation_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


# Room assignments


@router.post(
    "/reservations/{reservation_id}/rooms",
    status_code=status.HTTP_201_CREATED,
    response_model=RoomAssignmentOut,
)
def add_room_assignment(
    reservation_id: int,
    payload: RoomAssignmentCreatePayload,
    lifecycle: BookingLifecycle = Depends(get_lifecycle),
) -> RoomAssignmentOut:
    try:
        result = lifecycle.add_room_assignment(reservation_id, **payload.model_dump())
        return RoomAssignmentOut.model_validate(unwrap_or_raise(result))

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(
            "room_assignment_creation_failed", reservation_id=reservation_id, error=str(e)
        )
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/reservations/{reservation_id}/rooms", response_model=list[RoomAssignmentOut])
def list_room_assignments(
    reservation_id: int, lifecycle: BookingLifecycle = Depends(get_lifecycle)
) -> list[RoomAssignmentOut]:
    try:
        assignments = unwrap_or_raise(lifecycle.list_room_assignments(reservation_id))
        return [RoomAssignmentOut.model_validate(a) for a in assignments]

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(
            "room_assignment_listing_failed", reservation_id=reservation_id, error=str(e)
        )
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/room-assignments/{assignment_id}", status_code=status.HTTP_200_OK)
def remove_room_assignment(
    assignment_id: int, lifecycle: BookingLifecycle = Depends(get_lifecycle)
) -> dict[str, str]:
    try:
        result = lifecycle.remove_room_assignment(assignment_id)
        unwrap_or_raise(result)
        return {"message": result.message}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("room_assignment_removal_failed", assignment_id=assignment_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


# Discounts


@router.post(
    "/room-assignments/{assignment_id}/discounts",
    status_code=status.HTTP_201_CREATED,
    response_model=DiscountOut,
)
def add_discount(
    assignment_id: int,
    payload: DiscountCreatePayload,
    lifecycle: BookingLifecycle = Depends(get_lifecycle),
) -> DiscountOut:
    try:
        result = lifecycle.add_discount(assignment_id, payload.discount_id, payload.amount)
        return DiscountOut.model_validate(unwrap_or_raise(result))

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("discount_creation_failed", assignment_id=assignment_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/room-assignments/{assignment_id}/discounts", response_model=list[DiscountOut])
def list_discounts(
    assignment_id: int, lifecycle: BookingLifecycle = Depends(get_lifecycle)
) -> list[DiscountOut]:
    try:
        discounts = unwrap_or_raise(lifecycle.list_discounts(assignment_id))
        return [DiscountOut.model_validate(d) for d in discounts]

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("discount_listing_failed", assignment_id=assignment_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete(
    "/room-assignments/{assignment_id}/discounts/{discount_id}", status_code=status.HTTP_200_OK
)
def remove_discount(
    assignment_id: int,
    discount_id: int,
    lifecycle: BookingLifecycle = Depends(get_lifecycle),
) -> dict[str, str]:
    try:
        result = lifecycle.remove_discount(assignment_id, discount_id)
        unwrap_or_raise(result)
        return {"message": result.message}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(
            "discount_removal_failed",
            assignment_id=assignment_id,
            discount_id=discount_id,
            error=str(e),
        )
        raise HTTPException(status_code=500, detail="Internal server error")
