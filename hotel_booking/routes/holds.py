from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status

from hotel_booking.dependencies import get_lifecycle
from hotel_booking.routes._helpers import hold_out, unwrap_or_raise
from hotel_booking.schemas.holds import HoldCreatePayload, HoldOut, HoldStatusPayload
from hotel_booking.services.lifecycle import BookingLifecycle

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/holds", status_code=status.HTTP_201_CREATED, response_model=HoldOut)
def create_hold(
    payload: HoldCreatePayload,
    lifecycle: BookingLifecycle = Depends(get_lifecycle),
) -> HoldOut:
    """
    Place a time-bounded hold on a room.

    Args:
        payload: Room, duration and optional caller-supplied hold id

    Returns:
        HoldOut: The new hold, including its end timestamp
    """
    try:
        result = lifecycle.create_hold(
            payload.room_id,
            payload.duration_seconds,
            hold_id=payload.hold_id,
            reservation_id=payload.reservation_id,
        )
        return hold_out(lifecycle, unwrap_or_raise(result))

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("hold_creation_failed", room_id=payload.room_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/holds", response_model=list[HoldOut])
def list_holds(
    room_id: Optional[str] = Query(None, description="Only return holds for this room"),
    lifecycle: BookingLifecycle = Depends(get_lifecycle),
) -> list[HoldOut]:
    try:
        if room_id:
            result = lifecycle.list_holds_for_room(room_id)
        else:
            result = lifecycle.list_holds()
        return [hold_out(lifecycle, hold) for hold in unwrap_or_raise(result)]

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("hold_listing_failed", room_id=room_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/holds/{hold_id}", response_model=HoldOut)
def get_hold(hold_id: str, lifecycle: BookingLifecycle = Depends(get_lifecycle)) -> HoldOut:
    try:
        return hold_out(lifecycle, unwrap_or_raise(lifecycle.get_hold(hold_id)))

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("hold_lookup_failed", hold_id=hold_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.patch("/holds/{hold_id}", response_model=HoldOut)
def update_hold_status(
    hold_id: str,
    payload: HoldStatusPayload,
    lifecycle: BookingLifecycle = Depends(get_lifecycle),
) -> HoldOut:
    try:
        result = lifecycle.update_hold_status(hold_id, payload.status)
        logger.info("hold_status_updated", hold_id=hold_id, status=payload.status)
        return hold_out(lifecycle, unwrap_or_raise(result))

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("hold_update_failed", hold_id=hold_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/holds/{hold_id}", status_code=status.HTTP_200_OK)
def release_hold(
    hold_id: str, lifecycle: BookingLifecycle = Depends(get_lifecycle)
) -> dict[str, object]:
    """
    Release a hold. Releasing a hold that is already gone is not an error.

    Returns:
        dict: Whether a hold was removed, and a message
    """
    try:
        result = lifecycle.release_hold(hold_id)
        return {"released": result.success, "message": result.message}

    except Exception as e:
        logger.exception("hold_release_failed", hold_id=hold_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
