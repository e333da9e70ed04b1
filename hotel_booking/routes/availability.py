from datetime import date

import structlog
from fastapi import APIRouter, Depends, HTTPException

from hotel_booking.dependencies import get_lifecycle
from hotel_booking.services.lifecycle import BookingLifecycle

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/rooms/{room_id}/occupied-dates", response_model=list[date])
def occupied_dates(
    room_id: str, lifecycle: BookingLifecycle = Depends(get_lifecycle)
) -> list[date]:
    """
    Calendar of days on which a room is taken by a live reservation.

    Args:
        room_id: Room to compute the calendar for

    Returns:
        list[date]: Ascending, duplicate-free ISO dates

    Example:
        >>> GET /rooms/R1/occupied-dates
        ["2024-06-01", "2024-06-02", "2024-06-03"]
    """
    try:
        return lifecycle.occupied_dates(room_id)

    except Exception as e:
        logger.exception("occupied_dates_failed", room_id=room_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
