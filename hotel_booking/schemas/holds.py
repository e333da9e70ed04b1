from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from hotel_booking.config import DEFAULT_HOLD_SECONDS


class HoldCreatePayload(BaseModel):
    """
    Schema for placing a hold on a room. The hold id is generated when omitted.
    """

    room_id: str = Field(..., description="Room to hold")
    duration_seconds: int = Field(DEFAULT_HOLD_SECONDS, description="Hold lifetime in seconds")
    hold_id: Optional[str] = Field(None, description="Caller-supplied hold token")
    reservation_id: Optional[int] = Field(None, description="Reservation already linked to the hold")


class HoldStatusPayload(BaseModel):
    status: str = Field(..., description='New hold status ("active" or "confirmed")')


class HoldOut(BaseModel):
    hold_id: str
    room_id: str
    reservation_id: Optional[int] = None
    duration_seconds: int
    starts_at: datetime
    ends_at: datetime
    status: str
    expired: bool = Field(..., description="True when the hold's end timestamp has passed")
