from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from hotel_booking.domain.status import ReservationStatus


class ReservationCreatePayload(BaseModel):
    """
    Schema for creating a reservation directly, outside of hold confirmation.
    """

    start_date: date = Field(..., description="First night")
    end_date: date = Field(..., description="Last night")
    user_id: Optional[int] = Field(None, description="Internal guest id")
    external_user_id: Optional[int] = Field(None, description="External guest id")
    total_cost: Optional[Decimal] = Field(None, description="Total cost of the stay")
    overall_status: str = Field(ReservationStatus.ACTIVE.value, description="Overall status text")


class ReservationUpdatePayload(BaseModel):
    """
    Schema for updating a reservation. Only the status fields can change.
    """

    overall_status: Optional[str] = Field(None, description="Overall status text")
    is_active: Optional[bool] = Field(None, description="Reservation active flag")


class ReservationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[int] = None
    external_user_id: Optional[int] = None
    total_cost: Optional[Decimal] = None
    registered_at: Optional[datetime] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    overall_status: Optional[str] = None
    is_active: bool
    updated_at: Optional[datetime] = None


class RoomAssignmentCreatePayload(BaseModel):
    room_id: str = Field(..., description="Room being assigned")
    capacity: Optional[int] = Field(None, description="Guest capacity")
    computed_cost: Optional[Decimal] = Field(None, description="Cost computed for this room")
    discount: Optional[Decimal] = Field(None, description="Discount amount")
    tax: Optional[Decimal] = Field(None, description="Tax amount")


class RoomAssignmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    room_id: str
    reservation_id: int
    capacity: Optional[int] = None
    computed_cost: Optional[Decimal] = None
    discount: Optional[Decimal] = None
    tax: Optional[Decimal] = None
    is_active: bool
    updated_at: Optional[datetime] = None


class DiscountCreatePayload(BaseModel):
    discount_id: int = Field(..., description="Catalogue discount id")
    amount: Optional[Decimal] = Field(None, description="Monetary amount applied")


class DiscountOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    assignment_id: int
    discount_id: int
    amount: Optional[Decimal] = None
    is_active: bool
    updated_at: Optional[datetime] = None
