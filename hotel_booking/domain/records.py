"""Plain records passed between the persistence gateway and the lifecycle services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from hotel_booking.domain.status import HoldStatus, ReservationStatus


@dataclass
class Hold:
    hold_id: str
    room_id: str
    duration_seconds: int
    starts_at: datetime
    ends_at: datetime
    status: str = HoldStatus.ACTIVE.value
    reservation_id: Optional[int] = None

    def is_expired(self, now: datetime) -> bool:
        return is_expired(self, now)

    @property
    def is_confirmed(self) -> bool:
        return self.status == HoldStatus.CONFIRMED.value


def is_expired(hold: Hold, now: datetime) -> bool:
    """Return True when now is strictly after the hold's end timestamp."""
    return now > hold.ends_at


@dataclass
class ReservationDraft:
    """A reservation that has not been persisted yet."""

    start_date: Optional[date]
    end_date: Optional[date]
    user_id: Optional[int] = None
    external_user_id: Optional[int] = None
    total_cost: Optional[Decimal] = None
    overall_status: str = ReservationStatus.ACTIVE.value
    is_active: bool = True


@dataclass
class Reservation:
    id: int
    start_date: Optional[date]
    end_date: Optional[date]
    overall_status: Optional[str]
    is_active: bool
    registered_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user_id: Optional[int] = None
    external_user_id: Optional[int] = None
    total_cost: Optional[Decimal] = None

    @property
    def status(self) -> ReservationStatus:
        return ReservationStatus.from_text(self.overall_status)


@dataclass
class RoomAssignment:
    id: int
    room_id: str
    reservation_id: int
    capacity: Optional[int] = None
    computed_cost: Optional[Decimal] = None
    discount: Optional[Decimal] = None
    tax: Optional[Decimal] = None
    is_active: bool = True
    updated_at: Optional[datetime] = None


@dataclass
class DiscountApplication:
    assignment_id: int
    discount_id: int
    amount: Optional[Decimal] = None
    is_active: bool = True
    updated_at: Optional[datetime] = None


@dataclass
class PaymentDetails:
    """What the confirmation flow asks the gateway to record."""

    payment_method_id: int
    hold_id: Optional[str] = None
    user_id: Optional[int] = None
    external_user_id: Optional[int] = None
    source_account: Optional[int] = 0
    destination_account: Optional[int] = None


@dataclass
class PaymentOutcome:
    ok: bool
    payment_id: Optional[int] = None
    total_amount: Decimal = Decimal("0")
    message: str = ""
    duplicate: bool = False


@dataclass
class CancellationOutcome:
    """Result of the gateway's transactional cancel-with-refund."""

    ok: bool
    refund_amount: Decimal = Decimal("0")
    message: str = ""


@dataclass
class OperationResult:
    """Structured outcome returned by the lifecycle facade."""

    success: bool
    message: str = ""
    data: Any = None
    not_found: bool = False


@dataclass
class GuestDetails:
    first_name: str
    last_name: str
    email: str
    document_type: str
    document_number: str


@dataclass
class BookingRequest:
    """Everything the booking authority needs to turn a hold into a reservation."""

    room_id: str
    hold_id: str
    guest: GuestDetails
    start_date: date
    end_date: date
    guest_count: int = 1
