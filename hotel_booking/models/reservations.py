# models/reservations.py

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.sql import func

from hotel_booking.models.base import Base


class Reservation(Base):
    """
    ORM model for durable hotel reservations.

    A reservation belongs either to an internal user or to an external guest
    (integration bookings) and covers a date range. It is never physically
    deleted: cancellation flips is_active and sets overall_status to "CANCELADA".
    overall_status is free text written by several systems, see
    hotel_booking.domain.status for how it is interpreted.
    """

    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=True, index=True)
    external_user_id = Column(Integer, nullable=True, index=True)
    total_cost = Column(Numeric(12, 2), nullable=True)
    registered_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    overall_status = Column(String(30), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class RoomAssignment(Base):
    """
    ORM model linking one room to a reservation, with its per-room pricing.

    Exactly one assignment may exist for a given (room, reservation) pair.
    """

    __tablename__ = "room_assignments"
    __table_args__ = (
        UniqueConstraint("room_id", "reservation_id", name="uq_room_assignments_room_reservation"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    room_id = Column(String(40), nullable=False, index=True)
    reservation_id = Column(
        Integer, ForeignKey("reservations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    capacity = Column(Integer, nullable=True)
    computed_cost = Column(Numeric(12, 2), nullable=True)
    discount = Column(Numeric(12, 2), nullable=True)
    tax = Column(Numeric(12, 2), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class DiscountApplication(Base):
    """ORM model for a discount applied to a single room assignment."""

    __tablename__ = "discount_applications"

    assignment_id = Column(
        Integer, ForeignKey("room_assignments.id", ondelete="CASCADE"), primary_key=True
    )
    discount_id = Column(Integer, primary_key=True)
    amount = Column(Numeric(12, 2), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
