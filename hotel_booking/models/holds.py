"""SQLAlchemy model for short-lived room holds."""

from sqlalchemy import Column, DateTime, Integer, String

from hotel_booking.models.base import Base


class Hold(Base):
    """
    ORM model for a time-bounded hold on a room.

    hold_id is an opaque token (caller supplied or generated). reservation_id is
    a weak reference filled in once the hold is confirmed; the hold never owns
    the reservation. ends_at is always starts_at + duration_seconds.
    """

    __tablename__ = "holds"

    hold_id = Column(String(64), primary_key=True)
    room_id = Column(String(40), nullable=False, index=True)
    reservation_id = Column(Integer, nullable=True)
    duration_seconds = Column(Integer, nullable=False)
    starts_at = Column(DateTime(timezone=True), nullable=False)
    ends_at = Column(DateTime(timezone=True), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="active")
