"""SQLAlchemy model for payments recorded against reservations."""

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.sql import func

from hotel_booking.models.base import Base


class Payment(Base):
    """
    ORM model for a payment.

    Payments created by hold confirmation carry the hold_id, which is unique so
    that a retried confirmation can never record the same payment twice.
    """

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    reservation_id = Column(
        Integer, ForeignKey("reservations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    hold_id = Column(String(64), nullable=True, unique=True)
    user_id = Column(Integer, nullable=True)
    external_user_id = Column(Integer, nullable=True)
    payment_method_id = Column(Integer, nullable=False)
    source_account = Column(BigInteger, nullable=True)
    destination_account = Column(BigInteger, nullable=True)
    total_amount = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
