import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from carrental.database import Base


class PaymentStatus(enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # One payment per booking
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, unique=True)

    amount = Column(Float, nullable=False)
    payment_method = Column(String(40), nullable=False)
    status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)
    transaction_id = Column(String(64), nullable=True, unique=True)
    payment_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    booking = relationship("Booking", back_populates="payment")
