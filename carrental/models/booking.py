import enum
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, Date, DateTime, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from carrental.database import Base


class BookingStatus(enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"

    @property
    def is_terminal(self) -> bool:
        return self in (BookingStatus.CANCELLED, BookingStatus.COMPLETED)


# Statuses that hold a vehicle's dates.
ACTIVE_BOOKING_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False)

    pickup_date = Column(Date, nullable=False)
    return_date = Column(Date, nullable=False)
    pickup_location = Column(String(255), nullable=False)
    return_location = Column(String(255), nullable=False)
    total_amount = Column(Float, nullable=False)

    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value)

    cancelled_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="bookings")
    vehicle = relationship("Vehicle", back_populates="bookings")
    payment = relationship("Payment", back_populates="booking", uselist=False)

    __table_args__ = (
        CheckConstraint("return_date > pickup_date", name="ck_booking_dates_ordered"),
        Index("ix_bookings_vehicle_status", "vehicle_id", "status"),
    )

    @property
    def status_enum(self) -> BookingStatus:
        return BookingStatus(self.status)

    @property
    def number_of_days(self) -> int:
        return (self.return_date - self.pickup_date).days
