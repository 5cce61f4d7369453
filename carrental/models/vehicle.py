import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from carrental.database import Base


class VehicleStatus(enum.Enum):
    """Informational only; date availability comes from bookings."""
    AVAILABLE = "AVAILABLE"
    RENTED = "RENTED"
    UNDER_MAINTENANCE = "UNDER_MAINTENANCE"
    UNAVAILABLE = "UNAVAILABLE"


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vendor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    make = Column(String(80), nullable=False)
    model = Column(String(80), nullable=False)
    year = Column(Integer, nullable=False)
    color = Column(String(40), nullable=True)
    license_plate = Column(String(20), unique=True, nullable=False)
    vin = Column(String(32), unique=True, nullable=False)
    price_per_day = Column(Float, nullable=False)
    fuel_type = Column(String(30), nullable=True)
    transmission = Column(String(30), nullable=True)
    seating_capacity = Column(Integer, nullable=True)
    description = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)

    status = Column(String(20), nullable=False, default=VehicleStatus.AVAILABLE.value)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    vendor = relationship("User", back_populates="vehicles")
    bookings = relationship("Booking", back_populates="vehicle")
    reviews = relationship("Review", back_populates="vehicle")
