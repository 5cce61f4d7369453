"""User model for registered customers, vendors and administrators."""

import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from carrental.database import Base


class UserRole(enum.Enum):
    ADMIN = "ADMIN"
    VENDOR = "VENDOR"
    CUSTOMER = "CUSTOMER"


class UserStatus(enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class User(Base):
    """
    A person with an account.

    Attributes:
        email: Login identifier (unique, stored lowercase)
        password_hash: bcrypt hash, never the raw password
        role: One of UserRole values
        status: Admin approval state; REJECTED accounts cannot sign in
        phone_no / license_no: Optional, unique when present
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    phone_no = Column(String(30), unique=True, nullable=True)
    license_no = Column(String(50), unique=True, nullable=True)
    address = Column(String(255), nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.CUSTOMER.value)
    status = Column(String(20), nullable=False, default=UserStatus.PENDING.value, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    vehicles = relationship("Vehicle", back_populates="vendor")
    bookings = relationship("Booking", back_populates="user")

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
