import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from carrental.database import Base


class ComplaintStatus(enum.Enum):
    PENDING = "PENDING"
    RESOLVED = "RESOLVED"


class Complaint(Base):
    __tablename__ = "complaints"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=True)  # optional link

    subject = Column(String(160), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=ComplaintStatus.PENDING.value)
    admin_response = Column(Text, nullable=True)
    resolved_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User")
