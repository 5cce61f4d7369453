from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text

from auditlog.database import Base


class AuditLog(Base):
    """One recorded business event posted by the car rental API."""
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    action = Column(String(64), nullable=False, index=True)
    user_email = Column(String(255), nullable=True)
    details = Column(Text, nullable=True)
    timestamp = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
