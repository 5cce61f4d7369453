import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String

from carrental.database import Base


class ContactMessageStatus(enum.Enum):
    NEW = "NEW"
    REPLIED = "REPLIED"


class ContactMessage(Base):
    """A message sent through the public contact form."""
    __tablename__ = "contact_messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), nullable=False)
    message = Column(String(1000), nullable=False)
    status = Column(String(20), nullable=False, default=ContactMessageStatus.NEW.value, index=True)
    replied_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
