from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from auditlog.models import AuditLog


class AuditLogService:
    def __init__(self, db: Session):
        self.db = db

    def record(self, action: str, user_email: Optional[str], details: Optional[str]) -> AuditLog:
        """Store an event; the timestamp is assigned here, never taken from the caller."""
        entry = AuditLog(
            action=action,
            user_email=user_email,
            details=details,
            timestamp=datetime.utcnow(),
        )
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        return entry

    def list_recent(self, limit: Optional[int] = None, offset: int = 0) -> list[AuditLog]:
        query = self.db.query(AuditLog).order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()
