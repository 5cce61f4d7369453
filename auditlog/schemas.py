from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AuditLogCreate(BaseModel):
    """Incoming event. Accepts ``userEmail`` as sent by the API, or ``user_email``."""
    action: str
    user_email: Optional[str] = Field(default=None, alias="userEmail")
    details: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("action")
    @classmethod
    def validate_action(cls, v: str) -> str:
        v_norm = (v or "").strip()
        if not v_norm:
            raise ValueError("action is required")
        return v_norm


class AuditLogListQuery(BaseModel):
    """Optional paging for the event list; without ``limit`` every row is returned."""
    limit: Optional[int] = Field(default=None, ge=1)
    offset: int = Field(default=0, ge=0)


class AuditLogResponse(BaseModel):
    id: int
    action: str
    user_email: Optional[str] = Field(default=None, serialization_alias="userEmail")
    details: Optional[str] = None
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)
