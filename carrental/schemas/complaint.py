from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class ComplaintCreateRequest(BaseModel):
    subject: str
    description: str
    booking_id: Optional[int] = None

    @field_validator("subject", "description")
    @classmethod
    def validate_required_text(cls, v: str) -> str:
        v_norm = (v or "").strip()
        if not v_norm:
            raise ValueError("Field is required")
        return v_norm


class ComplaintResolveRequest(BaseModel):
    admin_response: str

    @field_validator("admin_response")
    @classmethod
    def validate_admin_response(cls, v: str) -> str:
        v_norm = (v or "").strip()
        if not v_norm:
            raise ValueError("A response is required to resolve a complaint")
        return v_norm


class ComplaintResponse(BaseModel):
    id: int
    user_id: int
    booking_id: Optional[int] = None
    subject: str
    description: str
    status: str
    admin_response: Optional[str] = None
    resolved_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}
