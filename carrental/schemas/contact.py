from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class ContactRequest(BaseModel):
    name: str
    email: str
    message: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v_norm = (v or "").strip()
        if not v_norm:
            raise ValueError("Name is required")
        return v_norm

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v_norm = (v or "").strip().lower()
        if "@" not in v_norm or v_norm.startswith("@") or v_norm.endswith("@"):
            raise ValueError("Invalid email format")
        return v_norm

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        v_norm = (v or "").strip()
        if not v_norm:
            raise ValueError("Message is required")
        if len(v_norm) > 1000:
            raise ValueError("Message must be at most 1000 characters")
        return v_norm


class ContactMessageResponse(BaseModel):
    id: int
    name: str
    email: str
    message: str
    status: str
    replied_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}
