from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from carrental.models.user import UserRole


def _blank_to_none(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    normalized = v.strip()
    return normalized or None


class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str
    role: UserRole = UserRole.CUSTOMER
    phone_no: Optional[str] = None
    license_no: Optional[str] = None
    address: Optional[str] = None

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
            raise ValueError("A valid email address is required")
        return v_norm

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v or "") < 6:
            raise ValueError("Password must be at least 6 characters")
        return v

    @field_validator("phone_no", "license_no", "address")
    @classmethod
    def validate_optional_text(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return (v or "").strip().lower()


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: str
    status: str
    phone_no: Optional[str] = None
    license_no: Optional[str] = None
    address: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    token: str
    token_type: str = "Bearer"
    user: UserResponse


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = None
    phone_no: Optional[str] = None
    license_no: Optional[str] = None
    address: Optional[str] = None
    password: Optional[str] = None
    current_password: Optional[str] = None

    @field_validator("name", "phone_no", "license_no")
    @classmethod
    def validate_optional_text(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return None
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v
