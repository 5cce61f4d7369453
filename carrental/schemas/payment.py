from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from carrental.models.payment import PaymentStatus


class PaymentCreateRequest(BaseModel):
    booking_id: int
    payment_method: str
    transaction_id: Optional[str] = None

    @field_validator("payment_method")
    @classmethod
    def validate_payment_method(cls, v: str) -> str:
        v_norm = (v or "").strip().upper()
        if not v_norm:
            raise ValueError("Payment method is required")
        return v_norm

    @field_validator("transaction_id")
    @classmethod
    def validate_transaction_id(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        normalized = v.strip()
        return normalized or None


class PaymentStatusUpdateRequest(BaseModel):
    status: PaymentStatus


class PaymentResponse(BaseModel):
    id: int
    booking_id: int
    amount: float
    payment_method: str
    status: str
    transaction_id: Optional[str] = None
    payment_date: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}
