from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class BookingCreateRequest(BaseModel):
    vehicle_id: int
    pickup_date: date
    return_date: date
    pickup_location: str
    return_location: str

    @field_validator("pickup_location", "return_location")
    @classmethod
    def validate_location(cls, v: str) -> str:
        v_norm = (v or "").strip()
        if not v_norm:
            raise ValueError("Location is required")
        return v_norm


class BookingResponse(BaseModel):
    id: int
    user_id: int
    vehicle_id: int
    pickup_date: date
    return_date: date
    pickup_location: str
    return_location: str
    total_amount: float
    status: str
    cancelled_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}
