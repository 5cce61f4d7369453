from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from carrental.models.vehicle import VehicleStatus


class VehicleCreateRequest(BaseModel):
    make: str
    model: str
    year: int = Field(ge=1900, le=2100)
    color: Optional[str] = None
    license_plate: str
    vin: str
    price_per_day: float = Field(gt=0)
    fuel_type: Optional[str] = None
    transmission: Optional[str] = None
    seating_capacity: Optional[int] = Field(default=None, ge=1, le=60)
    description: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("make", "model", "license_plate", "vin")
    @classmethod
    def validate_required_text(cls, v: str) -> str:
        v_norm = (v or "").strip()
        if not v_norm:
            raise ValueError("Field is required")
        return v_norm

    @field_validator("license_plate", "vin")
    @classmethod
    def normalize_identifier(cls, v: str) -> str:
        return v.upper()


class VehicleUpdateRequest(BaseModel):
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = Field(default=None, ge=1900, le=2100)
    color: Optional[str] = None
    license_plate: Optional[str] = None
    vin: Optional[str] = None
    price_per_day: Optional[float] = Field(default=None, gt=0)
    fuel_type: Optional[str] = None
    transmission: Optional[str] = None
    seating_capacity: Optional[int] = Field(default=None, ge=1, le=60)
    description: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("license_plate", "vin")
    @classmethod
    def normalize_identifier(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        normalized = v.strip().upper()
        return normalized or None


class VehicleStatusUpdateRequest(BaseModel):
    status: VehicleStatus


class VehicleResponse(BaseModel):
    id: int
    vendor_id: int
    make: str
    model: str
    year: int
    color: Optional[str] = None
    license_plate: str
    vin: str
    price_per_day: float
    fuel_type: Optional[str] = None
    transmission: Optional[str] = None
    seating_capacity: Optional[int] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class AvailabilityResponse(BaseModel):
    vehicle_id: int
    pickup_date: date
    return_date: date
    available: bool
