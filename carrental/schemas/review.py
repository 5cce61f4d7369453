from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ReviewCreateRequest(BaseModel):
    vehicle_id: int
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=2000)


class ReviewResponse(BaseModel):
    id: int
    user_id: int
    vehicle_id: int
    rating: int
    comment: Optional[str] = None
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}
