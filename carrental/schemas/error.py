import uuid
from typing import Optional, Dict, Any

from pydantic import BaseModel

from carrental.utils.exceptions import CarRentalApiError


class ErrorDetail(BaseModel):
    code: str
    message: str
    field: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    error: ErrorDetail
    request_id: Optional[str] = None

    @classmethod
    def build(cls, detail: ErrorDetail) -> "ErrorResponse":
        return cls(error=detail, request_id=str(uuid.uuid4()))

    @classmethod
    def from_api_error(cls, exc: CarRentalApiError) -> "ErrorResponse":
        return cls.build(
            ErrorDetail(
                code=exc.code,
                message=exc.message,
                field=exc.field,
                details=exc.details,
            )
        )
