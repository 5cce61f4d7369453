"""Request parsing helpers shared by the route modules."""

from datetime import date
from typing import Optional, Type, TypeVar

from flask import request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from carrental.utils.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_body(model_cls: Type[ModelT], message: str) -> ModelT:
    """Validate the JSON body against ``model_cls``; raise INVALID_ARGUMENT on failure."""
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    try:
        return model_cls(**data)
    except PydanticValidationError as exc:
        raise ValidationError(
            message,
            details={"errors": exc.errors(include_url=False, include_context=False)},
        )


def parse_enum_arg(enum_cls, name: str):
    """Read an optional enum-valued query argument."""
    raw: Optional[str] = request.args.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return enum_cls(raw.strip().upper())
    except ValueError:
        allowed = [e.value for e in enum_cls]
        raise ValidationError(f"{name} must be one of: {allowed}", field=name)


def parse_date_arg(name: str):
    """Read a required ISO date (YYYY-MM-DD) query argument."""
    raw = request.args.get(name)
    if not raw:
        raise ValidationError(f"{name} is required", field=name)
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        raise ValidationError(f"{name} must be an ISO date (YYYY-MM-DD)", field=name)
