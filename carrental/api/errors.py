import logging

from flask import jsonify
from pydantic import ValidationError as PydanticValidationError
from werkzeug.exceptions import HTTPException

from carrental.schemas.error import ErrorDetail, ErrorResponse
from carrental.utils.exceptions import CarRentalApiError

logger = logging.getLogger(__name__)

# werkzeug status codes mapped onto the API's error codes
HTTP_ERROR_CODES = {
    400: "INVALID_ARGUMENT",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}


def _error_response(status_code: int, code: str, message: str, details: dict = None):
    body = ErrorResponse.build(ErrorDetail(code=code, message=message, details=details))
    return jsonify(body.model_dump()), status_code


def register_error_handlers(app):
    """Convert exceptions raised by routes into structured error responses."""

    @app.errorhandler(CarRentalApiError)
    def handle_api_error(e: CarRentalApiError):
        if e.status_code >= 500:
            logger.error(f"Car rental API error: {e.code} - {e.message}")
        else:
            logger.warning(f"Car rental API error: {e.code} - {e.message}")
        return jsonify(ErrorResponse.from_api_error(e).model_dump()), e.status_code

    @app.errorhandler(PydanticValidationError)
    def handle_pydantic_error(e: PydanticValidationError):
        logger.warning(f"Request validation failed: {e.error_count()} error(s)")
        errors = e.errors(include_url=False, include_context=False)
        return _error_response(400, "INVALID_ARGUMENT", "Invalid request", {"errors": errors})

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        code = HTTP_ERROR_CODES.get(e.code, "HTTP_EXCEPTION")
        return _error_response(e.code, code, e.description or e.name, {"status_code": e.code})

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.error(f"Unexpected error: {str(e)}", exc_info=True)
        return _error_response(
            500,
            "INTERNAL_SERVER_ERROR",
            "An unexpected error occurred",
            {"error_type": type(e).__name__},
        )
