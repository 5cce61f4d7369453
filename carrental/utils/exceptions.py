class CarRentalApiError(Exception):
    """Base exception for car rental API errors"""
    def __init__(self, code: str, message: str, status_code: int = 400, field: str = None, details: dict = None):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.field = field
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(CarRentalApiError):
    """Malformed or out-of-range input (InvalidArgument)."""
    def __init__(self, message: str, field: str = None, details: dict = None):
        super().__init__("INVALID_ARGUMENT", message, 400, field, details)


class AuthenticationError(CarRentalApiError):
    def __init__(self, message: str = "Authentication required"):
        super().__init__("UNAUTHORIZED", message, 401)


class ForbiddenError(CarRentalApiError):
    def __init__(self, message: str = "You are not allowed to perform this action", details: dict = None):
        super().__init__("FORBIDDEN", message, 403, details=details)


class NotFoundError(CarRentalApiError):
    def __init__(self, resource: str, resource_id=None):
        message = f"{resource} not found"
        if resource_id is not None:
            message += f": {resource_id}"
        super().__init__(
            "NOT_FOUND",
            message,
            404,
            details={"resource": resource, "resource_id": str(resource_id) if resource_id is not None else None},
        )


class ConflictError(CarRentalApiError):
    def __init__(self, message: str, field: str = None, details: dict = None):
        super().__init__("CONFLICT", message, 409, field, details)


class StatusTransitionError(CarRentalApiError):
    """Requested transition is not allowed from the current status (InvalidState)."""
    def __init__(self, current_status: str, requested_status: str, reason: str = None):
        message = f"Invalid status transition from {current_status} to {requested_status}"
        if reason:
            message += f": {reason}"
        super().__init__(
            "INVALID_STATE",
            message,
            409,
            details={"current_status": current_status, "requested_status": requested_status}
        )


class BookingConflictError(ConflictError):
    """Requested dates overlap an active booking of the same vehicle"""
    def __init__(self, vehicle_id: int, conflicting_booking_ids: list = None):
        super().__init__(
            "Vehicle is already booked for the selected dates",
            details={"vehicle_id": vehicle_id, "conflicting_booking_ids": conflicting_booking_ids or []},
        )
