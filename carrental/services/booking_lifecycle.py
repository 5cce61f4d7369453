"""Allowed booking status transitions."""

from datetime import datetime
from typing import Optional

from carrental.models.booking import Booking, BookingStatus
from carrental.utils.exceptions import StatusTransitionError


ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
}


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def ensure_transition(current: BookingStatus, target: BookingStatus) -> None:
    if can_transition(current, target):
        return

    if current.is_terminal:
        reason = f"booking is already {current.value.lower()}"
    else:
        reason = None
    raise StatusTransitionError(current.value, target.value, reason)


def apply_transition(booking: Booking, target: BookingStatus, now: Optional[datetime] = None) -> Booking:
    """Validate and apply a status change on the entity (caller commits)."""
    ensure_transition(booking.status_enum, target)

    now = now or datetime.utcnow()
    booking.status = target.value
    booking.updated_at = now
    if target is BookingStatus.CANCELLED:
        booking.cancelled_at = now
    elif target is BookingStatus.COMPLETED:
        booking.completed_at = now
    return booking
