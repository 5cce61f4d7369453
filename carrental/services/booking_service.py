from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from sqlalchemy import and_
from sqlalchemy.orm import Session

from carrental.models.booking import Booking, BookingStatus
from carrental.models.vehicle import Vehicle
from carrental.services import audit_client as audit_events
from carrental.services.audit_client import AuditClient, audit_client
from carrental.services.authorization import Actor, Capability, authorize, authorize_owner_or, can
from carrental.services.availability_service import AvailabilityService, validate_date_range
from carrental.services.booking_lifecycle import apply_transition
from carrental.utils.exceptions import (
    BookingConflictError,
    ForbiddenError,
    NotFoundError,
    StatusTransitionError,
    ValidationError,
)
from carrental.utils.locks import vehicle_booking_locks

logger = logging.getLogger(__name__)


def compute_total_amount(price_per_day: float, pickup_date: date, return_date: date) -> float:
    days = (return_date - pickup_date).days
    return round(float(price_per_day) * days, 2)


def _required_text(value: Optional[str], field: str) -> str:
    normalized = (value or "").strip()
    if not normalized:
        raise ValidationError(f"{field.replace('_', ' ').capitalize()} is required", field=field)
    return normalized


class BookingService:
    def __init__(
        self,
        db: Session,
        audit: Optional[AuditClient] = None,
        availability: Optional[AvailabilityService] = None,
    ):
        self.db = db
        self.audit = audit or audit_client
        self.availability = availability or AvailabilityService(db)

    # Storage operations

    def get_booking_or_404(self, booking_id: int, for_update: bool = False) -> Booking:
        query = self.db.query(Booking).filter(Booking.id == booking_id)
        if for_update:
            query = query.with_for_update()
        booking = query.first()
        if not booking:
            raise NotFoundError("Booking", booking_id)
        return booking

    def insert_booking(self, booking: Booking) -> Booking:
        self.db.add(booking)
        self.db.commit()
        self.db.refresh(booking)
        return booking

    def update_booking_status(self, booking_id: int, status: BookingStatus) -> Booking:
        """Transition a booking and commit. Raises StatusTransitionError if not allowed."""
        booking = self.get_booking_or_404(booking_id, for_update=True)
        previous = booking.status
        apply_transition(booking, status)
        self.db.commit()
        self.db.refresh(booking)
        logger.info(f"Booking {booking.id} status {previous} -> {booking.status}")
        return booking

    # Lifecycle operations

    def create_booking(
        self,
        actor: Actor,
        vehicle_id: int,
        pickup_date: date,
        return_date: date,
        pickup_location: str,
        return_location: str,
        today: Optional[date] = None,
    ) -> Booking:
        """Create a PENDING booking if the vehicle is free for the requested dates.

        Raises ValidationError, NotFoundError or BookingConflictError.
        """
        authorize(actor, Capability.CREATE_BOOKING)
        validate_date_range(pickup_date, return_date, today=today)
        pickup_location = _required_text(pickup_location, "pickup_location")
        return_location = _required_text(return_location, "return_location")

        logger.info(
            f"Initiating booking creation for user {actor.email} on vehicle {vehicle_id} "
            f"({pickup_date}..{return_date})"
        )

        # The vehicle row lock serializes concurrent requests across processes on
        # databases that honour FOR UPDATE; the process-local lock covers SQLite.
        with vehicle_booking_locks.hold(vehicle_id):
            try:
                vehicle = self.availability.get_vehicle(vehicle_id, for_update=True)
                conflicts = self.availability.find_conflicts(vehicle_id, pickup_date, return_date)
                if conflicts:
                    logger.warning(
                        f"Booking conflict detected for vehicle {vehicle_id} between "
                        f"{pickup_date} and {return_date}"
                    )
                    raise BookingConflictError(vehicle_id, [b.id for b in conflicts])

                booking = Booking(
                    user_id=actor.user_id,
                    vehicle_id=vehicle.id,
                    pickup_date=pickup_date,
                    return_date=return_date,
                    pickup_location=pickup_location,
                    return_location=return_location,
                    total_amount=compute_total_amount(vehicle.price_per_day, pickup_date, return_date),
                    status=BookingStatus.PENDING.value,
                )
                self.insert_booking(booking)
            except Exception:
                self.db.rollback()
                raise

        logger.info(f"Booking created: id={booking.id} total_amount={booking.total_amount}")
        self.audit.log_activity(audit_events.BOOKING_CREATED, actor.email, f"Booking ID: {booking.id}")
        return booking

    def cancel_booking(self, actor: Actor, booking_id: int) -> Booking:
        """Cancel a PENDING or CONFIRMED booking as its owner or an administrator."""
        logger.info(f"Cancellation requested for booking {booking_id} by {actor.email}")
        booking = self.get_booking_or_404(booking_id, for_update=True)
        try:
            authorize_owner_or(actor, booking.user_id, Capability.MANAGE_ALL_BOOKINGS)
            apply_transition(booking, BookingStatus.CANCELLED)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(booking)

        self.audit.log_activity(audit_events.BOOKING_CANCELLED, actor.email, f"Booking ID: {booking.id}")
        return booking

    def confirm_booking(self, booking: Booking) -> Booking:
        """PENDING -> CONFIRMED after a successful payment. Caller commits."""
        apply_transition(booking, BookingStatus.CONFIRMED)
        logger.info(f"Booking {booking.id} confirmed")
        return booking

    def complete_booking(self, actor: Actor, booking_id: int, today: Optional[date] = None) -> Booking:
        """Administrative completion once the return date has been reached."""
        authorize(actor, Capability.MANAGE_ALL_BOOKINGS)
        booking = self.get_booking_or_404(booking_id, for_update=True)

        today = today or date.today()
        if booking.return_date > today:
            self.db.rollback()
            raise StatusTransitionError(
                booking.status,
                BookingStatus.COMPLETED.value,
                f"return date {booking.return_date.isoformat()} has not been reached",
            )

        try:
            apply_transition(booking, BookingStatus.COMPLETED)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(booking)

        self.audit.log_activity(audit_events.BOOKING_COMPLETED, actor.email, f"Booking ID: {booking.id}")
        return booking

    def complete_due_bookings(self, today: Optional[date] = None) -> int:
        """Complete every CONFIRMED booking whose return date is before ``today``."""
        today = today or date.today()
        due = self.db.query(Booking).filter(
            and_(
                Booking.status == BookingStatus.CONFIRMED.value,
                Booking.return_date < today,
            )
        ).with_for_update().all()

        now = datetime.utcnow()
        for booking in due:
            apply_transition(booking, BookingStatus.COMPLETED, now=now)
        self.db.commit()

        for booking in due:
            self.audit.log_activity(audit_events.BOOKING_COMPLETED, "system", f"Booking ID: {booking.id}")
        if due:
            logger.info(f"Completed {len(due)} bookings with return date before {today}")
        return len(due)

    # Queries

    def get_booking(self, actor: Actor, booking_id: int) -> Booking:
        """Visible to the customer who made it, the vehicle's vendor, and admins."""
        booking = self.get_booking_or_404(booking_id)
        if actor.user_id in (booking.user_id, booking.vehicle.vendor_id):
            return booking
        if can(actor, Capability.VIEW_ALL_RECORDS):
            return booking
        raise ForbiddenError("You do not have access to this booking", details={"booking_id": booking_id})

    def list_user_bookings(self, actor: Actor) -> list[Booking]:
        return self.db.query(Booking).filter(
            Booking.user_id == actor.user_id
        ).order_by(Booking.created_at.desc()).all()

    def list_vendor_bookings(self, actor: Actor) -> list[Booking]:
        authorize(actor, Capability.VIEW_VENDOR_BOOKINGS)
        return self.db.query(Booking).join(Vehicle, Booking.vehicle_id == Vehicle.id).filter(
            Vehicle.vendor_id == actor.user_id
        ).order_by(Booking.pickup_date.desc()).all()

    def list_all_bookings(self, actor: Actor, status: Optional[BookingStatus] = None) -> list[Booking]:
        authorize(actor, Capability.VIEW_ALL_RECORDS)
        query = self.db.query(Booking)
        if status is not None:
            query = query.filter(Booking.status == status.value)
        return query.order_by(Booking.created_at.desc()).all()
