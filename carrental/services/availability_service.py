from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from sqlalchemy import and_
from sqlalchemy.orm import Session

from carrental.config import settings
from carrental.models.booking import ACTIVE_BOOKING_STATUSES, Booking
from carrental.models.vehicle import Vehicle
from carrental.utils.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def ranges_overlap(start_a: date, end_a: date, start_b: date, end_b: date, half_open: bool = False) -> bool:
    """Return True if [start_a, end_a] and [start_b, end_b] share at least one day.

    With ``half_open`` the end dates are exclusive, so a range ending on the
    day another starts does not overlap it.
    """
    if half_open:
        return start_a < end_b and end_a > start_b
    return start_a <= end_b and end_a >= start_b


def validate_date_range(pickup_date: Optional[date], return_date: Optional[date], today: Optional[date] = None) -> None:
    if pickup_date is None:
        raise ValidationError("Pickup date is required", field="pickup_date")
    if return_date is None:
        raise ValidationError("Return date is required", field="return_date")
    if pickup_date >= return_date:
        raise ValidationError(
            "Return date must be after pickup date",
            field="return_date",
            details={"pickup_date": pickup_date.isoformat(), "return_date": return_date.isoformat()},
        )

    today = today or date.today()
    if pickup_date < today:
        raise ValidationError(
            "Pickup date cannot be in the past",
            field="pickup_date",
            details={"pickup_date": pickup_date.isoformat(), "today": today.isoformat()},
        )


class AvailabilityService:
    def __init__(self, db: Session, same_day_turnover: Optional[bool] = None):
        self.db = db
        if same_day_turnover is None:
            same_day_turnover = settings.booking_same_day_turnover
        self.same_day_turnover = same_day_turnover

    def get_vehicle(self, vehicle_id: int, for_update: bool = False) -> Vehicle:
        query = self.db.query(Vehicle).filter(Vehicle.id == vehicle_id)
        if for_update:
            query = query.with_for_update()
        vehicle = query.first()
        if not vehicle:
            raise NotFoundError("Vehicle", vehicle_id)
        return vehicle

    def list_active_bookings_for_vehicle(self, vehicle_id: int) -> list[Booking]:
        statuses = [s.value for s in ACTIVE_BOOKING_STATUSES]
        return self.db.query(Booking).filter(
            and_(Booking.vehicle_id == vehicle_id, Booking.status.in_(statuses))
        ).order_by(Booking.pickup_date.asc()).all()

    def find_conflicts(
        self,
        vehicle_id: int,
        pickup_date: date,
        return_date: date,
        exclude_booking_id: Optional[int] = None,
    ) -> list[Booking]:
        conflicts = []
        for booking in self.list_active_bookings_for_vehicle(vehicle_id):
            if exclude_booking_id is not None and booking.id == exclude_booking_id:
                continue
            if ranges_overlap(
                booking.pickup_date,
                booking.return_date,
                pickup_date,
                return_date,
                half_open=self.same_day_turnover,
            ):
                conflicts.append(booking)
        return conflicts

    def has_conflict(
        self,
        vehicle_id: int,
        pickup_date: date,
        return_date: date,
        today: Optional[date] = None,
    ) -> bool:
        """True if an active booking of the vehicle overlaps the requested range.

        Raises ValidationError for a malformed range (before any query) and
        NotFoundError if the vehicle does not exist.
        """
        validate_date_range(pickup_date, return_date, today=today)
        self.get_vehicle(vehicle_id)

        conflicts = self.find_conflicts(vehicle_id, pickup_date, return_date)
        if conflicts:
            logger.info(
                f"Vehicle {vehicle_id} unavailable {pickup_date}..{return_date}: "
                f"overlaps bookings {[b.id for b in conflicts]}"
            )
        return bool(conflicts)
