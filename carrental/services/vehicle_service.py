from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from carrental.models.booking import ACTIVE_BOOKING_STATUSES, Booking
from carrental.models.vehicle import Vehicle, VehicleStatus
from carrental.services.authorization import Actor, Capability, authorize
from carrental.utils.exceptions import ConflictError, ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)


# Fields a vendor may set on create/update
EDITABLE_FIELDS = (
    "make",
    "model",
    "year",
    "color",
    "license_plate",
    "vin",
    "price_per_day",
    "fuel_type",
    "transmission",
    "seating_capacity",
    "description",
    "image_url",
)


class VehicleService:
    def __init__(self, db: Session):
        self.db = db

    def get_vehicle(self, vehicle_id: int) -> Vehicle:
        vehicle = self.db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
        if not vehicle:
            raise NotFoundError("Vehicle", vehicle_id)
        return vehicle

    def _get_owned_vehicle(self, actor: Actor, vehicle_id: int) -> Vehicle:
        authorize(actor, Capability.MANAGE_OWN_VEHICLES)
        vehicle = self.get_vehicle(vehicle_id)
        if vehicle.vendor_id != actor.user_id:
            raise ForbiddenError("You can only manage your own vehicles", details={"vehicle_id": vehicle_id})
        return vehicle

    def _commit_unique(self, message: str) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(message)

    def create_vehicle(self, actor: Actor, data: dict) -> Vehicle:
        authorize(actor, Capability.MANAGE_OWN_VEHICLES)
        vehicle = Vehicle(
            vendor_id=actor.user_id,
            status=VehicleStatus.AVAILABLE.value,
            **{k: data.get(k) for k in EDITABLE_FIELDS},
        )
        self.db.add(vehicle)
        self._commit_unique("A vehicle with this license plate or VIN already exists")
        self.db.refresh(vehicle)
        logger.info(f"Vendor {actor.user_id} added vehicle {vehicle.id} ({vehicle.license_plate})")
        return vehicle

    def update_vehicle(self, actor: Actor, vehicle_id: int, data: dict) -> Vehicle:
        vehicle = self._get_owned_vehicle(actor, vehicle_id)
        for key in EDITABLE_FIELDS:
            if key in data and data[key] is not None:
                setattr(vehicle, key, data[key])
        self._commit_unique("A vehicle with this license plate or VIN already exists")
        self.db.refresh(vehicle)
        return vehicle

    def update_status(self, actor: Actor, vehicle_id: int, status: VehicleStatus) -> Vehicle:
        vehicle = self._get_owned_vehicle(actor, vehicle_id)
        vehicle.status = status.value
        self.db.commit()
        self.db.refresh(vehicle)
        logger.info(f"Vehicle {vehicle.id} status set to {vehicle.status}")
        return vehicle

    def delete_vehicle(self, actor: Actor, vehicle_id: int) -> None:
        vehicle = self._get_owned_vehicle(actor, vehicle_id)

        has_bookings = self.db.query(Booking).filter(Booking.vehicle_id == vehicle.id).first() is not None
        active = self.db.query(Booking).filter(
            and_(
                Booking.vehicle_id == vehicle.id,
                Booking.status.in_([s.value for s in ACTIVE_BOOKING_STATUSES]),
            )
        ).count()
        if active:
            raise ConflictError(
                "Vehicle has pending or confirmed bookings",
                details={"vehicle_id": vehicle.id, "active_bookings": active},
            )

        if has_bookings:
            # Booking history references the vehicle; retire it instead of deleting.
            vehicle.status = VehicleStatus.UNAVAILABLE.value
            logger.info(f"Vehicle {vehicle.id} has booking history; marked UNAVAILABLE instead of deleting")
        else:
            self.db.delete(vehicle)
        self.db.commit()

    def list_vehicles(self, status: Optional[VehicleStatus] = None) -> list[Vehicle]:
        query = self.db.query(Vehicle)
        if status is not None:
            query = query.filter(Vehicle.status == status.value)
        return query.order_by(Vehicle.created_at.desc()).all()

    def list_vendor_vehicles(self, actor: Actor) -> list[Vehicle]:
        authorize(actor, Capability.MANAGE_OWN_VEHICLES)
        return self.db.query(Vehicle).filter(
            Vehicle.vendor_id == actor.user_id
        ).order_by(Vehicle.created_at.desc()).all()

    def list_all_vehicles(self, actor: Actor) -> list[Vehicle]:
        authorize(actor, Capability.VIEW_ALL_RECORDS)
        return self.list_vehicles()

