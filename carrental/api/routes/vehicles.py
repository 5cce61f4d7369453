from flask import Blueprint, jsonify

from carrental.api.auth_middleware import current_actor, require_capability
from carrental.api.dependencies import parse_body, parse_date_arg, parse_enum_arg
from carrental.database import get_db
from carrental.models.vehicle import VehicleStatus
from carrental.schemas.vehicle import (
    AvailabilityResponse,
    VehicleCreateRequest,
    VehicleResponse,
    VehicleStatusUpdateRequest,
    VehicleUpdateRequest,
)
from carrental.services.authorization import Capability
from carrental.services.availability_service import AvailabilityService
from carrental.services.vehicle_service import VehicleService


vehicles_bp = Blueprint("vehicles", __name__, url_prefix="/api/vehicles")


def _dump(vehicle) -> dict:
    return VehicleResponse.model_validate(vehicle).model_dump(mode="json")


@vehicles_bp.route("", methods=["GET"])
def list_vehicles():
    """Public catalogue, optionally filtered by ?status=."""
    status = parse_enum_arg(VehicleStatus, "status")
    with get_db() as db:
        vehicles = VehicleService(db).list_vehicles(status=status)
        return jsonify([_dump(v) for v in vehicles])


@vehicles_bp.route("/vendor", methods=["GET"])
@require_capability(Capability.MANAGE_OWN_VEHICLES)
def list_vendor_vehicles():
    with get_db() as db:
        vehicles = VehicleService(db).list_vendor_vehicles(current_actor())
        return jsonify([_dump(v) for v in vehicles])


@vehicles_bp.route("/<int:vehicle_id>", methods=["GET"])
def get_vehicle(vehicle_id: int):
    with get_db() as db:
        return jsonify(_dump(VehicleService(db).get_vehicle(vehicle_id)))


@vehicles_bp.route("/<int:vehicle_id>/availability", methods=["GET"])
def check_availability(vehicle_id: int):
    pickup_date = parse_date_arg("pickup_date")
    return_date = parse_date_arg("return_date")

    with get_db() as db:
        conflict = AvailabilityService(db).has_conflict(vehicle_id, pickup_date, return_date)
        response = AvailabilityResponse(
            vehicle_id=vehicle_id,
            pickup_date=pickup_date,
            return_date=return_date,
            available=not conflict,
        )
        return jsonify(response.model_dump(mode="json"))


@vehicles_bp.route("", methods=["POST"])
@require_capability(Capability.MANAGE_OWN_VEHICLES)
def create_vehicle():
    req = parse_body(VehicleCreateRequest, "Invalid vehicle")

    with get_db() as db:
        vehicle = VehicleService(db).create_vehicle(current_actor(), req.model_dump())
        return jsonify(_dump(vehicle)), 201


@vehicles_bp.route("/<int:vehicle_id>", methods=["PUT"])
@require_capability(Capability.MANAGE_OWN_VEHICLES)
def update_vehicle(vehicle_id: int):
    req = parse_body(VehicleUpdateRequest, "Invalid vehicle update")

    with get_db() as db:
        vehicle = VehicleService(db).update_vehicle(current_actor(), vehicle_id, req.model_dump(exclude_unset=True))
        return jsonify(_dump(vehicle))


@vehicles_bp.route("/<int:vehicle_id>/status", methods=["PUT"])
@require_capability(Capability.MANAGE_OWN_VEHICLES)
def update_vehicle_status(vehicle_id: int):
    req = parse_body(VehicleStatusUpdateRequest, "Invalid vehicle status")

    with get_db() as db:
        vehicle = VehicleService(db).update_status(current_actor(), vehicle_id, req.status)
        return jsonify(_dump(vehicle))


@vehicles_bp.route("/<int:vehicle_id>", methods=["DELETE"])
@require_capability(Capability.MANAGE_OWN_VEHICLES)
def delete_vehicle(vehicle_id: int):
    with get_db() as db:
        VehicleService(db).delete_vehicle(current_actor(), vehicle_id)
        return "", 204
