from flask import Blueprint, jsonify

from carrental.api.auth_middleware import current_actor, require_auth, require_capability
from carrental.api.dependencies import parse_body
from carrental.database import get_db
from carrental.schemas.booking import BookingCreateRequest, BookingResponse
from carrental.services.authorization import Capability
from carrental.services.booking_service import BookingService


bookings_bp = Blueprint("bookings", __name__, url_prefix="/api/bookings")


def _dump(booking) -> dict:
    return BookingResponse.model_validate(booking).model_dump(mode="json")


@bookings_bp.route("", methods=["POST"])
@require_capability(Capability.CREATE_BOOKING)
def create_booking():
    req = parse_body(BookingCreateRequest, "Invalid booking request")

    with get_db() as db:
        booking = BookingService(db).create_booking(
            current_actor(),
            vehicle_id=req.vehicle_id,
            pickup_date=req.pickup_date,
            return_date=req.return_date,
            pickup_location=req.pickup_location,
            return_location=req.return_location,
        )
        return jsonify(_dump(booking)), 201


@bookings_bp.route("/user", methods=["GET"])
@require_auth
def list_my_bookings():
    with get_db() as db:
        bookings = BookingService(db).list_user_bookings(current_actor())
        return jsonify([_dump(b) for b in bookings])


@bookings_bp.route("/vendor", methods=["GET"])
@require_capability(Capability.VIEW_VENDOR_BOOKINGS)
def list_vendor_bookings():
    with get_db() as db:
        bookings = BookingService(db).list_vendor_bookings(current_actor())
        return jsonify([_dump(b) for b in bookings])


@bookings_bp.route("/<int:booking_id>", methods=["GET"])
@require_auth
def get_booking(booking_id: int):
    with get_db() as db:
        return jsonify(_dump(BookingService(db).get_booking(current_actor(), booking_id)))


@bookings_bp.route("/<int:booking_id>/cancel", methods=["PUT"])
@require_auth
def cancel_booking(booking_id: int):
    with get_db() as db:
        booking = BookingService(db).cancel_booking(current_actor(), booking_id)
        return jsonify(_dump(booking))


@bookings_bp.route("/<int:booking_id>/complete", methods=["PUT"])
@require_capability(Capability.MANAGE_ALL_BOOKINGS)
def complete_booking(booking_id: int):
    with get_db() as db:
        booking = BookingService(db).complete_booking(current_actor(), booking_id)
        return jsonify(_dump(booking))
