"""Administrator listings across all records, account approval and contact messages."""

from flask import Blueprint, jsonify

from carrental.api.auth_middleware import current_actor, require_capability
from carrental.api.dependencies import parse_enum_arg
from carrental.database import get_db
from carrental.models.booking import BookingStatus
from carrental.models.contact_message import ContactMessageStatus
from carrental.models.review import ReviewStatus
from carrental.models.user import UserRole
from carrental.schemas.auth import UserResponse
from carrental.schemas.booking import BookingResponse
from carrental.schemas.contact import ContactMessageResponse
from carrental.schemas.payment import PaymentResponse
from carrental.schemas.review import ReviewResponse
from carrental.schemas.vehicle import VehicleResponse
from carrental.services.auth_service import AuthService
from carrental.services.authorization import Capability
from carrental.services.booking_service import BookingService
from carrental.services.contact_service import ContactService
from carrental.services.payment_service import PaymentService
from carrental.services.review_service import ReviewService
from carrental.services.vehicle_service import VehicleService


admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


@admin_bp.route("/users", methods=["GET"])
@require_capability(Capability.VIEW_ALL_RECORDS)
def list_users():
    role = parse_enum_arg(UserRole, "role")
    with get_db() as db:
        users = AuthService(db).list_users(current_actor(), role=role)
        return jsonify([UserResponse.model_validate(u).model_dump(mode="json") for u in users])


@admin_bp.route("/users/pending", methods=["GET"])
@require_capability(Capability.MANAGE_USERS)
def list_pending_users():
    with get_db() as db:
        users = AuthService(db).list_pending_users(current_actor())
        return jsonify([UserResponse.model_validate(u).model_dump(mode="json") for u in users])


@admin_bp.route("/users/<int:user_id>/approve", methods=["PUT"])
@require_capability(Capability.MANAGE_USERS)
def approve_user(user_id: int):
    with get_db() as db:
        user = AuthService(db).approve_user(current_actor(), user_id)
        return jsonify(UserResponse.model_validate(user).model_dump(mode="json"))


@admin_bp.route("/users/<int:user_id>/reject", methods=["PUT"])
@require_capability(Capability.MANAGE_USERS)
def reject_user(user_id: int):
    with get_db() as db:
        user = AuthService(db).reject_user(current_actor(), user_id)
        return jsonify(UserResponse.model_validate(user).model_dump(mode="json"))


@admin_bp.route("/users/<int:user_id>", methods=["DELETE"])
@require_capability(Capability.MANAGE_USERS)
def delete_user(user_id: int):
    with get_db() as db:
        AuthService(db).delete_user(current_actor(), user_id)
        return "", 204


@admin_bp.route("/bookings", methods=["GET"])
@require_capability(Capability.VIEW_ALL_RECORDS)
def list_bookings():
    status = parse_enum_arg(BookingStatus, "status")
    with get_db() as db:
        bookings = BookingService(db).list_all_bookings(current_actor(), status=status)
        return jsonify([BookingResponse.model_validate(b).model_dump(mode="json") for b in bookings])


@admin_bp.route("/payments", methods=["GET"])
@require_capability(Capability.VIEW_ALL_RECORDS)
def list_payments():
    with get_db() as db:
        payments = PaymentService(db).list_all_payments(current_actor())
        return jsonify([PaymentResponse.model_validate(p).model_dump(mode="json") for p in payments])


@admin_bp.route("/vehicles", methods=["GET"])
@require_capability(Capability.VIEW_ALL_RECORDS)
def list_vehicles():
    with get_db() as db:
        vehicles = VehicleService(db).list_all_vehicles(current_actor())
        return jsonify([VehicleResponse.model_validate(v).model_dump(mode="json") for v in vehicles])


@admin_bp.route("/reviews", methods=["GET"])
@require_capability(Capability.MODERATE_REVIEWS)
def list_reviews():
    status = parse_enum_arg(ReviewStatus, "status")
    with get_db() as db:
        reviews = ReviewService(db).list_reviews(current_actor(), status=status)
        return jsonify([ReviewResponse.model_validate(r).model_dump(mode="json") for r in reviews])


@admin_bp.route("/contact-messages", methods=["GET"])
@require_capability(Capability.HANDLE_CONTACT_MESSAGES)
def list_contact_messages():
    status = parse_enum_arg(ContactMessageStatus, "status")
    with get_db() as db:
        messages = ContactService(db).list_messages(current_actor(), status=status)
        return jsonify([ContactMessageResponse.model_validate(m).model_dump(mode="json") for m in messages])


@admin_bp.route("/contact-messages/<int:message_id>/replied", methods=["PUT"])
@require_capability(Capability.HANDLE_CONTACT_MESSAGES)
def mark_contact_message_replied(message_id: int):
    with get_db() as db:
        message = ContactService(db).mark_replied(current_actor(), message_id)
        return jsonify(ContactMessageResponse.model_validate(message).model_dump(mode="json"))
