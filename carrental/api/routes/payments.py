from flask import Blueprint, jsonify

from carrental.api.auth_middleware import current_actor, require_auth, require_capability
from carrental.api.dependencies import parse_body
from carrental.database import get_db
from carrental.schemas.payment import PaymentCreateRequest, PaymentResponse, PaymentStatusUpdateRequest
from carrental.services.authorization import Capability
from carrental.services.payment_service import PaymentService


payments_bp = Blueprint("payments", __name__, url_prefix="/api/payments")


def _dump(payment) -> dict:
    return PaymentResponse.model_validate(payment).model_dump(mode="json")


@payments_bp.route("", methods=["POST"])
@require_capability(Capability.MAKE_PAYMENT)
def create_payment():
    req = parse_body(PaymentCreateRequest, "Invalid payment request")

    with get_db() as db:
        payment = PaymentService(db).create_payment(
            current_actor(),
            booking_id=req.booking_id,
            payment_method=req.payment_method,
            transaction_id=req.transaction_id,
        )
        return jsonify(_dump(payment)), 201


@payments_bp.route("/booking/<int:booking_id>", methods=["GET"])
@require_auth
def get_payment_for_booking(booking_id: int):
    with get_db() as db:
        return jsonify(_dump(PaymentService(db).get_payment_by_booking(current_actor(), booking_id)))


@payments_bp.route("/<int:payment_id>/status", methods=["PUT"])
@require_capability(Capability.UPDATE_PAYMENT_STATUS)
def update_payment_status(payment_id: int):
    req = parse_body(PaymentStatusUpdateRequest, "Invalid payment status")

    with get_db() as db:
        payment = PaymentService(db).update_payment_status(current_actor(), payment_id, req.status)
        return jsonify(_dump(payment))
