from flask import Blueprint, jsonify

from carrental.api.auth_middleware import current_actor, require_auth, require_capability
from carrental.api.dependencies import parse_body, parse_enum_arg
from carrental.database import get_db
from carrental.models.complaint import ComplaintStatus
from carrental.schemas.complaint import ComplaintCreateRequest, ComplaintResolveRequest, ComplaintResponse
from carrental.services.authorization import Capability
from carrental.services.complaint_service import ComplaintService


complaints_bp = Blueprint("complaints", __name__, url_prefix="/api/complaints")


def _dump(complaint) -> dict:
    return ComplaintResponse.model_validate(complaint).model_dump(mode="json")


@complaints_bp.route("", methods=["POST"])
@require_capability(Capability.FILE_COMPLAINT)
def create_complaint():
    req = parse_body(ComplaintCreateRequest, "Invalid complaint")

    with get_db() as db:
        complaint = ComplaintService(db).create_complaint(
            current_actor(),
            subject=req.subject,
            description=req.description,
            booking_id=req.booking_id,
        )
        return jsonify(_dump(complaint)), 201


@complaints_bp.route("/user", methods=["GET"])
@require_auth
def list_my_complaints():
    with get_db() as db:
        return jsonify([_dump(c) for c in ComplaintService(db).list_user_complaints(current_actor())])


@complaints_bp.route("", methods=["GET"])
@require_capability(Capability.RESOLVE_COMPLAINTS)
def list_complaints():
    status = parse_enum_arg(ComplaintStatus, "status")
    with get_db() as db:
        complaints = ComplaintService(db).list_all_complaints(current_actor(), status=status)
        return jsonify([_dump(c) for c in complaints])


@complaints_bp.route("/<int:complaint_id>/resolve", methods=["PUT"])
@require_capability(Capability.RESOLVE_COMPLAINTS)
def resolve_complaint(complaint_id: int):
    req = parse_body(ComplaintResolveRequest, "Invalid complaint resolution")

    with get_db() as db:
        complaint = ComplaintService(db).resolve_complaint(current_actor(), complaint_id, req.admin_response)
        return jsonify(_dump(complaint))
