from flask import Blueprint, jsonify

from carrental.api.dependencies import parse_body
from carrental.database import get_db
from carrental.schemas.contact import ContactMessageResponse, ContactRequest
from carrental.services.contact_service import ContactService


contact_bp = Blueprint("contact", __name__, url_prefix="/api/contact")


@contact_bp.route("", methods=["POST"])
def submit_contact_form():
    req = parse_body(ContactRequest, "Invalid contact request")

    with get_db() as db:
        message = ContactService(db).submit(req.name, req.email, req.message)
        return jsonify(ContactMessageResponse.model_validate(message).model_dump(mode="json")), 201
