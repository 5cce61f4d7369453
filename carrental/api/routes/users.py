from flask import Blueprint, jsonify

from carrental.api.auth_middleware import current_actor, require_auth
from carrental.api.dependencies import parse_body
from carrental.database import get_db
from carrental.schemas.auth import ProfileUpdateRequest, UserResponse
from carrental.services.auth_service import AuthService


users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.route("/profile", methods=["GET"])
@require_auth
def get_profile():
    with get_db() as db:
        user = AuthService(db).get_user(current_actor().user_id)
        return jsonify(UserResponse.model_validate(user).model_dump(mode="json"))


@users_bp.route("/profile", methods=["PUT"])
@require_auth
def update_profile():
    req = parse_body(ProfileUpdateRequest, "Invalid profile update")

    with get_db() as db:
        user = AuthService(db).update_profile(
            current_actor().user_id,
            name=req.name,
            phone_no=req.phone_no,
            license_no=req.license_no,
            address=req.address,
            password=req.password,
            current_password=req.current_password,
        )
        return jsonify(UserResponse.model_validate(user).model_dump(mode="json"))
