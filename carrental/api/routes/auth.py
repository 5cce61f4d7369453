from flask import Blueprint, jsonify

from carrental.api.auth_middleware import current_actor, require_auth
from carrental.api.dependencies import parse_body
from carrental.database import get_db
from carrental.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from carrental.services.auth_service import AuthService


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.route("/register", methods=["POST"])
def register():
    req = parse_body(RegisterRequest, "Invalid registration request")

    with get_db() as db:
        user = AuthService(db).register(
            name=req.name,
            email=req.email,
            password=req.password,
            role=req.role,
            phone_no=req.phone_no,
            license_no=req.license_no,
            address=req.address,
        )
        return jsonify(UserResponse.model_validate(user).model_dump(mode="json")), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    req = parse_body(LoginRequest, "Invalid login request")

    with get_db() as db:
        user, token = AuthService(db).login(req.email, req.password)
        response = TokenResponse(token=token, user=UserResponse.model_validate(user))
        return jsonify(response.model_dump(mode="json"))


@auth_bp.route("/profile", methods=["DELETE"])
@require_auth
def delete_profile():
    with get_db() as db:
        AuthService(db).delete_own_account(current_actor())
        return "", 204
