"""
Authentication middleware.

Validates the ``Authorization: Bearer <jwt>`` header and attaches the caller
to the request context as ``g.actor``.
"""

import logging
from functools import wraps

from flask import g, request

from carrental.database import get_db_session
from carrental.models.user import User, UserStatus
from carrental.services.auth_service import decode_access_token
from carrental.services.authorization import Actor, Capability, authorize
from carrental.utils.exceptions import AuthenticationError, ForbiddenError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def _token_from_header() -> str | None:
    header = request.headers.get("Authorization")
    if not header:
        return None
    if not header.startswith(BEARER_PREFIX):
        raise AuthenticationError("Authorization header must use the Bearer scheme")
    token = header[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthenticationError("Missing bearer token")
    return token


def init_auth_middleware(app):
    """
    Resolve the bearer token, if any, before every request.

    A request without a token proceeds anonymously and routes decide whether
    that is allowed. A request with a bad or expired token is rejected.
    """

    @app.teardown_appcontext
    def shutdown_session(exception=None):
        db = getattr(g, "_auth_session", None)
        if db is not None:
            db.close()

    @app.before_request
    def authenticate_request():
        g.actor = None
        g.user = None
        g._auth_session = None

        if request.method == "OPTIONS":
            return None

        token = _token_from_header()
        if token is None:
            return None

        claims = decode_access_token(token)

        db = get_db_session()
        g._auth_session = db
        user = db.query(User).filter(User.id == claims["user_id"]).first()
        if not user or user.email != claims["sub"]:
            logger.debug(f"Token for unknown user {claims.get('sub')}")
            raise AuthenticationError("Invalid or expired token")

        if user.status == UserStatus.REJECTED.value:
            raise ForbiddenError("This account has been rejected by an administrator")

        g.user = user
        g.actor = Actor.from_user(user)
        return None


def current_actor() -> Actor:
    """Return the authenticated actor or raise AuthenticationError."""
    actor = getattr(g, "actor", None)
    if actor is None:
        raise AuthenticationError()
    return actor


def require_auth(f):
    """
    Decorator to require an authenticated caller.

    Usage:
        @bp.route("/protected")
        @require_auth
        def protected_route():
            actor = g.actor  # Guaranteed to exist
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        current_actor()
        return f(*args, **kwargs)
    return decorated_function


def require_capability(capability: Capability):
    """Decorator to require a role capability for a route."""

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            authorize(current_actor(), capability)
            return f(*args, **kwargs)
        return decorated_function

    return decorator
