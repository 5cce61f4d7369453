"""
Audit-log service.

A small standalone Flask app with its own database. The car rental API posts
events here; nothing else writes to it.
"""

import logging
import uuid

from flask import Blueprint, Flask, jsonify, request
from pydantic import ValidationError as PydanticValidationError

from auditlog import database
from auditlog.config import settings
from auditlog.schemas import AuditLogCreate, AuditLogListQuery, AuditLogResponse
from auditlog.service import AuditLogService

logger = logging.getLogger(__name__)

audits_bp = Blueprint("audits", __name__, url_prefix="/api/audits")


def _dump(entry) -> dict:
    return AuditLogResponse.model_validate(entry).model_dump(mode="json", by_alias=True)


@audits_bp.route("", methods=["POST"])
def create_audit():
    req = AuditLogCreate.model_validate(request.get_json(silent=True) or {})
    with database.get_db() as db:
        entry = AuditLogService(db).record(req.action, req.user_email, req.details)
        logger.info(f"Audit {entry.action} recorded for {entry.user_email}")
        return jsonify(_dump(entry)), 201


@audits_bp.route("", methods=["GET"])
def list_audits():
    """Events newest first. All of them unless paged with ?limit=&offset=."""
    query = AuditLogListQuery.model_validate(request.args.to_dict())
    with database.get_db() as db:
        entries = AuditLogService(db).list_recent(limit=query.limit, offset=query.offset)
        return jsonify([_dump(e) for e in entries])


def create_app() -> Flask:
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    app = Flask(__name__)
    app.json.sort_keys = False
    database.init_db()
    app.register_blueprint(audits_bp)

    @app.errorhandler(PydanticValidationError)
    def handle_validation_error(e: PydanticValidationError):
        logger.warning(f"Rejected audit request: {e.error_count()} error(s)")
        return jsonify({
            "error": {
                "code": "INVALID_ARGUMENT",
                "message": "Invalid audit request",
                "details": {"errors": e.errors(include_url=False, include_context=False)},
            },
            "request_id": str(uuid.uuid4()),
        }), 400

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "healthy"})

    return app


if __name__ == "__main__":
    create_app().run(host="127.0.0.1", port=8080)
