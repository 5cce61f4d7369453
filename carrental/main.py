import atexit
import logging

import click
from flask import Flask, jsonify, request

from carrental import database
from carrental.api.auth_middleware import init_auth_middleware
from carrental.api.errors import register_error_handlers
from carrental.api.routes.admin import admin_bp
from carrental.api.routes.auth import auth_bp
from carrental.api.routes.bookings import bookings_bp
from carrental.api.routes.complaints import complaints_bp
from carrental.api.routes.contact import contact_bp
from carrental.api.routes.payments import payments_bp
from carrental.api.routes.reviews import reviews_bp
from carrental.api.routes.users import users_bp
from carrental.api.routes.vehicles import vehicles_bp
from carrental.config import settings
from carrental.models.user import User, UserRole, UserStatus

logger = logging.getLogger(__name__)

BLUEPRINTS = (
    auth_bp,
    users_bp,
    vehicles_bp,
    bookings_bp,
    payments_bp,
    reviews_bp,
    complaints_bp,
    contact_bp,
    admin_bp,
)


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(testing: bool = False, start_jobs: bool = None) -> Flask:
    configure_logging()

    app = Flask(__name__)
    app.config["TESTING"] = testing
    app.json.sort_keys = False

    database.init_db()

    init_auth_middleware(app)
    register_error_handlers(app)
    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint)

    @app.after_request
    def add_cors_headers(resp):
        origin = request.headers.get("Origin")
        if origin and origin == settings.frontend_url:
            resp.headers["Access-Control-Allow-Origin"] = origin
            resp.headers["Vary"] = "Origin"
            resp.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
            resp.headers["Access-Control-Allow-Methods"] = "GET, POST, PUT, DELETE, OPTIONS"
        resp.headers["X-Content-Type-Options"] = "nosniff"
        return resp

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "healthy"})

    register_cli(app)

    if start_jobs is None:
        start_jobs = not testing
    if start_jobs:
        from carrental.scheduler import start_scheduler

        scheduler = start_scheduler()
        atexit.register(lambda: scheduler.shutdown(wait=False))

    logger.info("Car rental API started")
    return app


def register_cli(app: Flask) -> None:
    @app.cli.command("make-admin")
    @click.argument("email")
    def make_admin(email):
        """Promote an existing user to an approved ADMIN by email."""
        with database.get_db() as db:
            user = db.query(User).filter(User.email == email.strip().lower()).first()
            if not user:
                click.echo("User not found")
                return
            user.role = UserRole.ADMIN.value
            user.status = UserStatus.APPROVED.value
            db.commit()
            click.echo(f"{user.email} promoted to ADMIN")


if __name__ == "__main__":
    create_app().run(host="127.0.0.1", port=5000)
