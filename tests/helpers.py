"""Shared fixtures for the test modules.

Import this before anything from ``carrental``: settings are read at import
time, so the environment defaults below must be in place first.
"""

import itertools
import os
import sys
from datetime import date

# Ensure package imports work when running a test file as a script from the repo root.
sys.path.append(".")

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("AUDIT_ENABLED", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("BOOKING_COMPLETION_JOB_ENABLED", "false")

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

PASSWORD = "secret123"

_seq = itertools.count(1)


def setup_in_memory_db():
    """Patch carrental.database to use a fresh in-memory SQLite DB."""
    import carrental.database as database
    from carrental import models  # noqa: F401  # register tables on Base.metadata
    from carrental.config import settings
    from carrental.services.audit_client import audit_client

    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    database.engine = engine
    database.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    database.Base.metadata.create_all(bind=engine)

    settings.bcrypt_rounds = 4
    audit_client.enabled = False
    return database.SessionLocal


class RecordingAuditClient:
    """Stands in for AuditClient in service tests; keeps events in memory."""

    def __init__(self):
        self.events = []

    def log_activity(self, action, user_email, details):
        self.events.append((action, user_email, details))
        return None

    @property
    def actions(self):
        return [e[0] for e in self.events]


def make_user(db, role="CUSTOMER", email=None, name=None):
    from carrental.models.user import User
    from carrental.services.auth_service import hash_password

    n = next(_seq)
    user = User(
        name=name or f"{role.title()} {n}",
        email=email or f"{role.lower()}{n}@example.com",
        password_hash=hash_password(PASSWORD),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_vehicle(db, vendor, price_per_day=50.0, status="AVAILABLE"):
    from carrental.models.vehicle import Vehicle

    n = next(_seq)
    vehicle = Vehicle(
        vendor_id=vendor.id,
        make="Toyota",
        model="Corolla",
        year=2022,
        license_plate=f"TEST-{n:04d}",
        vin=f"VIN{n:014d}",
        price_per_day=price_per_day,
        status=status,
    )
    db.add(vehicle)
    db.commit()
    db.refresh(vehicle)
    return vehicle


def make_booking(db, customer, vehicle, pickup: date, ret: date, status="PENDING"):
    """Insert a booking directly, bypassing the availability check."""
    from carrental.models.booking import Booking

    booking = Booking(
        user_id=customer.id,
        vehicle_id=vehicle.id,
        pickup_date=pickup,
        return_date=ret,
        pickup_location="Airport",
        return_location="Airport",
        total_amount=vehicle.price_per_day * (ret - pickup).days,
        status=status,
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    return booking


def actor_for(user):
    from carrental.services.authorization import Actor

    return Actor.from_user(user)


def auth_header(user) -> dict:
    from carrental.services.auth_service import create_access_token

    return {"Authorization": f"Bearer {create_access_token(user)}"}
