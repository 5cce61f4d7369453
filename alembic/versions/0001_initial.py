"""Create car rental tables.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("updated_at", sa.DateTime, nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("phone_no", sa.String(30), nullable=True, unique=True),
        sa.Column("license_no", sa.String(50), nullable=True, unique=True),
        sa.Column("address", sa.String(255), nullable=True),
        sa.Column("role", sa.String(20), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "vehicles",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("vendor_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("make", sa.String(80), nullable=False),
        sa.Column("model", sa.String(80), nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("color", sa.String(40), nullable=True),
        sa.Column("license_plate", sa.String(20), nullable=False, unique=True),
        sa.Column("vin", sa.String(32), nullable=False, unique=True),
        sa.Column("price_per_day", sa.Float, nullable=False),
        sa.Column("fuel_type", sa.String(30), nullable=True),
        sa.Column("transmission", sa.String(30), nullable=True),
        sa.Column("seating_capacity", sa.Integer, nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("image_url", sa.String(500), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_vehicles_vendor_id", "vehicles", ["vendor_id"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("vehicle_id", sa.Integer, sa.ForeignKey("vehicles.id"), nullable=False),
        sa.Column("pickup_date", sa.Date, nullable=False),
        sa.Column("return_date", sa.Date, nullable=False),
        sa.Column("pickup_location", sa.String(255), nullable=False),
        sa.Column("return_location", sa.String(255), nullable=False),
        sa.Column("total_amount", sa.Float, nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("cancelled_at", sa.DateTime, nullable=True),
        sa.Column("completed_at", sa.DateTime, nullable=True),
        *_timestamps(),
        sa.CheckConstraint("return_date > pickup_date", name="ck_booking_dates_ordered"),
    )
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"])
    op.create_index("ix_bookings_vehicle_status", "bookings", ["vehicle_id", "status"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("booking_id", sa.Integer, sa.ForeignKey("bookings.id"), nullable=False, unique=True),
        sa.Column("amount", sa.Float, nullable=False),
        sa.Column("payment_method", sa.String(40), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("transaction_id", sa.String(64), nullable=True, unique=True),
        sa.Column("payment_date", sa.DateTime, nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "reviews",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("vehicle_id", sa.Integer, sa.ForeignKey("vehicles.id"), nullable=False),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("comment", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "vehicle_id", name="uq_review_user_vehicle"),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_review_rating_range"),
    )
    op.create_index("ix_reviews_user_id", "reviews", ["user_id"])
    op.create_index("ix_reviews_vehicle_id", "reviews", ["vehicle_id"])

    op.create_table(
        "complaints",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("booking_id", sa.Integer, sa.ForeignKey("bookings.id"), nullable=True),
        sa.Column("subject", sa.String(160), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("admin_response", sa.Text, nullable=True),
        sa.Column("resolved_at", sa.DateTime, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_complaints_user_id", "complaints", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_complaints_user_id", table_name="complaints")
    op.drop_table("complaints")
    op.drop_index("ix_reviews_vehicle_id", table_name="reviews")
    op.drop_index("ix_reviews_user_id", table_name="reviews")
    op.drop_table("reviews")
    op.drop_table("payments")
    op.drop_index("ix_bookings_vehicle_status", table_name="bookings")
    op.drop_index("ix_bookings_user_id", table_name="bookings")
    op.drop_table("bookings")
    op.drop_index("ix_vehicles_vendor_id", table_name="vehicles")
    op.drop_table("vehicles")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
