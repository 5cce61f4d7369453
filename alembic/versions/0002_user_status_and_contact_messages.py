"""Add user approval status and contact_messages.

Revision ID: 0002_user_status_and_contact_messages
Revises: 0001_initial
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0002_user_status_and_contact_messages"
down_revision = "0001_initial"
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Accounts created before approval existed stay usable
    op.add_column(
        "users",
        sa.Column("status", sa.String(20), nullable=False, server_default="APPROVED"),
    )
    op.create_index("ix_users_status", "users", ["status"])

    op.create_table(
        "contact_messages",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("message", sa.String(1000), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("replied_at", sa.DateTime, nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
    )
    op.create_index("ix_contact_messages_status", "contact_messages", ["status"])


def downgrade() -> None:
    op.drop_index("ix_contact_messages_status", table_name="contact_messages")
    op.drop_table("contact_messages")
    op.drop_index("ix_users_status", table_name="users")
    op.drop_column("users", "status")
