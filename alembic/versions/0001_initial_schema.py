"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates all tables for the studio crew booking service:
inquiries, crew, shooting_events, bookings.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

EVENT_STATUSES = ("scheduled", "in_progress", "completed", "edited", "sent_to_customer", "cancelled")
BOOKING_STATUSES = ("pending", "accepted", "declined", "in_progress", "completed", "uploaded")


def upgrade() -> None:
    # --- inquiries ---
    op.create_table(
        "inquiries",
        sa.Column("inquiry_id", sa.String(36), primary_key=True),
        sa.Column("case_id", sa.String(50), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("subject", sa.String(255), nullable=True),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("status", sa.Enum("unread", "read", "replied", name="inquirystatus"),
                  nullable=False, server_default="unread"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- crew ---
    op.create_table(
        "crew",
        sa.Column("crew_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("role", sa.Enum("super_admin", "crew", name="crewrole"), nullable=False, server_default="crew"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- shooting_events ---
    op.create_table(
        "shooting_events",
        sa.Column("event_id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("time", sa.String(20), nullable=False),
        sa.Column("status", sa.Enum(*EVENT_STATUSES, name="eventstatus"), nullable=False, server_default="scheduled"),
        sa.Column("location", sa.String(500), nullable=False, server_default=""),
        sa.Column("duration", sa.String(100), nullable=False, server_default=""),
        sa.Column("customer_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("customer_email", sa.String(255), nullable=False, server_default=""),
        sa.Column("customer_phone", sa.String(50), nullable=False, server_default=""),
        sa.Column("package_type", sa.String(100), nullable=False, server_default=""),
        sa.Column("notes", sa.Text, nullable=False, server_default=""),
        sa.Column("inquiry_id", sa.String(36), sa.ForeignKey("inquiries.inquiry_id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_shooting_events_date", "shooting_events", ["date"])

    # --- bookings ---
    op.create_table(
        "bookings",
        sa.Column("booking_id", sa.String(36), primary_key=True),
        sa.Column(
            "event_id",
            sa.String(36),
            sa.ForeignKey("shooting_events.event_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("crew_id", sa.String(36), sa.ForeignKey("crew.crew_id"), nullable=False),
        sa.Column("status", sa.Enum(*BOOKING_STATUSES, name="bookingstatus"), nullable=False, server_default="pending"),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("salary", sa.String(50), nullable=False, server_default=""),
        sa.Column("payment_status", sa.Enum("pending", "completed", name="paymentstatus"),
                  nullable=False, server_default="pending"),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("event_id", "crew_id", name="uq_bookings_event_crew"),
    )
    op.create_index("ix_bookings_event_id", "bookings", ["event_id"])


def downgrade() -> None:
    op.drop_index("ix_bookings_event_id", table_name="bookings")
    op.drop_table("bookings")
    op.drop_index("ix_shooting_events_date", table_name="shooting_events")
    op.drop_table("shooting_events")
    op.drop_table("crew")
    op.drop_table("inquiries")
    for enum_name in ("bookingstatus", "paymentstatus", "eventstatus", "crewrole", "inquirystatus"):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
