"""Initial schema: bookings, booking sessions, menu packages and menu items.

Revision ID: 001
Revises: None
Create Date: 2026-10-16
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Bookings table
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("booking_number", sa.String(32), nullable=False),
        sa.Column("client_name", sa.String(255), nullable=False),
        sa.Column("contact_number", sa.String(32), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("event_type", sa.String(100), nullable=False),
        sa.Column("event_date", sa.Date(), nullable=False),
        sa.Column("event_end_date", sa.Date(), nullable=True),
        sa.Column("event_duration", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("hall", sa.String(255), nullable=True),
        sa.Column("event_start_time", sa.String(5), nullable=True),
        sa.Column("event_end_time", sa.String(5), nullable=True),
        sa.Column("confirmed_pax", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'booked'")),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancellation_reason", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("event_duration > 0", name="check_booking_duration_positive"),
        sa.CheckConstraint("confirmed_pax >= 0", name="check_booking_pax_non_negative"),
        sa.CheckConstraint(
            "status IN ('tentative', 'booked', 'cancelled', 'closed')",
            name="check_booking_status",
        ),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_booking_number", "bookings", ["booking_number"], unique=True)
    # Conflict checks and calendar windows filter on the event's date range.
    op.create_index("ix_bookings_event_range", "bookings", ["event_date", "event_end_date"])
    op.create_index("ix_bookings_status", "bookings", ["status"])

    # Booking sessions table
    op.create_table(
        "booking_sessions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "booking_id", sa.Integer(),
            sa.ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("session_name", sa.String(100), nullable=False),
        sa.Column("session_label", sa.String(100), nullable=True),
        sa.Column("venue", sa.String(255), nullable=False),
        sa.Column("start_time", sa.String(5), nullable=False),
        sa.Column("end_time", sa.String(5), nullable=False),
        sa.Column("session_date", sa.Date(), nullable=False),
        sa.Column("pax_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("special_instructions", sa.Text(), nullable=True),
        sa.CheckConstraint("pax_count >= 0", name="check_session_pax_non_negative"),
    )
    op.create_index("ix_booking_sessions_id", "booking_sessions", ["id"])
    op.create_index("ix_booking_sessions_booking_id", "booking_sessions", ["booking_id"])
    op.create_index("ix_booking_sessions_venue_date", "booking_sessions", ["venue", "session_date"])

    # Menu packages table
    op.create_table(
        "menu_packages",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("type", sa.String(10), nullable=False),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("type IN ('veg', 'non-veg')", name="check_menu_package_type"),
        sa.CheckConstraint("price >= 0", name="check_menu_package_price_non_negative"),
    )
    op.create_index("ix_menu_packages_id", "menu_packages", ["id"])

    # Menu items table
    op.create_table(
        "menu_items",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "package_id", sa.Integer(),
            sa.ForeignKey("menu_packages.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("price", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("additional_price", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_veg", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("quantity > 0", name="check_menu_item_quantity_positive"),
        sa.CheckConstraint("price >= 0", name="check_menu_item_price_non_negative"),
        sa.CheckConstraint("additional_price >= 0", name="check_menu_item_additional_price_non_negative"),
    )
    op.create_index("ix_menu_items_id", "menu_items", ["id"])
    op.create_index("ix_menu_items_package_id", "menu_items", ["package_id"])


def downgrade() -> None:
    op.drop_table("menu_items")
    op.drop_table("menu_packages")
    op.drop_table("booking_sessions")
    op.drop_table("bookings")
