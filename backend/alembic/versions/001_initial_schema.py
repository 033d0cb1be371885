"""Initial schema: users, courts, equipment, coaches, pricing rules, bookings.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    # Reference data
    op.create_table(
        "courts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("court_type", sa.String(20), nullable=False),
        sa.Column("base_hourly_rate", sa.Numeric(10, 2), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        *_timestamps(),
        sa.CheckConstraint("court_type IN ('indoor', 'outdoor')", name="check_court_type"),
        sa.CheckConstraint("base_hourly_rate >= 0", name="check_court_rate_non_negative"),
    )
    op.create_index("ix_courts_id", "courts", ["id"])

    op.create_table(
        "equipment",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("equipment_type", sa.String(20), nullable=False),
        sa.Column("total_quantity", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.CheckConstraint(
            "equipment_type IN ('racket', 'shoes', 'shuttlecock', 'other')",
            name="check_equipment_type",
        ),
        sa.CheckConstraint("total_quantity >= 0", name="check_equipment_quantity_non_negative"),
    )
    op.create_index("ix_equipment_id", "equipment", ["id"])

    op.create_table(
        "coaches",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("bio", sa.String(1000), nullable=True),
        sa.Column("avatar_url", sa.String(500), nullable=True),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_coaches_id", "coaches", ["id"])

    op.create_table(
        "coach_availability",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("coach_id", sa.Integer(), sa.ForeignKey("coaches.id"), nullable=False),
        sa.Column("day_of_week", sa.String(10), nullable=False),
        sa.Column("start_time", sa.String(5), nullable=False),
        sa.Column("end_time", sa.String(5), nullable=False),
        sa.CheckConstraint(
            "day_of_week IN ('monday', 'tuesday', 'wednesday', 'thursday', "
            "'friday', 'saturday', 'sunday')",
            name="check_availability_day",
        ),
    )
    op.create_index("ix_coach_availability_id", "coach_availability", ["id"])
    op.create_index("ix_coach_availability_coach_day", "coach_availability", ["coach_id", "day_of_week"])

    op.create_table(
        "pricing_rules",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("rule_type", sa.String(20), nullable=False),
        sa.Column("multiplier", sa.Numeric(6, 3), nullable=False, server_default=sa.text("1")),
        sa.Column("flat_fee", sa.Numeric(10, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("start_hour", sa.Integer(), nullable=True),
        sa.Column("end_hour", sa.Integer(), nullable=True),
        sa.Column("applies_to_court_type", sa.String(20), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("priority", sa.Integer(), nullable=False, server_default=sa.text("0")),
        *_timestamps(),
        sa.CheckConstraint(
            "rule_type IN ('base', 'court_type', 'peak_hours', 'weekend')",
            name="check_pricing_rule_type",
        ),
        sa.CheckConstraint("multiplier >= 0", name="check_pricing_multiplier_non_negative"),
    )
    op.create_index("ix_pricing_rules_id", "pricing_rules", ["id"])

    # Bookings table
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("court_id", sa.Integer(), sa.ForeignKey("courts.id"), nullable=False),
        sa.Column("coach_id", sa.Integer(), sa.ForeignKey("coaches.id"), nullable=True),
        sa.Column("booking_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.String(5), nullable=False),
        sa.Column("end_time", sa.String(5), nullable=False),
        sa.Column("base_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("price_breakdown", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'confirmed'")),
        *_timestamps(),
        sa.CheckConstraint("end_time > start_time", name="check_booking_time_range"),
        sa.CheckConstraint(
            "status IN ('confirmed', 'cancelled', 'completed')",
            name="check_booking_status",
        ),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"])
    # Per-court day lookup: slot grid and the overlap check on every booking write
    op.create_index("ix_bookings_court_date", "bookings", ["court_id", "booking_date"])

    op.create_table(
        "booking_equipment",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("booking_id", sa.Integer(), sa.ForeignKey("bookings.id"), nullable=False),
        sa.Column("equipment_id", sa.Integer(), sa.ForeignKey("equipment.id"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(10, 2), nullable=False),
        sa.CheckConstraint("quantity > 0", name="check_booking_equipment_quantity_positive"),
    )
    op.create_index("ix_booking_equipment_id", "booking_equipment", ["id"])
    op.create_index("ix_booking_equipment_booking_id", "booking_equipment", ["booking_id"])


def downgrade() -> None:
    op.drop_table("booking_equipment")
    op.drop_table("bookings")
    op.drop_table("pricing_rules")
    op.drop_table("coach_availability")
    op.drop_table("coaches")
    op.drop_table("equipment")
    op.drop_table("courts")
    op.drop_table("users")
