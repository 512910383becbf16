"""scheduling tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

NOW = sa.text("CURRENT_TIMESTAMP")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("first_name", sa.Text, nullable=False),
        sa.Column("last_name", sa.Text),
        sa.Column("role", sa.Enum("admin", "practitioner", "therapist", "staff", "patient"), nullable=False),
        sa.Column("email", sa.Text, unique=True),
        sa.Column("phone", sa.Text),
        sa.Column("created_at", sa.Text, server_default=NOW),
    )
    op.create_table(
        "patients",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("notes", sa.Text),
    )
    op.create_table(
        "providers",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("kind", sa.Enum("practitioner", "therapist"), nullable=False),
        sa.Column("working_hours", sa.Text, nullable=False, server_default=sa.text("'[]'")),
        sa.Column("leave_days", sa.Text, nullable=False, server_default=sa.text("'[]'")),
        sa.Column("start_time", sa.Text),
        sa.Column("end_time", sa.Text),
        sa.Column("specializations", sa.Text),
        sa.Column("is_active", sa.Integer, nullable=False, server_default=sa.text("1")),
        sa.Column("created_at", sa.Text, server_default=NOW),
        sa.Column("updated_at", sa.Text, server_default=NOW),
    )
    op.create_table(
        "slots",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("provider_id", sa.ForeignKey("providers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("day", sa.Text, nullable=False),
        sa.Column("start_time", sa.Text, nullable=False),
        sa.Column("end_time", sa.Text, nullable=False),
        sa.Column("status", sa.Enum("free", "booked", "leave"), nullable=False, server_default=sa.text("'free'")),
        sa.Column("created_at", sa.Text, server_default=NOW),
        sa.Column("updated_at", sa.Text, server_default=NOW),
        sa.UniqueConstraint("provider_id", "day", "start_time"),
    )
    op.create_table(
        "therapies",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.Text, nullable=False, unique=True),
        sa.Column("description", sa.Text),
        sa.Column("duration_minutes", sa.Integer, nullable=False, server_default=sa.text("30")),
    )
    op.create_table(
        "stock_items",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.Text, nullable=False, unique=True),
        sa.Column("category", sa.Text),
        sa.Column("unit", sa.Text),
    )
    op.create_table(
        "therapy_required_items",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("therapy_id", sa.ForeignKey("therapies.id", ondelete="CASCADE"), nullable=False),
        sa.Column("stock_item_id", sa.ForeignKey("stock_items.id", ondelete="CASCADE"), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False, server_default=sa.text("1")),
        sa.UniqueConstraint("therapy_id", "stock_item_id"),
    )
    op.create_table(
        "stock",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("item_name", sa.Text, nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("unit", sa.Text),
        sa.Column("updated_by", sa.ForeignKey("users.id", ondelete="SET NULL")),
        sa.Column("last_updated", sa.Text, server_default=NOW),
    )
    op.create_table(
        "treatment_plans",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("patient_id", sa.ForeignKey("patients.id", ondelete="CASCADE"), nullable=False),
        sa.Column("practitioner_id", sa.ForeignKey("providers.id", ondelete="SET NULL")),
        sa.Column("therapy_id", sa.ForeignKey("therapies.id", ondelete="SET NULL")),
        sa.Column("treatment_name", sa.Text, nullable=False),
        sa.Column("treatment_type", sa.Text, server_default=sa.text("'therapy'")),
        sa.Column("start_date", sa.Text, nullable=False),
        sa.Column("end_date", sa.Text, nullable=False),
        sa.Column("total_sessions", sa.Integer, nullable=False),
        sa.Column("total_cost", sa.Float, server_default=sa.text("0")),
        sa.Column("status", sa.Enum("planned", "active", "completed"), nullable=False, server_default=sa.text("'planned'")),
        sa.Column("created_at", sa.Text, server_default=NOW),
    )
    op.create_table(
        "treatment_sessions",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("treatment_plan_id", sa.ForeignKey("treatment_plans.id", ondelete="CASCADE"), nullable=False),
        sa.Column("session_number", sa.Integer, nullable=False),
        sa.Column("session_date", sa.Text, nullable=False),
        sa.Column("start_time", sa.Text, nullable=False),
        sa.Column("end_time", sa.Text, nullable=False),
        sa.Column("therapist_id", sa.ForeignKey("providers.id"), nullable=False),
        sa.Column("staff_id", sa.ForeignKey("users.id", ondelete="SET NULL")),
        sa.Column("procedures_performed", sa.Text, server_default=sa.text("'[]'")),
        sa.Column("duration_minutes", sa.Integer, nullable=False, server_default=sa.text("30")),
        sa.Column("status", sa.Enum("scheduled", "completed", "cancelled"), nullable=False, server_default=sa.text("'scheduled'")),
    )
    op.create_index(
        "uq_treatment_sessions_therapist_slot",
        "treatment_sessions",
        ["therapist_id", "session_date", "start_time"],
        unique=True,
        sqlite_where=sa.text("status <> 'cancelled'"),
        postgresql_where=sa.text("status <> 'cancelled'"),
    )
    op.create_table(
        "appointments",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("patient_id", sa.ForeignKey("patients.id", ondelete="CASCADE"), nullable=False),
        sa.Column("provider_id", sa.ForeignKey("providers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("slot_id", sa.ForeignKey("slots.id", ondelete="SET NULL")),
        sa.Column("appointment_date", sa.Text, nullable=False),
        sa.Column("start_time", sa.Text, nullable=False),
        sa.Column("end_time", sa.Text, nullable=False),
        sa.Column("status", sa.Enum("scheduled", "confirmed", "completed", "cancelled"), nullable=False, server_default=sa.text("'scheduled'")),
        sa.Column("service_type", sa.Text),
        sa.Column("consultation_type", sa.Text),
        sa.Column("notes", sa.Text),
        sa.Column("booking_channel", sa.Text, server_default=sa.text("'app'")),
        sa.Column("confirmation_code", sa.Text),
        sa.Column("created_at", sa.Text, server_default=NOW),
        sa.Column("updated_at", sa.Text, server_default=NOW),
    )
    op.create_index(
        "uq_appointments_provider_slot",
        "appointments",
        ["provider_id", "appointment_date", "start_time"],
        unique=True,
        sqlite_where=sa.text("status IN ('scheduled', 'confirmed')"),
        postgresql_where=sa.text("status IN ('scheduled', 'confirmed')"),
    )


def downgrade() -> None:
    op.drop_index("uq_appointments_provider_slot", table_name="appointments")
    op.drop_table("appointments")
    op.drop_index("uq_treatment_sessions_therapist_slot", table_name="treatment_sessions")
    for table in (
        "treatment_sessions",
        "treatment_plans",
        "stock",
        "therapy_required_items",
        "stock_items",
        "therapies",
        "slots",
        "providers",
        "patients",
        "users",
    ):
        op.drop_table(table)
