"""Initial schema for the clinic scheduling backend.

Revision ID: 5b1e0c7d9a21
Revises:
Create Date: 2026-10-19 09:12:41.208113

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "5b1e0c7d9a21"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role = sa.Enum("admin", "assistant", "physician", "patient", name="userrole")
appointment_status = sa.Enum(
    "scheduled", "confirmed", "completed", "cancelled", "no_show", name="appointmentstatus"
)
appointment_priority = sa.Enum("urgent", "high", "normal", "low", name="appointmentpriority")
cancellation_reason = sa.Enum(
    "patient_request",
    "physician_unavailable",
    "emergency",
    "administrative",
    "administrative_decision",
    "schedule_conflict",
    "system_maintenance",
    "force_majeure",
    "other",
    name="cancellationreason",
)

ACTIVE_SLOT = "CASE WHEN status <> 'cancelled' THEN 1 END"


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "patients",
        sa.Column("patient_id", sa.String(length=26), primary_key=True),
        sa.Column("full_name", sa.String(length=120), nullable=False),
        sa.Column("document_number", sa.String(length=32), unique=True),
        sa.Column("phone_number", sa.String(length=32)),
        sa.Column("email", sa.String(length=255)),
        sa.Column("birth_date", sa.Date()),
        *_timestamps(),
    )

    op.create_table(
        "physicians",
        sa.Column("physician_id", sa.String(length=26), primary_key=True),
        sa.Column("full_name", sa.String(length=120), nullable=False),
        sa.Column("specialty", sa.String(length=80), nullable=False),
        sa.Column("license_number", sa.String(length=40), unique=True),
        sa.Column("phone_number", sa.String(length=32)),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_physicians_specialty", "physicians", ["specialty"])

    op.create_table(
        "users",
        sa.Column("user_id", sa.String(length=26), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("role", user_role, nullable=False),
        sa.Column("display_name", sa.String(length=100)),
        sa.Column("patient_id", sa.String(length=26), sa.ForeignKey("patients.patient_id", ondelete="SET NULL")),
        sa.Column(
            "physician_id",
            sa.String(length=26),
            sa.ForeignKey("physicians.physician_id", ondelete="SET NULL"),
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "appointments",
        sa.Column("appointment_id", sa.String(length=26), primary_key=True),
        sa.Column(
            "patient_id",
            sa.String(length=26),
            sa.ForeignKey("patients.patient_id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "physician_id",
            sa.String(length=26),
            sa.ForeignKey("physicians.physician_id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("appointment_date", sa.Date(), nullable=False),
        sa.Column("appointment_time", sa.Time(), nullable=False),
        sa.Column("status", appointment_status, nullable=False, server_default="scheduled"),
        sa.Column("priority", appointment_priority, nullable=False, server_default="normal"),
        sa.Column("reason", sa.Text()),
        sa.Column("notes", sa.Text()),
        sa.Column("medical_notes", sa.Text()),
        sa.Column("preparation_notes", sa.Text()),
        sa.Column("created_by_role", user_role, nullable=False),
        sa.Column("cancellation_reason", cancellation_reason),
        sa.Column("cancellation_details", sa.Text()),
        sa.Column("cancelled_by", sa.String(length=26)),
        sa.Column("cancelled_at", sa.DateTime()),
        sa.Column("active_slot", sa.Integer(), sa.Computed(ACTIVE_SLOT, persisted=True)),
        *_timestamps(),
    )
    op.create_index(
        "uq_appointments_active_slot",
        "appointments",
        ["physician_id", "appointment_date", "appointment_time", "active_slot"],
        unique=True,
    )
    op.create_index("ix_appointments_patient_date", "appointments", ["patient_id", "appointment_date"])


def downgrade() -> None:
    op.drop_index("ix_appointments_patient_date", table_name="appointments")
    op.drop_index("uq_appointments_active_slot", table_name="appointments")
    op.drop_table("appointments")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    op.drop_index("ix_physicians_specialty", table_name="physicians")
    op.drop_table("physicians")
    op.drop_table("patients")

    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        for enum_type in (cancellation_reason, appointment_priority, appointment_status, user_role):
            enum_type.drop(bind, checkfirst=True)
