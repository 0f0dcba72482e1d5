"""initial clinic schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("created_by_user", sa.String(length=36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("created_by_ip", sa.String(length=64), nullable=True),
        sa.Column("updated_by_user", sa.String(length=36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("updated_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_by_ip", sa.String(length=64), nullable=True),
    ]


def _status_column() -> sa.Column:
    return sa.Column("status", sa.String(length=1), nullable=False, server_default="1")


def _tenant_columns() -> list[sa.Column]:
    return [
        sa.Column("clinic_id", sa.String(length=36), sa.ForeignKey("clinics.id"), nullable=False),
        _status_column(),
    ]


def _tenant_indexes(table: str) -> None:
    op.create_index(f"ix_{table}_clinic_id", table, ["clinic_id"])
    op.create_index(f"ix_{table}_status", table, ["status"])
    op.create_index(f"ix_{table}_created_date", table, ["created_date"])


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_users_email", "users", ["email"])

    op.create_table(
        "clinics",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("ruc", sa.String(length=32), nullable=True),
        sa.Column("address", sa.String(length=300), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("website", sa.String(length=300), nullable=True),
        sa.Column("logo_url", sa.String(length=500), nullable=True),
        _status_column(),
        *_audit_columns(),
    )
    op.create_index("ix_clinics_status", "clinics", ["status"])

    op.create_table(
        "user_profiles",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("clinic_id", sa.String(length=36), sa.ForeignKey("clinics.id"), nullable=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("specialty", sa.String(length=120), nullable=True),
        sa.Column("license_number", sa.String(length=64), nullable=True),
        sa.Column(
            "role",
            sa.Enum("admin", "dentist", "assistant", "reception", name="profile_role"),
            nullable=False,
            server_default="reception",
        ),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("years_experience", sa.Integer(), nullable=True),
        _status_column(),
        *_audit_columns(),
        sa.UniqueConstraint("user_id"),
    )
    op.create_index("ix_user_profiles_clinic_id", "user_profiles", ["clinic_id"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("clinic_id", sa.String(length=36), sa.ForeignKey("clinics.id"), nullable=True),
        sa.Column("actor_user_id", sa.String(length=36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("actor_email", sa.String(length=320), nullable=True),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.String(length=64), nullable=False),
        sa.Column("request_id", sa.String(length=120), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("before_json", sa.JSON(), nullable=True),
        sa.Column("after_json", sa.JSON(), nullable=True),
    )
    op.create_index("ix_audit_logs_clinic_id", "audit_logs", ["clinic_id"])

    op.create_table(
        "patients",
        sa.Column("id", sa.String(length=36), primary_key=True),
        *_tenant_columns(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("address", sa.String(length=300), nullable=True),
        sa.Column("medical_history", sa.Text(), nullable=True),
        sa.Column("emergency_contact_name", sa.String(length=200), nullable=True),
        sa.Column("emergency_contact_phone", sa.String(length=32), nullable=True),
        *_audit_columns(),
    )
    _tenant_indexes("patients")
    op.create_index("ix_patients_name", "patients", ["name"])

    op.create_table(
        "patient_notes",
        sa.Column("id", sa.String(length=36), primary_key=True),
        *_tenant_columns(),
        sa.Column("patient_id", sa.String(length=36), sa.ForeignKey("patients.id"), nullable=False),
        sa.Column("soft_tissue_lesions", sa.Text(), nullable=True),
        sa.Column("medications", sa.Text(), nullable=True),
        sa.Column("allergies", sa.Text(), nullable=True),
        sa.Column("medical_conditions", sa.Text(), nullable=True),
        sa.Column("treatment_plan", sa.Text(), nullable=True),
        sa.Column("general_observations", sa.Text(), nullable=True),
        *_audit_columns(),
        sa.UniqueConstraint("patient_id"),
    )
    _tenant_indexes("patient_notes")

    op.create_table(
        "dentists",
        sa.Column("id", sa.String(length=36), primary_key=True),
        *_tenant_columns(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("specialty", sa.String(length=120), nullable=True),
        sa.Column("license_number", sa.String(length=64), nullable=True),
        *_audit_columns(),
    )
    _tenant_indexes("dentists")

    op.create_table(
        "appointments",
        sa.Column("id", sa.String(length=36), primary_key=True),
        *_tenant_columns(),
        sa.Column("patient_id", sa.String(length=36), sa.ForeignKey("patients.id"), nullable=True),
        sa.Column("patient_name", sa.String(length=200), nullable=True),
        sa.Column("patient_phone", sa.String(length=32), nullable=True),
        sa.Column("dentist_id", sa.String(length=36), sa.ForeignKey("dentists.id"), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time", sa.Time(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("procedure", sa.String(length=200), nullable=True),
        sa.Column(
            "status_appointments",
            sa.Enum("scheduled", "confirmed", "completed", "cancelled", name="appointment_status"),
            nullable=False,
            server_default="scheduled",
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        *_audit_columns(),
    )
    _tenant_indexes("appointments")
    op.create_index("ix_appointments_patient_id", "appointments", ["patient_id"])
    op.create_index("ix_appointments_dentist_id", "appointments", ["dentist_id"])
    op.create_index("ix_appointments_date", "appointments", ["date"])

    op.create_table(
        "treatments",
        sa.Column("id", sa.String(length=36), primary_key=True),
        *_tenant_columns(),
        sa.Column("patient_id", sa.String(length=36), sa.ForeignKey("patients.id"), nullable=False),
        sa.Column("dentist_id", sa.String(length=36), sa.ForeignKey("dentists.id"), nullable=True),
        sa.Column("tooth_number", sa.String(length=16), nullable=True),
        sa.Column("surface", sa.String(length=32), nullable=True),
        sa.Column("procedure", sa.String(length=200), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("cost", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column(
            "status_treatments",
            sa.Enum("planned", "in_progress", "completed", name="treatment_status"),
            nullable=False,
            server_default="planned",
        ),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("materials", sa.Text(), nullable=True),
        sa.Column("complications", sa.Text(), nullable=True),
        sa.Column("follow_up_date", sa.Date(), nullable=True),
        *_audit_columns(),
    )
    _tenant_indexes("treatments")
    op.create_index("ix_treatments_patient_id", "treatments", ["patient_id"])
    op.create_index("ix_treatments_date", "treatments", ["date"])

    op.create_table(
        "treatments_catalog",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("category", sa.String(length=64), nullable=True),
        _status_column(),
        *_audit_columns(),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "treatment_costs",
        sa.Column("id", sa.String(length=36), primary_key=True),
        *_tenant_columns(),
        sa.Column(
            "treatment_catalog_id",
            sa.String(length=36),
            sa.ForeignKey("treatments_catalog.id"),
            nullable=False,
        ),
        sa.Column("base_cost", sa.Numeric(10, 2), nullable=False, server_default="0"),
        *_audit_columns(),
        sa.UniqueConstraint("clinic_id", "treatment_catalog_id", name="uq_treatment_costs_clinic_catalog"),
    )
    _tenant_indexes("treatment_costs")

    op.create_table(
        "odontograms",
        sa.Column("id", sa.String(length=36), primary_key=True),
        *_tenant_columns(),
        sa.Column("patient_id", sa.String(length=36), sa.ForeignKey("patients.id"), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column(
            "type",
            sa.Enum("initial", "evolution", "treatment_plan", name="odontogram_type"),
            nullable=False,
            server_default="evolution",
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_audit_columns(),
    )
    _tenant_indexes("odontograms")
    op.create_index("ix_odontograms_patient_id", "odontograms", ["patient_id"])

    op.create_table(
        "tooth_conditions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "odontogram_id",
            sa.String(length=36),
            sa.ForeignKey("odontograms.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("tooth_number", sa.Integer(), nullable=False),
        sa.Column("range_end_tooth", sa.Integer(), nullable=True),
        sa.Column(
            "surface",
            sa.Enum(
                "occlusal",
                "incisal",
                "mesial",
                "distal",
                "vestibular",
                "lingual",
                "palatal",
                "cervical",
                "whole",
                name="tooth_surface",
            ),
            nullable=False,
        ),
        sa.Column(
            "condition_type",
            sa.Enum(
                "caries",
                "restoration",
                "crown",
                "endodontics",
                "missing",
                "extraction_planned",
                "implant",
                "fracture",
                "sealant",
                "prosthesis",
                "orthodontics",
                "bridge",
                "healthy",
                name="condition_type",
            ),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum("planned", "in_progress", "completed", "existing", name="condition_status"),
            nullable=False,
            server_default="planned",
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("cost", sa.Numeric(10, 2), nullable=True),
        *_audit_columns(),
        sa.UniqueConstraint(
            "odontogram_id", "tooth_number", "surface", name="uq_tooth_conditions_tooth_surface"
        ),
    )
    op.create_index("ix_tooth_conditions_odontogram_id", "tooth_conditions", ["odontogram_id"])


def downgrade() -> None:
    op.drop_index("ix_tooth_conditions_odontogram_id", table_name="tooth_conditions")
    op.drop_table("tooth_conditions")
    op.drop_table("odontograms")
    op.drop_table("treatment_costs")
    op.drop_table("treatments_catalog")
    op.drop_table("treatments")
    op.drop_table("appointments")
    op.drop_table("dentists")
    op.drop_table("patient_notes")
    op.drop_table("patients")
    op.drop_table("audit_logs")
    op.drop_table("user_profiles")
    op.drop_table("clinics")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    op.execute("DROP TYPE IF EXISTS condition_status")
    op.execute("DROP TYPE IF EXISTS condition_type")
    op.execute("DROP TYPE IF EXISTS tooth_surface")
    op.execute("DROP TYPE IF EXISTS odontogram_type")
    op.execute("DROP TYPE IF EXISTS treatment_status")
    op.execute("DROP TYPE IF EXISTS appointment_status")
    op.execute("DROP TYPE IF EXISTS profile_role")
