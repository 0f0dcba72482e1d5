from __future__ import annotations

import datetime as dt
import enum
from decimal import Decimal

from sqlalchemy import Date, Enum, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from odonto.models.base import AuditMixin, Base, RecordStatus, TenantMixin, new_uuid, record_status_column


class TreatmentStatus(str, enum.Enum):
    planned = "planned"
    in_progress = "in_progress"
    completed = "completed"


class Treatment(Base, TenantMixin, AuditMixin):
    __tablename__ = "treatments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    patient_id: Mapped[str] = mapped_column(ForeignKey("patients.id"), nullable=False, index=True)
    dentist_id: Mapped[str | None] = mapped_column(ForeignKey("dentists.id"), nullable=True)
    tooth_number: Mapped[str | None] = mapped_column(String(16), nullable=True)
    surface: Mapped[str | None] = mapped_column(String(32), nullable=True)
    procedure: Mapped[str] = mapped_column(String(200), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    status_treatments: Mapped[TreatmentStatus] = mapped_column(
        Enum(TreatmentStatus, name="treatment_status"),
        default=TreatmentStatus.planned,
        nullable=False,
    )
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    materials: Mapped[str | None] = mapped_column(Text, nullable=True)
    complications: Mapped[str | None] = mapped_column(Text, nullable=True)
    follow_up_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)

    dentist = relationship("Dentist", lazy="joined")


class TreatmentCatalogItem(Base, AuditMixin):
    __tablename__ = "treatments_catalog"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    category: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status: Mapped[RecordStatus] = record_status_column()


class TreatmentCost(Base, TenantMixin, AuditMixin):
    __tablename__ = "treatment_costs"
    __table_args__ = (
        UniqueConstraint("clinic_id", "treatment_catalog_id", name="uq_treatment_costs_clinic_catalog"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    treatment_catalog_id: Mapped[str] = mapped_column(ForeignKey("treatments_catalog.id"), nullable=False)
    base_cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)

    catalog_item = relationship("TreatmentCatalogItem", lazy="joined")
