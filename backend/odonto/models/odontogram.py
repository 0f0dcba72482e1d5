from __future__ import annotations

import datetime as dt
import enum
from decimal import Decimal

from sqlalchemy import Date, Enum, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from odonto.models.base import AuditMixin, Base, TenantMixin, new_uuid


class OdontogramType(str, enum.Enum):
    initial = "initial"
    evolution = "evolution"
    treatment_plan = "treatment_plan"


class Surface(str, enum.Enum):
    occlusal = "occlusal"
    incisal = "incisal"
    mesial = "mesial"
    distal = "distal"
    vestibular = "vestibular"
    lingual = "lingual"
    palatal = "palatal"
    cervical = "cervical"
    whole = "whole"


class ConditionType(str, enum.Enum):
    caries = "caries"
    restoration = "restoration"
    crown = "crown"
    endodontics = "endodontics"
    missing = "missing"
    extraction_planned = "extraction_planned"
    implant = "implant"
    fracture = "fracture"
    sealant = "sealant"
    prosthesis = "prosthesis"
    orthodontics = "orthodontics"
    bridge = "bridge"
    healthy = "healthy"


class ConditionStatus(str, enum.Enum):
    planned = "planned"
    in_progress = "in_progress"
    completed = "completed"
    existing = "existing"


RANGE_CONDITIONS = frozenset(
    {ConditionType.bridge, ConditionType.orthodontics, ConditionType.prosthesis}
)


class Odontogram(Base, TenantMixin, AuditMixin):
    __tablename__ = "odontograms"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    patient_id: Mapped[str] = mapped_column(ForeignKey("patients.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[OdontogramType] = mapped_column(
        Enum(OdontogramType, name="odontogram_type"),
        default=OdontogramType.evolution,
        nullable=False,
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class ToothCondition(Base, AuditMixin):
    __tablename__ = "tooth_conditions"
    __table_args__ = (
        UniqueConstraint(
            "odontogram_id", "tooth_number", "surface", name="uq_tooth_conditions_tooth_surface"
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    odontogram_id: Mapped[str] = mapped_column(
        ForeignKey("odontograms.id", ondelete="CASCADE"), nullable=False, index=True
    )
    tooth_number: Mapped[int] = mapped_column(Integer, nullable=False)
    range_end_tooth: Mapped[int | None] = mapped_column(Integer, nullable=True)
    surface: Mapped[Surface] = mapped_column(Enum(Surface, name="tooth_surface"), nullable=False)
    condition_type: Mapped[ConditionType] = mapped_column(
        Enum(ConditionType, name="condition_type"), nullable=False
    )
    status: Mapped[ConditionStatus] = mapped_column(
        Enum(ConditionStatus, name="condition_status"),
        default=ConditionStatus.planned,
        nullable=False,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    cost: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
