from odonto.models.base import Base, RecordStatus
from odonto.models.user import User
from odonto.models.clinic import Clinic, ProfileRole, UserProfile
from odonto.models.audit_log import AuditLog
from odonto.models.patient import Patient, PatientNote
from odonto.models.dentist import Dentist
from odonto.models.appointment import Appointment, AppointmentStatus
from odonto.models.treatment import Treatment, TreatmentCatalogItem, TreatmentCost, TreatmentStatus
from odonto.models.odontogram import (
    ConditionStatus,
    ConditionType,
    Odontogram,
    OdontogramType,
    Surface,
    ToothCondition,
)

__all__ = [
    "Base",
    "RecordStatus",
    "User",
    "Clinic",
    "ProfileRole",
    "UserProfile",
    "AuditLog",
    "Patient",
    "PatientNote",
    "Dentist",
    "Appointment",
    "AppointmentStatus",
    "Treatment",
    "TreatmentCatalogItem",
    "TreatmentCost",
    "TreatmentStatus",
    "ConditionStatus",
    "ConditionType",
    "Odontogram",
    "OdontogramType",
    "Surface",
    "ToothCondition",
]
