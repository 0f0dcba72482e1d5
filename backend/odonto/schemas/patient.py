from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from odonto.models.base import RecordStatus
from odonto.schemas.common import blank_to_none, clean_phone


class PatientBase(BaseModel):
    name: str = Field(min_length=2, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    address: Optional[str] = None
    medical_history: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email(cls, value):
        return blank_to_none(value)

    @field_validator("phone", "emergency_contact_phone")
    @classmethod
    def _check_phone(cls, value: Optional[str]) -> Optional[str]:
        return clean_phone(value)

    @field_validator("birth_date")
    @classmethod
    def _not_in_future(cls, value: Optional[date]) -> Optional[date]:
        if value is not None and value > date.today():
            raise ValueError("Birth date cannot be in the future")
        return value


class PatientCreate(PatientBase):
    pass


class PatientUpdate(PatientBase):
    name: Optional[str] = Field(default=None, min_length=2, max_length=200)

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("Name cannot be empty")
        return value


class PatientOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    clinic_id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    age: Optional[int] = None
    address: Optional[str] = None
    medical_history: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    status: RecordStatus
    created_by_user: Optional[str] = None
    created_date: datetime
    created_by_ip: Optional[str] = None
    updated_by_user: Optional[str] = None
    updated_date: Optional[datetime] = None
    updated_by_ip: Optional[str] = None


class PatientNotesIn(BaseModel):
    soft_tissue_lesions: Optional[str] = None
    medications: Optional[str] = None
    allergies: Optional[str] = None
    medical_conditions: Optional[str] = None
    treatment_plan: Optional[str] = None
    general_observations: Optional[str] = None


class PatientNotesOut(PatientNotesIn):
    model_config = ConfigDict(from_attributes=True)

    id: str
    patient_id: str
    created_date: datetime
    updated_date: Optional[datetime] = None
