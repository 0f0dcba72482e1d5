from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from odonto.models.base import RecordStatus
from odonto.schemas.common import blank_to_none, clean_phone


class DentistBase(BaseModel):
    name: str = Field(min_length=3, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    specialty: Optional[str] = None
    license_number: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email(cls, value):
        return blank_to_none(value)

    @field_validator("phone")
    @classmethod
    def _check_phone(cls, value: Optional[str]) -> Optional[str]:
        return clean_phone(value)


class DentistCreate(DentistBase):
    pass


class DentistUpdate(DentistBase):
    name: Optional[str] = Field(default=None, min_length=3, max_length=200)

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("Name cannot be empty")
        return value


class DentistOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    clinic_id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    specialty: Optional[str] = None
    license_number: Optional[str] = None
    status: RecordStatus
    created_date: datetime
    updated_date: Optional[datetime] = None


class DentistSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    specialty: Optional[str] = None
