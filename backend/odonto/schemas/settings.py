from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from odonto.models.clinic import ProfileRole
from odonto.schemas.common import blank_to_none, clean_phone


class ClinicOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    ruc: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None
    created_date: datetime
    updated_date: Optional[datetime] = None


class ClinicUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=200)
    ruc: Optional[str] = Field(default=None, max_length=32)
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("Name cannot be empty")
        return value

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email(cls, value):
        return blank_to_none(value)

    @field_validator("phone")
    @classmethod
    def _check_phone(cls, value: Optional[str]) -> Optional[str]:
        return clean_phone(value)


class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    clinic_id: Optional[str] = None
    name: str
    email: str
    phone: Optional[str] = None
    specialty: Optional[str] = None
    license_number: Optional[str] = None
    role: ProfileRole
    bio: Optional[str] = None
    years_experience: Optional[int] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=200)
    phone: Optional[str] = None
    specialty: Optional[str] = None
    license_number: Optional[str] = None
    bio: Optional[str] = None
    years_experience: Optional[int] = Field(default=None, ge=0, le=80)

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("Name cannot be empty")
        return value

    @field_validator("phone")
    @classmethod
    def _check_phone(cls, value: Optional[str]) -> Optional[str]:
        return clean_phone(value)


class CatalogItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    category: Optional[str] = None


class TreatmentCostIn(BaseModel):
    base_cost: Decimal = Field(ge=0)


class TreatmentCostOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    treatment_catalog_id: str
    base_cost: Decimal
    catalog_item: Optional[CatalogItemOut] = None
