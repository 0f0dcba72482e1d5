import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from odonto.models.treatment import TreatmentStatus


class TreatmentBase(BaseModel):
    dentist_id: Optional[str] = None
    tooth_number: Optional[str] = Field(default=None, max_length=16)
    surface: Optional[str] = Field(default=None, max_length=32)
    procedure: str = Field(min_length=1, max_length=200)
    notes: Optional[str] = None
    cost: Decimal = Field(default=Decimal("0"), ge=0)
    date: dt.date
    status_treatments: TreatmentStatus = Field(default=TreatmentStatus.planned, alias="status")
    duration: Optional[int] = Field(default=None, ge=0)
    materials: Optional[str] = None
    complications: Optional[str] = None
    follow_up_date: Optional[dt.date] = None

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("procedure", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value


class TreatmentCreate(TreatmentBase):
    pass


class TreatmentUpdate(BaseModel):
    dentist_id: Optional[str] = None
    tooth_number: Optional[str] = Field(default=None, max_length=16)
    surface: Optional[str] = Field(default=None, max_length=32)
    procedure: Optional[str] = Field(default=None, min_length=1, max_length=200)
    notes: Optional[str] = None
    cost: Optional[Decimal] = Field(default=None, ge=0)
    date: Optional[dt.date] = None
    status_treatments: Optional[TreatmentStatus] = Field(default=None, alias="status")
    duration: Optional[int] = Field(default=None, ge=0)
    materials: Optional[str] = None
    complications: Optional[str] = None
    follow_up_date: Optional[dt.date] = None

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("procedure", "cost", "date", "status_treatments")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be empty")
        return value


class TreatmentOut(BaseModel):
    id: str
    patient_id: str
    dentist_id: Optional[str] = None
    dentist_name: str
    tooth_number: str
    surface: str
    procedure: str
    notes: str
    cost: Decimal
    date: dt.date
    status: TreatmentStatus
    duration: Optional[int] = None
    materials: Optional[str] = None
    complications: Optional[str] = None
    follow_up_date: Optional[dt.date] = None
