import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from odonto.models.appointment import AppointmentStatus
from odonto.models.base import RecordStatus
from odonto.schemas.common import check_slot_time, clean_phone
from odonto.schemas.dentist import DentistSummary


class AppointmentBase(BaseModel):
    patient_id: Optional[str] = None
    patient_name: str = Field(min_length=2, max_length=200)
    patient_phone: Optional[str] = None
    dentist_id: str = Field(min_length=1)
    date: dt.date
    time: dt.time
    duration: int = Field(default=30, ge=15, le=240)
    procedure: str = Field(min_length=1, max_length=200)
    status_appointments: AppointmentStatus = AppointmentStatus.scheduled
    notes: Optional[str] = None

    @field_validator("patient_name", "procedure", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("patient_phone")
    @classmethod
    def _check_phone(cls, value: Optional[str]) -> Optional[str]:
        return clean_phone(value)

    @field_validator("time")
    @classmethod
    def _check_time(cls, value: Optional[dt.time]) -> Optional[dt.time]:
        return check_slot_time(value)


class AppointmentCreate(AppointmentBase):
    pass


class AppointmentUpdate(BaseModel):
    patient_id: Optional[str] = None
    patient_name: Optional[str] = Field(default=None, min_length=2, max_length=200)
    patient_phone: Optional[str] = None
    dentist_id: Optional[str] = Field(default=None, min_length=1)
    date: Optional[dt.date] = None
    time: Optional[dt.time] = None
    duration: Optional[int] = Field(default=None, ge=15, le=240)
    procedure: Optional[str] = Field(default=None, min_length=1, max_length=200)
    status_appointments: Optional[AppointmentStatus] = None
    notes: Optional[str] = None

    @field_validator("patient_phone")
    @classmethod
    def _check_phone(cls, value: Optional[str]) -> Optional[str]:
        return clean_phone(value)

    @field_validator("time")
    @classmethod
    def _check_time(cls, value: Optional[dt.time]) -> Optional[dt.time]:
        return check_slot_time(value)

    @field_validator("patient_name", "dentist_id", "date", "time", "duration", "procedure", "status_appointments")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be empty")
        return value


class AppointmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    clinic_id: str
    patient_id: Optional[str] = None
    patient_name: Optional[str] = None
    patient_phone: Optional[str] = None
    dentist_id: Optional[str] = None
    dentist: Optional[DentistSummary] = None
    date: dt.date
    time: dt.time
    duration: int
    procedure: Optional[str] = None
    status_appointments: AppointmentStatus
    status: RecordStatus
    notes: Optional[str] = None
    created_date: dt.datetime
    updated_date: Optional[dt.datetime] = None


class CalendarSlotOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    time: dt.time
    state: str
    appointments: List[AppointmentOut] = []


class DaySchedule(BaseModel):
    date: dt.date
    slot_minutes: int
    slots: List[CalendarSlotOut]
