import datetime as dt
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from odonto.models.odontogram import ConditionStatus, ConditionType, OdontogramType, Surface


class OdontogramCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    type: Optional[OdontogramType] = None
    notes: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value


class OdontogramOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    patient_id: str
    name: str
    type: OdontogramType
    date: dt.date
    notes: Optional[str] = None
    created_by_user: Optional[str] = None
    created_date: dt.datetime
    updated_date: Optional[dt.datetime] = None


class ToothConditionIn(BaseModel):
    tooth_number: int
    surface: Surface
    condition_type: ConditionType
    status: Optional[ConditionStatus] = None
    notes: Optional[str] = None
    cost: Optional[Decimal] = Field(default=None, ge=0)
    range_end_tooth: Optional[int] = None


class ToothConditionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    odontogram_id: str
    tooth_number: int
    range_end_tooth: Optional[int] = None
    surface: Surface
    condition_type: ConditionType
    status: ConditionStatus
    notes: Optional[str] = None
    cost: Optional[Decimal] = None
    created_date: dt.datetime
    updated_date: Optional[dt.datetime] = None


class SaveConditionOut(BaseModel):
    action: Literal["created", "updated", "deleted", "unchanged"]
    condition: Optional[ToothConditionOut] = None


class ConditionSummary(BaseModel):
    total: int
    completed: int
    pending: int


class OdontogramDetail(BaseModel):
    odontogram: Optional[OdontogramOut] = None
    read_only: bool = False
    conditions: List[ToothConditionOut] = []
    summary: ConditionSummary


class RangeInfoOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: ConditionType
    position: Literal["start", "middle", "end", "single"]


class RegionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    region: str
    surface: Surface
    path: str
    fill: str


class ToothLayoutOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    number: int
    regions: List[RegionOut]
    overlays: List[str]
    range: Optional[RangeInfoOut] = None


class ChartOut(BaseModel):
    odontogram_id: str
    dentition: Literal["adult", "deciduous", "mixed"]
    rows: List[List[ToothLayoutOut]]
