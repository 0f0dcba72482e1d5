from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict

from odonto.schemas.appointment import AppointmentOut
from odonto.schemas.treatment import TreatmentOut


class DashboardOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_patients: int
    appointments_today: int
    appointments_pending: int
    active_treatments: int
    urgencies: int
    weekly_sales: Decimal
    today_appointments: List[AppointmentOut]
    recent_sales: List[TreatmentOut]
    refresh_interval_seconds: int
