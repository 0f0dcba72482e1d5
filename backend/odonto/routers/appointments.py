from datetime import date

from fastapi import APIRouter, Depends, Query, status

from odonto.core.settings import settings
from odonto.deps import get_gateway, get_read_gateway
from odonto.schemas.appointment import (
    AppointmentCreate,
    AppointmentOut,
    AppointmentUpdate,
    DaySchedule,
)
from odonto.schemas.common import Page, as_page
from odonto.services import appointments as appointment_service
from odonto.services.gateway import DataGateway

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.get("", response_model=Page[AppointmentOut])
def list_appointments(
    gateway: DataGateway = Depends(get_read_gateway),
    page: int = Query(default=1, ge=1),
    patient_id: str | None = Query(default=None),
    on_date: date | None = Query(default=None, alias="date"),
):
    result = appointment_service.list_appointments(
        gateway, page=page, patient_id=patient_id, on_date=on_date
    )
    return as_page(result)


@router.get("/procedures", response_model=list[str])
def list_procedures():
    return list(appointment_service.PROCEDURES)


@router.get("/calendar", response_model=DaySchedule)
def day_calendar(
    on_date: date = Query(alias="date"),
    gateway: DataGateway = Depends(get_read_gateway),
):
    return {
        "date": on_date,
        "slot_minutes": settings.calendar_slot_minutes,
        "slots": [
            {"time": slot.time, "state": slot.state, "appointments": slot.appointments}
            for slot in appointment_service.day_schedule(gateway, on_date)
        ],
    }


@router.post("", response_model=AppointmentOut, status_code=status.HTTP_201_CREATED)
def create_appointment(payload: AppointmentCreate, gateway: DataGateway = Depends(get_gateway)):
    return appointment_service.create_appointment(gateway, payload.model_dump())


@router.get("/{appointment_id}", response_model=AppointmentOut)
def get_appointment(appointment_id: str, gateway: DataGateway = Depends(get_read_gateway)):
    return appointment_service.get_appointment(gateway, appointment_id)


@router.patch("/{appointment_id}", response_model=AppointmentOut)
def update_appointment(
    appointment_id: str, payload: AppointmentUpdate, gateway: DataGateway = Depends(get_gateway)
):
    return appointment_service.update_appointment(
        gateway, appointment_id, payload.model_dump(exclude_unset=True)
    )


@router.post("/{appointment_id}/cancel", response_model=AppointmentOut)
def cancel_appointment(appointment_id: str, gateway: DataGateway = Depends(get_gateway)):
    return appointment_service.cancel_appointment(gateway, appointment_id)


@router.delete("/{appointment_id}", response_model=AppointmentOut)
def delete_appointment(appointment_id: str, gateway: DataGateway = Depends(get_gateway)):
    return appointment_service.delete_appointment(gateway, appointment_id)
