from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Any, Iterable, Mapping

from odonto.core.settings import settings
from odonto.models.appointment import Appointment, AppointmentStatus
from odonto.models.dentist import Dentist
from odonto.services.gateway import DataGateway, GatewayError, QueryResult

logger = logging.getLogger("odonto.appointments")

TABLE = "appointments"

PROCEDURES = (
    "Consulta inicial",
    "Limpieza dental",
    "Empaste",
    "Endodoncia",
    "Extracción",
    "Corona",
    "Implante",
    "Ortodoncia - Consulta",
    "Ortodoncia - Revisión",
    "Blanqueamiento",
    "Cirugía oral",
    "Revisión general",
)


def list_appointments(
    gateway: DataGateway,
    *,
    page: int | None = 1,
    patient_id: str | None = None,
    on_date: date | None = None,
) -> QueryResult:
    filters: dict[str, Any] = {}
    if patient_id:
        filters["patient_id"] = patient_id
    if on_date:
        filters["date"] = on_date
    try:
        return gateway.query(TABLE, filters, page=page, order_by=("date", "time"))
    except GatewayError:
        logger.error("Error fetching appointments")
        raise


def get_appointment(gateway: DataGateway, appointment_id: str) -> Appointment:
    return gateway.get(TABLE, appointment_id)


def check_references(gateway: DataGateway, values: Mapping[str, Any]) -> None:
    if values.get("patient_id"):
        gateway.get("patients", values["patient_id"])
    if values.get("dentist_id"):
        gateway.get("dentists", values["dentist_id"])


def create_appointment(gateway: DataGateway, values: Mapping[str, Any]) -> Appointment:
    check_references(gateway, values)
    data = dict(values)
    data.setdefault("status_appointments", AppointmentStatus.scheduled)
    try:
        return gateway.insert(TABLE, data)
    except GatewayError:
        logger.error("Error creating appointment")
        raise


def update_appointment(gateway: DataGateway, appointment_id: str, patch: Mapping[str, Any]) -> Appointment:
    check_references(gateway, patch)
    try:
        return gateway.update(TABLE, appointment_id, patch)
    except GatewayError:
        logger.error("Error updating appointment %s", appointment_id)
        raise


def cancel_appointment(gateway: DataGateway, appointment_id: str) -> Appointment:
    return update_appointment(
        gateway, appointment_id, {"status_appointments": AppointmentStatus.cancelled}
    )


def delete_appointment(gateway: DataGateway, appointment_id: str) -> Appointment:
    try:
        return gateway.soft_delete(
            TABLE, appointment_id, {"status_appointments": AppointmentStatus.cancelled}
        )
    except GatewayError:
        logger.error("Error deleting appointment %s", appointment_id)
        raise


def default_dentist_for_patient(
    gateway: DataGateway, patient_id: str, today: date | None = None
) -> Dentist | None:
    """Dentist of the patient's next active, non-cancelled appointment from today on."""
    appointment = gateway.maybe_get(
        TABLE,
        {
            "patient_id": patient_id,
            "date__gte": today or date.today(),
            "status_appointments__ne": AppointmentStatus.cancelled,
            "dentist_id__ne": None,
        },
        order_by=("date", "time"),
    )
    if appointment is None:
        return None
    return gateway.maybe_get("dentists", {"id": appointment.dentist_id})


# -- calendar ---------------------------------------------------------------


def _add_minutes(value: time, minutes: int) -> time:
    return (datetime.combine(date.min, value) + timedelta(minutes=minutes)).time()


def _minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def time_slots(
    start: time | None = None, end: time | None = None, step_minutes: int | None = None
) -> list[time]:
    """Bookable slot start times in [start, end)."""
    start = start or settings.calendar_day_start
    end = end or settings.calendar_day_end
    step = step_minutes or settings.calendar_slot_minutes
    slots: list[time] = []
    current = _minutes(start)
    while current < _minutes(end):
        slots.append(time(current // 60, current % 60))
        current += step
    return slots


def slot_count(duration: int, step_minutes: int | None = None) -> int:
    step = step_minutes or settings.calendar_slot_minutes
    return max(1, math.ceil(duration / step))


def occupied_slots(start: time, duration: int, step_minutes: int | None = None) -> list[time]:
    step = step_minutes or settings.calendar_slot_minutes
    return [_add_minutes(start, step * index) for index in range(slot_count(duration, step))]


@dataclass
class CalendarSlot:
    time: time
    state: str = "available"
    appointments: list[Appointment] = field(default_factory=list)


def build_day_schedule(
    appointments: Iterable[Appointment],
    *,
    start: time | None = None,
    end: time | None = None,
    step_minutes: int | None = None,
) -> list[CalendarSlot]:
    """Slot grid for one day.

    A slot is ``start`` when an appointment begins there, ``occupied`` when it
    falls inside a longer appointment and ``available`` otherwise. Only slots
    that are available may be booked.
    """
    step = step_minutes or settings.calendar_slot_minutes
    grid = {slot: CalendarSlot(time=slot) for slot in time_slots(start, end, step)}
    for appointment in appointments:
        span = occupied_slots(appointment.time, appointment.duration, step)
        first = grid.get(span[0])
        if first is not None:
            first.state = "start"
            first.appointments.append(appointment)
        for slot_time in span[1:]:
            slot = grid.get(slot_time)
            if slot is not None and slot.state == "available":
                slot.state = "occupied"
    return list(grid.values())


def day_schedule(gateway: DataGateway, on_date: date) -> list[CalendarSlot]:
    result = list_appointments(gateway, page=None, on_date=on_date)
    return build_day_schedule(result.rows)
