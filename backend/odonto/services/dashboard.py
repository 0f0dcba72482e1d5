from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal

from odonto.core.settings import settings
from odonto.models.appointment import Appointment, AppointmentStatus
from odonto.models.odontogram import ConditionStatus, ConditionType
from odonto.models.treatment import Treatment, TreatmentStatus
from odonto.services.gateway import DataGateway

URGENT_CONDITIONS = (ConditionType.caries, ConditionType.fracture)
RECENT_SALES = 5


def week_start(today: date) -> date:
    # Weeks start on Sunday.
    return today - timedelta(days=(today.weekday() + 1) % 7)


@dataclass
class DashboardMetrics:
    total_patients: int = 0
    appointments_today: int = 0
    appointments_pending: int = 0
    active_treatments: int = 0
    urgencies: int = 0
    weekly_sales: Decimal = Decimal("0")
    today_appointments: list[Appointment] = field(default_factory=list)
    recent_sales: list[Treatment] = field(default_factory=list)
    refresh_interval_seconds: int = field(default_factory=lambda: settings.dashboard_refresh_seconds)


def count_urgencies(gateway: DataGateway) -> int:
    """Unfinished caries and fractures on each active patient's latest odontogram."""
    patient_ids = [patient.id for patient in gateway.query("patients").rows]
    if not patient_ids:
        return 0
    latest: dict[str, str] = {}
    versions = gateway.query(
        "odontograms", {"patient_id__in": patient_ids}, order_by=("-date", "-created_date")
    ).rows
    for version in versions:
        latest.setdefault(version.patient_id, version.id)
    if not latest:
        return 0
    return gateway.query(
        "tooth_conditions",
        {
            "odontogram_id__in": list(latest.values()),
            "condition_type__in": list(URGENT_CONDITIONS),
            "status__ne": ConditionStatus.completed,
        },
        order_by=("tooth_number",),
    ).total_count


def collect_metrics(gateway: DataGateway, today: date | None = None) -> DashboardMetrics:
    if gateway.ctx is None:
        return DashboardMetrics()
    today = today or date.today()
    todays = gateway.query("appointments", {"date": today}, order_by=("time",)).rows
    week = gateway.query(
        "treatments", {"date__gte": week_start(today), "date__lte": today}, order_by=("-date", "-created_date")
    ).rows
    return DashboardMetrics(
        total_patients=gateway.query("patients", page=1, page_size=1).total_count,
        appointments_today=len(todays),
        appointments_pending=sum(
            1 for a in todays if a.status_appointments == AppointmentStatus.scheduled
        ),
        active_treatments=gateway.query(
            "treatments", {"status_treatments": TreatmentStatus.in_progress}, page=1, page_size=1
        ).total_count,
        urgencies=count_urgencies(gateway),
        weekly_sales=sum((t.cost or Decimal("0") for t in week), Decimal("0")),
        today_appointments=todays,
        recent_sales=week[:RECENT_SALES],
    )
