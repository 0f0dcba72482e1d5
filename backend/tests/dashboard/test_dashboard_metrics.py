from datetime import date, time
from decimal import Decimal

import pytest

from odonto.models.appointment import AppointmentStatus
from odonto.models.odontogram import ConditionStatus, ConditionType, Surface
from odonto.models.treatment import TreatmentStatus
from odonto.services import odontograms as odontogram_service
from odonto.services.dashboard import collect_metrics, week_start
from odonto.services.gateway import DataGateway

TODAY = date(2026, 3, 11)  # a Wednesday


@pytest.mark.parametrize(
    ("day", "expected"),
    [
        (date(2026, 3, 8), date(2026, 3, 8)),
        (date(2026, 3, 11), date(2026, 3, 8)),
        (date(2026, 3, 14), date(2026, 3, 8)),
        (date(2026, 3, 15), date(2026, 3, 15)),
    ],
)
def test_week_starts_on_sunday(day, expected):
    assert week_start(day) == expected


def test_collect_metrics(gateway):
    patient = gateway.insert("patients", {"name": "Ana Ruiz"})
    gateway.insert("patients", {"name": "Luis Mora"})
    dentist = gateway.insert("dentists", {"name": "Dr. Carlos Vega"})

    for slot, state in ((time(9, 0), AppointmentStatus.scheduled), (time(11, 0), AppointmentStatus.confirmed)):
        gateway.insert(
            "appointments",
            {
                "patient_id": patient.id,
                "patient_name": patient.name,
                "dentist_id": dentist.id,
                "date": TODAY,
                "time": slot,
                "duration": 30,
                "procedure": "Limpieza dental",
                "status_appointments": state,
            },
        )
    gateway.insert(
        "appointments",
        {"patient_name": "Otro", "dentist_id": dentist.id, "date": date(2026, 3, 12),
         "time": time(9, 0), "duration": 30, "procedure": "Empaste"},
    )

    for when, cost, state in (
        (date(2026, 3, 9), Decimal("100.00"), TreatmentStatus.completed),
        (date(2026, 3, 11), Decimal("50.00"), TreatmentStatus.in_progress),
        (date(2026, 3, 7), Decimal("999.00"), TreatmentStatus.in_progress),
    ):
        gateway.insert(
            "treatments",
            {"patient_id": patient.id, "procedure": "Empaste", "date": when, "cost": cost,
             "status_treatments": state},
        )

    old = odontogram_service.create_version(gateway, patient.id, "Inicial")
    odontogram_service.save_condition(gateway, old.id, 16, Surface.occlusal, ConditionType.caries)
    latest = odontogram_service.create_version(gateway, patient.id, "Control")
    odontogram_service.save_condition(gateway, latest.id, 26, Surface.whole, ConditionType.fracture)
    odontogram_service.save_condition(
        gateway, latest.id, 36, Surface.occlusal, ConditionType.caries,
        status=ConditionStatus.completed,
    )

    metrics = collect_metrics(gateway, TODAY)
    assert metrics.total_patients == 2
    assert metrics.appointments_today == 2
    assert metrics.appointments_pending == 1
    assert [a.time for a in metrics.today_appointments] == [time(9, 0), time(11, 0)]
    assert metrics.active_treatments == 2
    assert metrics.weekly_sales == Decimal("150.00")
    assert len(metrics.recent_sales) == 2
    # 16 is carried into "Control" as existing, 26 is new; 36 is completed.
    assert metrics.urgencies == 2


def test_urgencies_skip_deleted_patients(gateway):
    kept = gateway.insert("patients", {"name": "Ana Ruiz"})
    gone = gateway.insert("patients", {"name": "Luis Mora"})
    for patient in (kept, gone):
        version = odontogram_service.create_version(gateway, patient.id, "Inicial")
        odontogram_service.save_condition(gateway, version.id, 16, Surface.occlusal, ConditionType.caries)
    gateway.soft_delete("patients", gone.id)

    metrics = collect_metrics(gateway, TODAY)
    assert metrics.total_patients == 1
    assert metrics.urgencies == 1


def test_metrics_empty_without_clinic(db):
    metrics = collect_metrics(DataGateway(db, None), TODAY)
    assert metrics.total_patients == 0
    assert metrics.today_appointments == []
    assert metrics.weekly_sales == Decimal("0")


def test_dashboard_endpoint(api_client, auth_headers, create_patient):
    create_patient()
    res = api_client.get("/dashboard/metrics", headers=auth_headers)
    assert res.status_code == 200, res.text
    body = res.json()
    assert body["total_patients"] == 1
    assert body["refresh_interval_seconds"] == 30
    assert body["today_appointments"] == []
