from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping

from odonto.models.treatment import Treatment, TreatmentStatus
from odonto.services.gateway import DataGateway, GatewayError, QueryResult

logger = logging.getLogger("odonto.treatments")

TABLE = "treatments"
UNKNOWN_DENTIST = "Unknown"

_DUPLICATED_FIELDS = (
    "patient_id",
    "dentist_id",
    "tooth_number",
    "surface",
    "procedure",
    "notes",
    "cost",
    "duration",
    "materials",
    "complications",
)


def present_treatment(treatment: Treatment) -> dict[str, Any]:
    return {
        "id": treatment.id,
        "patient_id": treatment.patient_id,
        "dentist_id": treatment.dentist_id,
        "dentist_name": treatment.dentist.name if treatment.dentist else UNKNOWN_DENTIST,
        "tooth_number": treatment.tooth_number or "",
        "surface": treatment.surface or "",
        "procedure": treatment.procedure,
        "notes": treatment.notes or "",
        "cost": treatment.cost or 0,
        "date": treatment.date,
        "status": treatment.status_treatments,
        "duration": treatment.duration,
        "materials": treatment.materials,
        "complications": treatment.complications,
        "follow_up_date": treatment.follow_up_date,
    }


def list_treatments(gateway: DataGateway, patient_id: str, *, page: int | None = 1) -> QueryResult:
    try:
        return gateway.query(
            TABLE, {"patient_id": patient_id}, page=page, order_by=("-date", "-created_date")
        )
    except GatewayError:
        logger.error("Error fetching treatments for patient %s", patient_id)
        raise


def _check_refs(gateway: DataGateway, values: Mapping[str, Any]) -> None:
    if values.get("patient_id"):
        gateway.get("patients", values["patient_id"])
    if values.get("dentist_id"):
        gateway.get("dentists", values["dentist_id"])


def create_treatment(gateway: DataGateway, patient_id: str, values: Mapping[str, Any]) -> Treatment:
    data = {"patient_id": patient_id, **values}
    _check_refs(gateway, data)
    try:
        return gateway.insert(TABLE, data)
    except GatewayError:
        logger.error("Error creating treatment")
        raise


def update_treatment(gateway: DataGateway, treatment_id: str, patch: Mapping[str, Any]) -> Treatment:
    _check_refs(gateway, patch)
    try:
        return gateway.update(TABLE, treatment_id, patch)
    except GatewayError:
        logger.error("Error updating treatment %s", treatment_id)
        raise


def delete_treatment(gateway: DataGateway, treatment_id: str) -> Treatment:
    try:
        return gateway.soft_delete(TABLE, treatment_id)
    except GatewayError:
        logger.error("Error deleting treatment %s", treatment_id)
        raise


def duplicate_treatment(gateway: DataGateway, treatment_id: str, today: date | None = None) -> Treatment:
    source = gateway.get(TABLE, treatment_id)
    values = {name: getattr(source, name) for name in _DUPLICATED_FIELDS}
    values.update(
        date=today or date.today(),
        follow_up_date=None,
        status_treatments=TreatmentStatus.planned,
    )
    try:
        return gateway.insert(TABLE, values)
    except GatewayError:
        logger.error("Error duplicating treatment %s", treatment_id)
        raise
