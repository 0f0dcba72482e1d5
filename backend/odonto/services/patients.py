from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping

from odonto.models.patient import Patient, PatientNote
from odonto.services.gateway import DataGateway, GatewayError, QueryResult

logger = logging.getLogger("odonto.patients")

TABLE = "patients"


def calculate_age(birth_date: date | None, today: date | None = None) -> int | None:
    """Whole years between birth_date and today, counting a year only once the birthday has passed."""
    if birth_date is None:
        return None
    today = today or date.today()
    years = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        years -= 1
    return max(years, 0)


def list_patients(
    gateway: DataGateway, *, page: int = 1, search: str | None = None
) -> QueryResult:
    filters: dict[str, Any] = {}
    if search and search.strip():
        filters["name__ilike"] = search.strip()
    try:
        return gateway.query(TABLE, filters, page=page)
    except GatewayError:
        logger.error("Error fetching patients")
        raise


def get_patient(gateway: DataGateway, patient_id: str) -> Patient:
    return gateway.get(TABLE, patient_id)


def create_patient(gateway: DataGateway, values: Mapping[str, Any]) -> Patient:
    data = dict(values)
    data["age"] = calculate_age(data.get("birth_date"))
    try:
        return gateway.insert(TABLE, data)
    except GatewayError:
        logger.error("Error creating patient")
        raise


def update_patient(gateway: DataGateway, patient_id: str, patch: Mapping[str, Any]) -> Patient:
    data = dict(patch)
    if "birth_date" in data:
        data["age"] = calculate_age(data["birth_date"])
    try:
        return gateway.update(TABLE, patient_id, data)
    except GatewayError:
        logger.error("Error updating patient %s", patient_id)
        raise


def delete_patient(gateway: DataGateway, patient_id: str) -> Patient:
    try:
        return gateway.soft_delete(TABLE, patient_id)
    except GatewayError:
        logger.error("Error deleting patient %s", patient_id)
        raise


def get_notes(gateway: DataGateway, patient_id: str) -> PatientNote | None:
    get_patient(gateway, patient_id)
    return gateway.maybe_get("patient_notes", {"patient_id": patient_id})


def save_notes(gateway: DataGateway, patient_id: str, values: Mapping[str, Any]) -> PatientNote:
    get_patient(gateway, patient_id)
    existing = gateway.maybe_get("patient_notes", {"patient_id": patient_id})
    if existing is None:
        return gateway.insert("patient_notes", {"patient_id": patient_id, **values})
    return gateway.update("patient_notes", existing.id, dict(values))
