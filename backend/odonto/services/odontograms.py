from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Literal

from odonto.models.odontogram import (
    RANGE_CONDITIONS,
    ConditionStatus,
    ConditionType,
    Odontogram,
    OdontogramType,
    Surface,
    ToothCondition,
)
from odonto.services.gateway import DataGateway, GatewayError, NotFoundError
from odonto.services.tooth_chart import is_valid_tooth

logger = logging.getLogger("odonto.odontogram")

VERSIONS = "odontograms"
CONDITIONS = "tooth_conditions"
VERSION_ORDER = ("-date", "-created_date")

# Carried into a new version; cost and clinical status are not.
_COPIED_FIELDS = ("tooth_number", "surface", "condition_type", "notes", "range_end_tooth")


class ReadOnlyVersionError(Exception):
    """Raised when writing to an odontogram that is not the patient's latest."""


class InvalidToothError(ValueError):
    pass


@dataclass
class SaveResult:
    action: Literal["created", "updated", "deleted", "unchanged"]
    condition: ToothCondition | None = None


def validate_tooth(number: int, field_name: str = "tooth_number") -> None:
    if not is_valid_tooth(number):
        raise InvalidToothError(f"{field_name} {number} is not a valid FDI tooth number")


def list_versions(gateway: DataGateway, patient_id: str) -> list[Odontogram]:
    return gateway.query(VERSIONS, {"patient_id": patient_id}, order_by=VERSION_ORDER).rows


def latest_version(gateway: DataGateway, patient_id: str) -> Odontogram | None:
    return gateway.maybe_get(VERSIONS, {"patient_id": patient_id}, order_by=VERSION_ORDER)


def current_version(
    gateway: DataGateway, patient_id: str, explicit_id: str | None = None
) -> Odontogram | None:
    if explicit_id:
        version = gateway.get(VERSIONS, explicit_id)
        if version.patient_id != patient_id:
            raise NotFoundError("Odontogram does not belong to patient", table=VERSIONS, operation="select")
        return version
    return latest_version(gateway, patient_id)


def is_latest(gateway: DataGateway, version: Odontogram) -> bool:
    latest = latest_version(gateway, version.patient_id)
    return latest is not None and latest.id == version.id


def list_conditions(gateway: DataGateway, odontogram_id: str) -> list[ToothCondition]:
    gateway.get(VERSIONS, odontogram_id)
    return gateway.query(
        CONDITIONS, {"odontogram_id": odontogram_id}, order_by=("tooth_number", "surface")
    ).rows


def create_version(
    gateway: DataGateway,
    patient_id: str,
    name: str,
    *,
    version_type: OdontogramType | None = None,
    notes: str | None = None,
) -> Odontogram:
    """New version for the patient, seeded with the previous latest version's findings.

    The insert and the copy commit together; a failed copy leaves no new
    version behind.
    """
    gateway.get("patients", patient_id)
    prior = latest_version(gateway, patient_id)
    carried = list_conditions(gateway, prior.id) if prior else []
    if version_type is None:
        version_type = OdontogramType.evolution if prior else OdontogramType.initial
    try:
        with gateway.atomic():
            version = gateway.insert(
                VERSIONS,
                {
                    "patient_id": patient_id,
                    "name": name,
                    "type": version_type,
                    "date": date.today(),
                    "notes": notes,
                },
            )
            for condition in carried:
                values = {key: getattr(condition, key) for key in _COPIED_FIELDS}
                gateway.insert(
                    CONDITIONS,
                    {**values, "odontogram_id": version.id, "status": ConditionStatus.existing},
                )
    except GatewayError:
        logger.error("Error creating odontogram version for patient %s", patient_id)
        raise
    logger.info(
        "Odontogram %s created for patient %s with %s carried conditions",
        version.id,
        patient_id,
        len(carried),
    )
    return version


def save_condition(
    gateway: DataGateway,
    odontogram_id: str,
    tooth_number: int,
    surface: Surface,
    condition_type: ConditionType,
    *,
    status: ConditionStatus | None = None,
    notes: str | None = None,
    cost: Decimal | None = None,
    range_end_tooth: int | None = None,
) -> SaveResult:
    """Upsert keyed on (odontogram, tooth, surface); ``healthy`` clears the pair."""
    version = gateway.get(VERSIONS, odontogram_id)
    if not is_latest(gateway, version):
        raise ReadOnlyVersionError("Only the latest odontogram version can be edited")
    validate_tooth(tooth_number)
    if range_end_tooth is not None:
        if condition_type not in RANGE_CONDITIONS:
            raise InvalidToothError("range_end_tooth only applies to bridge, orthodontics or prosthesis")
        validate_tooth(range_end_tooth, "range_end_tooth")

    existing = gateway.maybe_get(
        CONDITIONS,
        {"odontogram_id": odontogram_id, "tooth_number": tooth_number, "surface": surface},
    )
    if condition_type == ConditionType.healthy:
        if existing is None:
            return SaveResult(action="unchanged")
        gateway.delete(CONDITIONS, existing.id)
        return SaveResult(action="deleted")

    values = {
        "condition_type": condition_type,
        "notes": notes,
        "cost": cost,
        "range_end_tooth": range_end_tooth,
    }
    if existing is not None:
        if status is not None:
            values["status"] = status
        return SaveResult(action="updated", condition=gateway.update(CONDITIONS, existing.id, values))

    values.update(
        odontogram_id=odontogram_id,
        tooth_number=tooth_number,
        surface=surface,
        status=status or ConditionStatus.planned,
    )
    return SaveResult(action="created", condition=gateway.insert(CONDITIONS, values))


def summarize(conditions: list[ToothCondition]) -> dict[str, int]:
    completed = sum(1 for c in conditions if c.status == ConditionStatus.completed)
    pending = sum(
        1 for c in conditions if c.status in {ConditionStatus.planned, ConditionStatus.in_progress}
    )
    return {"total": len(conditions), "completed": completed, "pending": pending}
