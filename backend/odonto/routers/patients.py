from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from odonto.deps import get_gateway, get_read_gateway
from odonto.schemas.appointment import AppointmentOut
from odonto.schemas.common import Page, as_page
from odonto.schemas.dentist import DentistOut
from odonto.schemas.odontogram import OdontogramCreate, OdontogramDetail, OdontogramOut
from odonto.schemas.patient import (
    PatientCreate,
    PatientNotesIn,
    PatientNotesOut,
    PatientOut,
    PatientUpdate,
)
from odonto.schemas.treatment import TreatmentCreate, TreatmentOut
from odonto.services import appointments as appointment_service
from odonto.services import odontograms as odontogram_service
from odonto.services import patients as patient_service
from odonto.services import treatments as treatment_service
from odonto.services.gateway import DataGateway

router = APIRouter(prefix="/patients", tags=["patients"])


@router.get("", response_model=Page[PatientOut])
def list_patients(
    gateway: DataGateway = Depends(get_read_gateway),
    page: int = Query(default=1, ge=1),
    q: str | None = Query(default=None),
):
    result = patient_service.list_patients(gateway, page=page, search=q)
    return as_page(result)


@router.post("", response_model=PatientOut, status_code=status.HTTP_201_CREATED)
def create_patient(payload: PatientCreate, gateway: DataGateway = Depends(get_gateway)):
    return patient_service.create_patient(gateway, payload.model_dump())


@router.get("/{patient_id}", response_model=PatientOut)
def get_patient(patient_id: str, gateway: DataGateway = Depends(get_read_gateway)):
    return patient_service.get_patient(gateway, patient_id)


@router.patch("/{patient_id}", response_model=PatientOut)
def update_patient(
    patient_id: str, payload: PatientUpdate, gateway: DataGateway = Depends(get_gateway)
):
    return patient_service.update_patient(gateway, patient_id, payload.model_dump(exclude_unset=True))


@router.delete("/{patient_id}", response_model=PatientOut)
def delete_patient(patient_id: str, gateway: DataGateway = Depends(get_gateway)):
    return patient_service.delete_patient(gateway, patient_id)


@router.get("/{patient_id}/notes", response_model=Optional[PatientNotesOut])
def get_patient_notes(patient_id: str, gateway: DataGateway = Depends(get_read_gateway)):
    return patient_service.get_notes(gateway, patient_id)


@router.put("/{patient_id}/notes", response_model=PatientNotesOut)
def save_patient_notes(
    patient_id: str, payload: PatientNotesIn, gateway: DataGateway = Depends(get_gateway)
):
    return patient_service.save_notes(gateway, patient_id, payload.model_dump(exclude_unset=True))


@router.get("/{patient_id}/default-dentist", response_model=Optional[DentistOut])
def get_default_dentist(patient_id: str, gateway: DataGateway = Depends(get_read_gateway)):
    patient_service.get_patient(gateway, patient_id)
    return appointment_service.default_dentist_for_patient(gateway, patient_id)


@router.get("/{patient_id}/appointments", response_model=Page[AppointmentOut])
def list_patient_appointments(
    patient_id: str,
    gateway: DataGateway = Depends(get_read_gateway),
    page: int = Query(default=1, ge=1),
):
    result = appointment_service.list_appointments(gateway, page=page, patient_id=patient_id)
    return as_page(result)


@router.get("/{patient_id}/treatments", response_model=Page[TreatmentOut])
def list_patient_treatments(
    patient_id: str,
    gateway: DataGateway = Depends(get_read_gateway),
    page: int = Query(default=1, ge=1),
):
    result = treatment_service.list_treatments(gateway, patient_id, page=page)
    return as_page(result, [treatment_service.present_treatment(t) for t in result.rows])


@router.post(
    "/{patient_id}/treatments", response_model=TreatmentOut, status_code=status.HTTP_201_CREATED
)
def create_patient_treatment(
    patient_id: str, payload: TreatmentCreate, gateway: DataGateway = Depends(get_gateway)
):
    treatment = treatment_service.create_treatment(gateway, patient_id, payload.model_dump())
    return treatment_service.present_treatment(treatment)


@router.get("/{patient_id}/odontograms", response_model=list[OdontogramOut])
def list_odontograms(patient_id: str, gateway: DataGateway = Depends(get_read_gateway)):
    patient_service.get_patient(gateway, patient_id)
    return odontogram_service.list_versions(gateway, patient_id)


@router.post(
    "/{patient_id}/odontograms", response_model=OdontogramOut, status_code=status.HTTP_201_CREATED
)
def create_odontogram(
    patient_id: str, payload: OdontogramCreate, gateway: DataGateway = Depends(get_gateway)
):
    return odontogram_service.create_version(
        gateway, patient_id, payload.name, version_type=payload.type, notes=payload.notes
    )


@router.get("/{patient_id}/odontograms/current", response_model=OdontogramDetail)
def get_current_odontogram(
    patient_id: str,
    gateway: DataGateway = Depends(get_read_gateway),
    odontogram_id: str | None = Query(default=None),
):
    patient_service.get_patient(gateway, patient_id)
    version = odontogram_service.current_version(gateway, patient_id, odontogram_id)
    if version is None:
        return {"odontogram": None, "conditions": [], "summary": odontogram_service.summarize([])}
    conditions = odontogram_service.list_conditions(gateway, version.id)
    return {
        "odontogram": version,
        "read_only": not odontogram_service.is_latest(gateway, version),
        "conditions": conditions,
        "summary": odontogram_service.summarize(conditions),
    }
