from fastapi import APIRouter, Depends, status

from odonto.deps import get_gateway, get_read_gateway
from odonto.schemas.treatment import TreatmentOut, TreatmentUpdate
from odonto.services import treatments as treatment_service
from odonto.services.gateway import DataGateway

router = APIRouter(prefix="/treatments", tags=["treatments"])


@router.get("/{treatment_id}", response_model=TreatmentOut)
def get_treatment(treatment_id: str, gateway: DataGateway = Depends(get_read_gateway)):
    treatment = gateway.get(treatment_service.TABLE, treatment_id)
    return treatment_service.present_treatment(treatment)


@router.patch("/{treatment_id}", response_model=TreatmentOut)
def update_treatment(
    treatment_id: str, payload: TreatmentUpdate, gateway: DataGateway = Depends(get_gateway)
):
    treatment = treatment_service.update_treatment(
        gateway, treatment_id, payload.model_dump(exclude_unset=True)
    )
    return treatment_service.present_treatment(treatment)


@router.delete("/{treatment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_treatment(treatment_id: str, gateway: DataGateway = Depends(get_gateway)):
    treatment_service.delete_treatment(gateway, treatment_id)


@router.post(
    "/{treatment_id}/duplicate", response_model=TreatmentOut, status_code=status.HTTP_201_CREATED
)
def duplicate_treatment(treatment_id: str, gateway: DataGateway = Depends(get_gateway)):
    treatment = treatment_service.duplicate_treatment(gateway, treatment_id)
    return treatment_service.present_treatment(treatment)
