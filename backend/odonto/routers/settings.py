from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from odonto.db.session import get_db
from odonto.deps import get_current_user, get_gateway, get_read_gateway
from odonto.models.user import User
from odonto.schemas.settings import (
    CatalogItemOut,
    ClinicOut,
    ClinicUpdate,
    ProfileOut,
    ProfileUpdate,
    TreatmentCostIn,
    TreatmentCostOut,
)
from odonto.services import catalog as catalog_service
from odonto.services import users as user_service
from odonto.services.gateway import DataGateway

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/clinic", response_model=ClinicOut | None)
def get_clinic(gateway: DataGateway = Depends(get_read_gateway)):
    return user_service.get_clinic(gateway)


@router.patch("/clinic", response_model=ClinicOut)
def update_clinic(payload: ClinicUpdate, gateway: DataGateway = Depends(get_gateway)):
    return user_service.update_clinic(gateway, payload.model_dump(exclude_unset=True))


@router.get("/profile", response_model=ProfileOut | None)
def get_profile(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return user_service.get_profile(db, user.id)


@router.patch("/profile", response_model=ProfileOut)
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    gateway: DataGateway = Depends(get_gateway),
):
    profile = user_service.get_profile(db, user.id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return user_service.update_profile(gateway, profile, payload.model_dump(exclude_unset=True))


@router.get("/treatment-catalog", response_model=list[CatalogItemOut])
def list_catalog(gateway: DataGateway = Depends(get_read_gateway)):
    return catalog_service.list_catalog(gateway)


@router.get("/treatment-costs", response_model=list[TreatmentCostOut])
def list_costs(gateway: DataGateway = Depends(get_read_gateway)):
    return catalog_service.list_costs(gateway)


@router.get("/treatment-costs/lookup")
def lookup_cost(name: str, gateway: DataGateway = Depends(get_read_gateway)):
    return {"name": name, "base_cost": catalog_service.get_cost_for_treatment(gateway, name)}


@router.put("/treatment-costs/{catalog_id}", response_model=TreatmentCostOut)
def update_cost(
    catalog_id: str, payload: TreatmentCostIn, gateway: DataGateway = Depends(get_gateway)
):
    return catalog_service.update_cost(gateway, catalog_id, payload.base_cost)
