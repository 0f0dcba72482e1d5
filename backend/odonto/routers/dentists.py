from fastapi import APIRouter, Depends, Query, status

from odonto.deps import get_gateway, get_read_gateway
from odonto.schemas.common import Page, as_page
from odonto.schemas.dentist import DentistCreate, DentistOut, DentistUpdate
from odonto.services import dentists as dentist_service
from odonto.services.gateway import DataGateway

router = APIRouter(prefix="/dentists", tags=["dentists"])


@router.get("", response_model=Page[DentistOut])
def list_dentists(
    gateway: DataGateway = Depends(get_read_gateway),
    page: int = Query(default=1, ge=1),
):
    return as_page(dentist_service.list_dentists(gateway, page=page))


@router.post("", response_model=DentistOut, status_code=status.HTTP_201_CREATED)
def create_dentist(payload: DentistCreate, gateway: DataGateway = Depends(get_gateway)):
    return dentist_service.create_dentist(gateway, payload.model_dump())


@router.get("/{dentist_id}", response_model=DentistOut)
def get_dentist(dentist_id: str, gateway: DataGateway = Depends(get_read_gateway)):
    return dentist_service.get_dentist(gateway, dentist_id)


@router.patch("/{dentist_id}", response_model=DentistOut)
def update_dentist(
    dentist_id: str, payload: DentistUpdate, gateway: DataGateway = Depends(get_gateway)
):
    return dentist_service.update_dentist(gateway, dentist_id, payload.model_dump(exclude_unset=True))


@router.delete("/{dentist_id}", response_model=DentistOut)
def delete_dentist(dentist_id: str, gateway: DataGateway = Depends(get_gateway)):
    return dentist_service.delete_dentist(gateway, dentist_id)
