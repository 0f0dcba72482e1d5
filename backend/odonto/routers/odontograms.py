from fastapi import APIRouter, Depends, Query, Response

from odonto.deps import get_gateway, get_read_gateway
from odonto.schemas.odontogram import (
    ChartOut,
    OdontogramOut,
    SaveConditionOut,
    ToothConditionIn,
    ToothConditionOut,
)
from odonto.services import odontograms as odontogram_service
from odonto.services import tooth_chart
from odonto.services.gateway import DataGateway
from odonto.services.tooth_chart import Dentition

router = APIRouter(prefix="/odontograms", tags=["odontograms"])


@router.get("/{odontogram_id}", response_model=OdontogramOut)
def get_odontogram(odontogram_id: str, gateway: DataGateway = Depends(get_read_gateway)):
    return gateway.get(odontogram_service.VERSIONS, odontogram_id)


@router.get("/{odontogram_id}/conditions", response_model=list[ToothConditionOut])
def list_conditions(odontogram_id: str, gateway: DataGateway = Depends(get_read_gateway)):
    return odontogram_service.list_conditions(gateway, odontogram_id)


@router.put("/{odontogram_id}/conditions", response_model=SaveConditionOut)
def save_condition(
    odontogram_id: str,
    payload: ToothConditionIn,
    gateway: DataGateway = Depends(get_gateway),
):
    result = odontogram_service.save_condition(
        gateway,
        odontogram_id,
        payload.tooth_number,
        payload.surface,
        payload.condition_type,
        status=payload.status,
        notes=payload.notes,
        cost=payload.cost,
        range_end_tooth=payload.range_end_tooth,
    )
    return {"action": result.action, "condition": result.condition}


@router.get("/{odontogram_id}/chart", response_model=ChartOut)
def get_chart(
    odontogram_id: str,
    gateway: DataGateway = Depends(get_read_gateway),
    dentition: Dentition = Query(default="adult"),
):
    conditions = odontogram_service.list_conditions(gateway, odontogram_id)
    return {
        "odontogram_id": odontogram_id,
        "dentition": dentition,
        "rows": tooth_chart.chart_layout(conditions, dentition),
    }


@router.get("/{odontogram_id}/chart.svg")
def get_chart_svg(
    odontogram_id: str,
    gateway: DataGateway = Depends(get_read_gateway),
    dentition: Dentition = Query(default="adult"),
):
    conditions = odontogram_service.list_conditions(gateway, odontogram_id)
    svg = tooth_chart.render_chart_svg(conditions, dentition)
    return Response(content=svg, media_type="image/svg+xml")
