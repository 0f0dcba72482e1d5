from fastapi import APIRouter, Depends

from odonto.deps import get_read_gateway
from odonto.schemas.dashboard import DashboardOut
from odonto.services.dashboard import collect_metrics
from odonto.services.gateway import DataGateway
from odonto.services.treatments import present_treatment

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/metrics", response_model=DashboardOut)
def dashboard_metrics(gateway: DataGateway = Depends(get_read_gateway)):
    metrics = collect_metrics(gateway)
    return {
        "total_patients": metrics.total_patients,
        "appointments_today": metrics.appointments_today,
        "appointments_pending": metrics.appointments_pending,
        "active_treatments": metrics.active_treatments,
        "urgencies": metrics.urgencies,
        "weekly_sales": metrics.weekly_sales,
        "today_appointments": metrics.today_appointments,
        "recent_sales": [present_treatment(t) for t in metrics.recent_sales],
        "refresh_interval_seconds": metrics.refresh_interval_seconds,
    }
