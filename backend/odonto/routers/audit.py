from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from odonto.db.session import get_db
from odonto.deps import get_clinic_context
from odonto.models.audit_log import AuditLog
from odonto.schemas.audit_log import AuditLogOut
from odonto.services.context import ClinicContext

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("/{entity_type}/{entity_id}", response_model=list[AuditLogOut])
def entity_audit(
    entity_type: str,
    entity_id: str,
    db: Session = Depends(get_db),
    ctx: ClinicContext = Depends(get_clinic_context),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
):
    stmt = (
        select(AuditLog)
        .where(
            AuditLog.clinic_id == ctx.clinic_id,
            AuditLog.entity_type == entity_type,
            AuditLog.entity_id == entity_id,
        )
        .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(db.scalars(stmt))
