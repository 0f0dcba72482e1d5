from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from odonto.models.audit_log import AuditLog
from odonto.services.context import ClinicContext


def _json_value(value: Any) -> Any:
    if hasattr(value, "value"):
        value = value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


def snapshot_model(obj: Any | None) -> dict | None:
    if obj is None:
        return None
    data: dict[str, Any] = {}
    mapper = inspect(obj).mapper
    for column in mapper.columns:
        key = column.key
        data[key] = _json_value(getattr(obj, key))
    return data


def log_event(
    db: Session,
    *,
    ctx: ClinicContext | None,
    action: str,
    entity_type: str,
    entity_id: str,
    before_obj: Any | None = None,
    after_obj: Any | None = None,
    before_data: dict | None = None,
    after_data: dict | None = None,
    actor_user_id: str | None = None,
    actor_email: str | None = None,
    ip_address: str | None = None,
) -> AuditLog:
    entry = AuditLog(
        clinic_id=ctx.clinic_id if ctx else None,
        actor_user_id=ctx.user_id if ctx else actor_user_id,
        actor_email=ctx.user_email if ctx else actor_email,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id),
        request_id=ctx.request_id if ctx else None,
        ip_address=ctx.ip_address if ctx else ip_address,
        before_json=before_data if before_data is not None else snapshot_model(before_obj),
        after_json=after_data if after_data is not None else snapshot_model(after_obj),
    )
    db.add(entry)
    return entry
