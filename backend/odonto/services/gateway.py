"""Typed access to the clinic tables.

Every read and write goes through :class:`DataGateway`, which scopes tenant
tables to the caller's clinic, hides soft-deleted rows unless asked, stamps
the audit columns and records an audit entry per mutation. Storage failures
are logged, rolled back and re-raised as :class:`GatewayError`.
"""

from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping, NoReturn, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from odonto.core.settings import settings
from odonto.models.base import RecordStatus, utcnow
from odonto.models.appointment import Appointment
from odonto.models.clinic import Clinic, UserProfile
from odonto.models.dentist import Dentist
from odonto.models.odontogram import Odontogram, ToothCondition
from odonto.models.patient import Patient, PatientNote
from odonto.models.treatment import Treatment, TreatmentCatalogItem, TreatmentCost
from odonto.services.audit import log_event, snapshot_model
from odonto.services.context import ClinicContext

logger = logging.getLogger("odonto.gateway")


class GatewayError(Exception):
    def __init__(self, message: str, *, table: str | None = None, operation: str | None = None) -> None:
        super().__init__(message)
        self.table = table
        self.operation = operation


class NotFoundError(GatewayError):
    pass


class ClinicRequiredError(Exception):
    """Raised for writes attempted before the caller's clinic is known."""


@dataclass(frozen=True)
class TableSpec:
    model: type
    tenant: bool
    soft_delete: bool


TABLES: dict[str, TableSpec] = {
    "patients": TableSpec(Patient, tenant=True, soft_delete=True),
    "patient_notes": TableSpec(PatientNote, tenant=True, soft_delete=True),
    "dentists": TableSpec(Dentist, tenant=True, soft_delete=True),
    "appointments": TableSpec(Appointment, tenant=True, soft_delete=True),
    "treatments": TableSpec(Treatment, tenant=True, soft_delete=True),
    "treatment_costs": TableSpec(TreatmentCost, tenant=True, soft_delete=True),
    "odontograms": TableSpec(Odontogram, tenant=True, soft_delete=True),
    "tooth_conditions": TableSpec(ToothCondition, tenant=False, soft_delete=False),
    "treatments_catalog": TableSpec(TreatmentCatalogItem, tenant=False, soft_delete=True),
    "clinics": TableSpec(Clinic, tenant=False, soft_delete=True),
    "user_profiles": TableSpec(UserProfile, tenant=False, soft_delete=True),
}

_OPERATORS = {
    "eq": lambda column, value: column.is_(None) if value is None else column == value,
    "ne": lambda column, value: column.is_not(None) if value is None else column != value,
    "gt": lambda column, value: column > value,
    "gte": lambda column, value: column >= value,
    "lt": lambda column, value: column < value,
    "lte": lambda column, value: column <= value,
    "ilike": lambda column, value: column.ilike(f"%{value}%"),
    "in": lambda column, value: column.in_(list(value)),
}


@dataclass
class QueryResult:
    rows: list[Any]
    total_count: int
    page: int = 1
    page_size: int = field(default_factory=lambda: settings.page_size)

    @property
    def total_pages(self) -> int:
        if self.total_count <= 0:
            return 1
        return math.ceil(self.total_count / self.page_size)

    @classmethod
    def empty(cls, page: int = 1, page_size: int | None = None) -> "QueryResult":
        return cls(rows=[], total_count=0, page=page, page_size=page_size or settings.page_size)


def table_spec(table: str) -> TableSpec:
    try:
        return TABLES[table]
    except KeyError:
        raise GatewayError(f"Unknown table '{table}'", table=table) from None


class DataGateway:
    def __init__(self, db: Session, ctx: ClinicContext | None) -> None:
        self.db = db
        self.ctx = ctx
        self._atomic_depth = 0

    # -- scoping -----------------------------------------------------------

    def require_ctx(self, table: str, operation: str) -> ClinicContext:
        if self.ctx is None:
            raise ClinicRequiredError(f"{operation} on {table} requires a resolved clinic")
        return self.ctx

    def _column(self, entry: TableSpec, table: str, name: str):
        column = getattr(entry.model, name, None)
        if column is None or not hasattr(column, "property"):
            raise GatewayError(f"Unknown column '{name}'", table=table)
        return column

    def _apply_filters(self, stmt, entry: TableSpec, table: str, filters: Mapping[str, Any] | None, active_only: bool):
        model = entry.model
        if entry.tenant:
            stmt = stmt.where(model.clinic_id == self.ctx.clinic_id)
        if entry.soft_delete and active_only:
            stmt = stmt.where(model.status == RecordStatus.active)
        for key, value in (filters or {}).items():
            name, _, op = key.partition("__")
            operator = _OPERATORS.get(op or "eq")
            if operator is None:
                raise GatewayError(f"Unknown filter operator '{op}'", table=table)
            stmt = stmt.where(operator(self._column(entry, table, name), value))
        return stmt

    def _order(self, entry: TableSpec, table: str, order_by: Iterable[str]):
        clauses = []
        for item in order_by:
            if item.startswith("-"):
                clauses.append(self._column(entry, table, item[1:]).desc())
            else:
                clauses.append(self._column(entry, table, item).asc())
        return clauses

    # -- transactions ------------------------------------------------------

    @contextmanager
    def atomic(self) -> Iterator["DataGateway"]:
        """Group several writes into one commit; any failure rolls all back."""
        self._atomic_depth += 1
        try:
            yield self
        except Exception:
            self._atomic_depth -= 1
            self.db.rollback()
            raise
        else:
            self._atomic_depth -= 1
            if self._atomic_depth == 0:
                self._commit("atomic", "commit")

    def _commit(self, table: str, operation: str) -> None:
        if self._atomic_depth:
            self._flush(table, operation)
            return
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self._fail(exc, table, operation)

    def _flush(self, table: str, operation: str) -> None:
        try:
            self.db.flush()
        except SQLAlchemyError as exc:
            self._fail(exc, table, operation)

    def _fail(self, exc: SQLAlchemyError, table: str, operation: str) -> NoReturn:
        logger.exception("Gateway %s on %s failed", operation, table)
        if not self._atomic_depth:
            self.db.rollback()
        raise GatewayError(f"{operation} on {table} failed", table=table, operation=operation) from exc

    # -- reads -------------------------------------------------------------

    def query(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        *,
        page: int | None = None,
        page_size: int | None = None,
        order_by: Sequence[str] = ("-created_date",),
        active_only: bool = True,
    ) -> QueryResult:
        entry = table_spec(table)
        size = page_size or settings.page_size
        if entry.tenant and self.ctx is None:
            return QueryResult.empty(page or 1, size)
        base = self._apply_filters(select(entry.model), entry, table, filters, active_only)
        try:
            total = self.db.scalar(select(func.count()).select_from(base.subquery())) or 0
            stmt = base.order_by(*self._order(entry, table, order_by))
            if page is not None:
                stmt = stmt.offset((max(page, 1) - 1) * size).limit(size)
            rows = list(self.db.scalars(stmt).unique())
        except SQLAlchemyError as exc:
            self._fail(exc, table, "query")
        if page is None:
            return QueryResult(rows=rows, total_count=total, page=1, page_size=max(total, 1))
        return QueryResult(rows=rows, total_count=total, page=max(page, 1), page_size=size)

    def maybe_get(
        self,
        table: str,
        filters: Mapping[str, Any],
        *,
        order_by: Sequence[str] = ("-created_date",),
        active_only: bool = True,
    ):
        """First matching row, or None when nothing matches."""
        entry = table_spec(table)
        if entry.tenant and self.ctx is None:
            return None
        stmt = self._apply_filters(select(entry.model), entry, table, filters, active_only)
        stmt = stmt.order_by(*self._order(entry, table, order_by)).limit(1)
        try:
            return self.db.scalars(stmt).unique().first()
        except SQLAlchemyError as exc:
            self._fail(exc, table, "select")

    def get(self, table: str, row_id: str, *, active_only: bool = True):
        row = self.maybe_get(table, {"id": row_id}, active_only=active_only)
        if row is None:
            raise NotFoundError(f"{table} row {row_id} not found", table=table, operation="select")
        return row

    # -- writes ------------------------------------------------------------

    def insert(self, table: str, values: Mapping[str, Any]):
        entry = table_spec(table)
        ctx = self.require_ctx(table, "insert") if entry.tenant else self.ctx
        row = entry.model(**dict(values))
        if entry.tenant:
            row.clinic_id = ctx.clinic_id
        if entry.soft_delete and getattr(row, "status", None) is None:
            row.status = RecordStatus.active
        row.created_date = utcnow()
        if ctx is not None:
            row.created_by_user = ctx.user_id
            row.created_by_ip = ctx.ip_address
        self.db.add(row)
        self._flush(table, "insert")
        log_event(
            self.db,
            ctx=ctx,
            action="create",
            entity_type=table,
            entity_id=row.id,
            after_obj=row,
        )
        self._commit(table, "insert")
        return row

    def update(self, table: str, row_id: str, patch: Mapping[str, Any]):
        entry = table_spec(table)
        ctx = self.require_ctx(table, "update") if entry.tenant else self.ctx
        row = self.get(table, row_id)
        before = snapshot_model(row)
        for key, value in patch.items():
            self._column(entry, table, key)
            setattr(row, key, value)
        self._stamp_update(row, ctx)
        self._flush(table, "update")
        log_event(
            self.db,
            ctx=ctx,
            action="update",
            entity_type=table,
            entity_id=row.id,
            before_data=before,
            after_obj=row,
        )
        self._commit(table, "update")
        return row

    def soft_delete(self, table: str, row_id: str, extra: Mapping[str, Any] | None = None):
        entry = table_spec(table)
        if not entry.soft_delete:
            raise GatewayError(f"{table} has no status flag", table=table, operation="soft_delete")
        patch = {"status": RecordStatus.inactive}
        patch.update(extra or {})
        ctx = self.require_ctx(table, "soft_delete") if entry.tenant else self.ctx
        row = self.get(table, row_id)
        before = snapshot_model(row)
        for key, value in patch.items():
            setattr(row, key, value)
        self._stamp_update(row, ctx)
        self._flush(table, "soft_delete")
        log_event(
            self.db,
            ctx=ctx,
            action="delete",
            entity_type=table,
            entity_id=row.id,
            before_data=before,
            after_obj=row,
        )
        self._commit(table, "soft_delete")
        return row

    def delete(self, table: str, row_id: str) -> None:
        """Physical delete; only used for rows without a status flag."""
        entry = table_spec(table)
        row = self.get(table, row_id, active_only=False)
        before = snapshot_model(row)
        self.db.delete(row)
        self._flush(table, "delete")
        log_event(
            self.db,
            ctx=self.ctx,
            action="purge",
            entity_type=table,
            entity_id=row_id,
            before_data=before,
        )
        self._commit(table, "delete")
        if entry.soft_delete:
            logger.info("Row %s physically removed from soft-delete table %s", row_id, table)

    def _stamp_update(self, row, ctx: ClinicContext | None) -> None:
        row.updated_date = utcnow()
        if ctx is not None:
            row.updated_by_user = ctx.user_id
            row.updated_by_ip = ctx.ip_address
