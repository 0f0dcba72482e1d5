from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum, ForeignKey, String
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


class Base(DeclarativeBase):
    pass


def new_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecordStatus(str, enum.Enum):
    active = "1"
    inactive = "0"


def record_status_column() -> Mapped[RecordStatus]:
    return mapped_column(
        Enum(
            RecordStatus,
            name="record_status",
            native_enum=False,
            length=1,
            values_callable=lambda members: [member.value for member in members],
        ),
        default=RecordStatus.active,
        nullable=False,
        index=True,
    )


class AuditMixin:
    @declared_attr
    def created_by_user(cls) -> Mapped[str | None]:
        return mapped_column(ForeignKey("users.id"), nullable=True)

    @declared_attr
    def created_date(cls) -> Mapped[datetime]:
        return mapped_column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    @declared_attr
    def created_by_ip(cls) -> Mapped[str | None]:
        return mapped_column(String(64), nullable=True)

    @declared_attr
    def updated_by_user(cls) -> Mapped[str | None]:
        return mapped_column(ForeignKey("users.id"), nullable=True)

    @declared_attr
    def updated_date(cls) -> Mapped[datetime | None]:
        return mapped_column(DateTime(timezone=True), nullable=True)

    @declared_attr
    def updated_by_ip(cls) -> Mapped[str | None]:
        return mapped_column(String(64), nullable=True)


class TenantMixin:
    """Rows owned by a clinic and hidden from active lists once soft-deleted."""

    @declared_attr
    def clinic_id(cls) -> Mapped[str]:
        return mapped_column(ForeignKey("clinics.id"), nullable=False, index=True)

    @declared_attr
    def status(cls) -> Mapped[RecordStatus]:
        return record_status_column()

    @property
    def is_active(self) -> bool:
        return self.status == RecordStatus.active
