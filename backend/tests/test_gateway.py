import pytest
from sqlalchemy import select

from odonto.core.security import create_access_token, hash_password
from odonto.core.settings import settings
from odonto.models.audit_log import AuditLog
from odonto.models.base import RecordStatus
from odonto.models.user import User
from odonto.services.context import DEFAULT_IP, ClinicContext
from odonto.services.gateway import ClinicRequiredError, DataGateway, GatewayError, NotFoundError


def test_context_requires_ids():
    with pytest.raises(ValueError):
        ClinicContext(clinic_id="", user_id="u1")
    with pytest.raises(ValueError):
        ClinicContext(clinic_id="c1", user_id="")
    assert ClinicContext(clinic_id="c1", user_id="u1", ip_address="").ip_address == DEFAULT_IP


def test_insert_stamps_tenant_and_audit_fields(gateway, ctx):
    row = gateway.insert("patients", {"name": "Ana Ruiz"})
    assert row.clinic_id == ctx.clinic_id
    assert row.status == RecordStatus.active
    assert row.created_by_user == ctx.user_id
    assert row.created_by_ip == "127.0.0.1"
    assert row.created_date is not None


def test_update_stamps_updater(gateway, ctx):
    row = gateway.insert("patients", {"name": "Ana Ruiz"})
    updated = gateway.update("patients", row.id, {"phone": "600123456"})
    assert updated.phone == "600123456"
    assert updated.updated_by_user == ctx.user_id
    assert updated.updated_date is not None


def test_soft_delete_hides_row(gateway):
    keep = gateway.insert("patients", {"name": "Ana Ruiz"})
    drop = gateway.insert("patients", {"name": "Luis Mora"})
    assert gateway.query("patients").total_count == 2

    gateway.soft_delete("patients", drop.id)

    result = gateway.query("patients")
    assert result.total_count == 1
    assert [row.id for row in result.rows] == [keep.id]
    with pytest.raises(NotFoundError):
        gateway.get("patients", drop.id)
    assert gateway.get("patients", drop.id, active_only=False).status == RecordStatus.inactive
    assert gateway.query("patients", active_only=False).total_count == 2


def test_filters_and_ordering(gateway):
    for name in ("Carla", "ana", "Bruno"):
        gateway.insert("patients", {"name": name})
    names = [row.name for row in gateway.query("patients", order_by=("name",)).rows]
    assert names == sorted(names)
    assert [row.name for row in gateway.query("patients", {"name__ilike": "AN"}).rows] == ["ana"]
    assert gateway.query("patients", {"name__in": ["Carla", "Bruno"]}).total_count == 2
    assert gateway.query("patients", {"email": None}).total_count == 3
    assert gateway.query("patients", {"email__ne": None}).total_count == 0


def test_paging_totals(gateway):
    for index in range(5):
        gateway.insert("patients", {"name": f"Patient {index}"})
    result = gateway.query("patients", page=2, page_size=2)
    assert len(result.rows) == 2
    assert result.total_count == 5
    assert result.total_pages == 3


def test_unknown_filter_rejected(gateway):
    with pytest.raises(GatewayError):
        gateway.query("patients", {"name__regex": "A"})
    with pytest.raises(GatewayError):
        gateway.query("patients", {"shoe_size": 42})
    with pytest.raises(GatewayError):
        gateway.query("invoices")


def test_rows_scoped_to_clinic(db, gateway, ctx):
    row = gateway.insert("patients", {"name": "Ana Ruiz"})
    other = DataGateway(db, ClinicContext(clinic_id="another-clinic", user_id=ctx.user_id))
    assert other.query("patients").total_count == 0
    assert other.maybe_get("patients", {"id": row.id}) is None


def test_without_clinic_reads_are_empty_and_writes_fail(db):
    gateway = DataGateway(db, None)
    result = gateway.query("patients")
    assert result.rows == []
    assert result.total_pages == 1
    assert gateway.maybe_get("patients", {"name": "Ana Ruiz"}) is None
    with pytest.raises(NotFoundError):
        gateway.get("patients", "anything")
    with pytest.raises(ClinicRequiredError):
        gateway.insert("patients", {"name": "Ana Ruiz"})


def test_atomic_rolls_back_every_write(gateway):
    with pytest.raises(RuntimeError):
        with gateway.atomic():
            gateway.insert("patients", {"name": "Ana Ruiz"})
            gateway.insert("patients", {"name": "Luis Mora"})
            raise RuntimeError("boom")
    assert gateway.query("patients").total_count == 0


def test_storage_failure_becomes_gateway_error(gateway):
    with pytest.raises(GatewayError) as excinfo:
        gateway.insert("patients", {"name": None})
    assert excinfo.value.table == "patients"
    assert excinfo.value.operation == "insert"
    assert gateway.query("patients").total_count == 0


def test_mutations_are_audited(db, gateway, ctx):
    row = gateway.insert("dentists", {"name": "Dr. Carlos Vega"})
    gateway.update("dentists", row.id, {"specialty": "Ortodoncia"})
    gateway.soft_delete("dentists", row.id)

    entries = list(
        db.scalars(select(AuditLog).where(AuditLog.entity_id == row.id).order_by(AuditLog.id))
    )
    assert [entry.action for entry in entries] == ["create", "update", "delete"]
    assert all(entry.clinic_id == ctx.clinic_id for entry in entries)
    assert entries[1].before_json["specialty"] is None
    assert entries[1].after_json["specialty"] == "Ortodoncia"


def test_account_without_clinic(api_client, db):
    user = User(email="loner@example.com", hashed_password=hash_password("ChangeMe123!"))
    db.add(user)
    db.commit()
    token = create_access_token(
        subject=user.id,
        secret=settings.secret_key,
        alg=settings.jwt_alg,
        expires_minutes=settings.access_token_expire_minutes,
    )
    headers = {"Authorization": f"Bearer {token}"}

    res = api_client.get("/patients", headers=headers)
    assert res.status_code == 200, res.text
    assert res.json()["items"] == []

    res = api_client.post("/patients", json={"name": "Ana Ruiz"}, headers=headers)
    assert res.status_code == 409, res.text

    res = api_client.get("/dashboard/metrics", headers=headers)
    assert res.status_code == 200, res.text
    assert res.json()["total_patients"] == 0
