import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-long-enough-123456")
os.environ["IP_LOOKUP_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient

from odonto.db.session import SessionLocal, engine
from odonto.main import app
from odonto.models import Base
from odonto.routers.auth import LOGIN_IP_LIMITER, LOGIN_LIMITER
from odonto.services.catalog import ensure_default_catalog
from odonto.services.context import ClinicContext
from odonto.services.gateway import DataGateway
from odonto.services.users import register_account


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        ensure_default_catalog(session)
    finally:
        session.close()
    LOGIN_LIMITER.reset()
    LOGIN_IP_LIMITER.reset()
    yield


@pytest.fixture
def admin_credentials():
    return "admin@example.com", "ChangeMe123!"


@pytest.fixture
def api_client():
    with TestClient(app) as client:
        yield client


@pytest.fixture
def auth_headers(api_client, admin_credentials):
    email, password = admin_credentials
    response = api_client.post(
        "/auth/register",
        json={
            "email": email,
            "password": password,
            "name": "Admin Dentist",
            "clinic_name": "Clinica Sonrisa",
        },
    )
    assert response.status_code == 201, response.text
    token = response.json().get("access_token")
    assert token, "Missing access_token in register response"
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def ctx(db):
    user, clinic, _profile = register_account(
        db,
        email="service@example.com",
        password="ChangeMe123!",
        name="Service User",
        clinic_name="Service Clinic",
        ip_address="127.0.0.1",
    )
    return ClinicContext(
        clinic_id=clinic.id, user_id=user.id, ip_address="127.0.0.1", user_email=user.email
    )


@pytest.fixture
def gateway(db, ctx):
    return DataGateway(db, ctx)


@pytest.fixture
def create_patient(api_client, auth_headers):
    def _create(name="Ana Ruiz", **extra):
        res = api_client.post("/patients", json={"name": name, **extra}, headers=auth_headers)
        assert res.status_code == 201, res.text
        return res.json()

    return _create


@pytest.fixture
def create_dentist(api_client, auth_headers):
    def _create(name="Dr. Carlos Vega", **extra):
        res = api_client.post("/dentists", json={"name": name, **extra}, headers=auth_headers)
        assert res.status_code == 201, res.text
        return res.json()

    return _create
