import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from odonto.core.settings import settings, validate_settings
from odonto.db.session import SessionLocal, engine
from odonto.models import Base
from odonto.routers.appointments import router as appointments_router
from odonto.routers.audit import router as audit_router
from odonto.routers.auth import router as auth_router
from odonto.routers.dashboard import router as dashboard_router
from odonto.routers.dentists import router as dentists_router
from odonto.routers.odontograms import router as odontograms_router
from odonto.routers.patients import router as patients_router
from odonto.routers.settings import router as settings_router
from odonto.routers.treatments import router as treatments_router
from odonto.services.catalog import ensure_default_catalog
from odonto.services.gateway import ClinicRequiredError, GatewayError, NotFoundError
from odonto.services.odontograms import InvalidToothError, ReadOnlyVersionError

app = FastAPI(title="Odonto Clinic API", version="0.1.0")
logger = logging.getLogger("odonto.startup")

GENERIC_ERROR = "An error occurred, please try again."


def _field_name(loc: tuple) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path", "header")]
    return ".".join(parts) or "__root__"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors: dict[str, str] = {}
    for error in exc.errors():
        field = _field_name(tuple(error.get("loc", ())))
        errors.setdefault(field, error.get("msg", "Invalid value"))
    return JSONResponse(status_code=422, content={"detail": "Validation failed", "errors": errors})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": "Not found"})


@app.exception_handler(ClinicRequiredError)
async def clinic_required_handler(request: Request, exc: ClinicRequiredError):
    return JSONResponse(status_code=409, content={"detail": "No clinic linked to this account"})


@app.exception_handler(ReadOnlyVersionError)
async def read_only_version_handler(request: Request, exc: ReadOnlyVersionError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(InvalidToothError)
async def invalid_tooth_handler(request: Request, exc: InvalidToothError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    logger.error("Storage failure on %s (%s): %s", exc.table, exc.operation, exc)
    return JSONResponse(status_code=500, content={"detail": GENERIC_ERROR})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    request_id = request.headers.get("x-request-id")
    logger.exception("Unhandled server error", extra={"request_id": request_id})
    payload = {"detail": "Internal server error"}
    if request_id:
        payload["request_id"] = request_id
    return JSONResponse(status_code=500, content=payload)


@app.on_event("startup")
def startup():
    validate_settings(settings)
    Base.metadata.create_all(bind=engine)

    db: Session = SessionLocal()
    try:
        added = ensure_default_catalog(db)
        if added:
            logger.info("Treatment catalog ensured (%s added).", added)
    finally:
        db.close()


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(auth_router)
app.include_router(dashboard_router)
app.include_router(patients_router)
app.include_router(dentists_router)
app.include_router(appointments_router)
app.include_router(treatments_router)
app.include_router(odontograms_router)
app.include_router(settings_router)
app.include_router(audit_router)
