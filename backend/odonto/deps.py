from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from odonto.core.security import InvalidTokenError, decode_access_token
from odonto.core.settings import settings
from odonto.db.session import get_db
from odonto.models.user import User
from odonto.services.client_ip import resolve_client_ip
from odonto.services.context import ClinicContext
from odonto.services.gateway import DataGateway
from odonto.services.users import get_profile, get_user_by_id


def get_current_user(
    db: Session = Depends(get_db), authorization: str | None = Header(default=None)
) -> User:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    token = authorization.split(" ", 1)[1].strip()
    try:
        user_id = decode_access_token(token, secret=settings.secret_key, alg=settings.jwt_alg)
    except InvalidTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    user = get_user_by_id(db, user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Inactive user")
    return user


def get_optional_clinic_context(
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    x_request_id: str | None = Header(default=None),
) -> Optional[ClinicContext]:
    profile = get_profile(db, user.id)
    if profile is None or not profile.clinic_id:
        return None
    return ClinicContext(
        clinic_id=profile.clinic_id,
        user_id=user.id,
        ip_address=resolve_client_ip(request),
        user_email=user.email,
        request_id=x_request_id,
    )


def get_clinic_context(
    ctx: Optional[ClinicContext] = Depends(get_optional_clinic_context),
) -> ClinicContext:
    if ctx is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="No clinic linked to this account")
    return ctx


def get_read_gateway(
    db: Session = Depends(get_db),
    ctx: Optional[ClinicContext] = Depends(get_optional_clinic_context),
) -> DataGateway:
    return DataGateway(db, ctx)


def get_gateway(
    db: Session = Depends(get_db),
    ctx: ClinicContext = Depends(get_clinic_context),
) -> DataGateway:
    return DataGateway(db, ctx)
