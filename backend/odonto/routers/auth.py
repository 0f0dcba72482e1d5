from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from odonto.core.security import create_access_token, verify_password
from odonto.core.settings import settings
from odonto.db.session import get_db
from odonto.deps import get_current_user, get_read_gateway
from odonto.models.user import User
from odonto.schemas.auth import (
    ChangeEmailRequest,
    ChangePasswordRequest,
    LoginRequest,
    MeOut,
    MessageResponse,
    RegisterRequest,
    Token,
)
from odonto.services.audit import log_event
from odonto.services.client_ip import resolve_client_ip
from odonto.services.gateway import DataGateway
from odonto.services.rate_limit import SimpleRateLimiter
from odonto.services.users import (
    EmailAlreadyRegisteredError,
    authenticate,
    change_email,
    get_profile,
    get_user_by_email,
    register_account,
    set_password,
)

router = APIRouter(prefix="/auth", tags=["auth"])

LOGIN_LIMITER = SimpleRateLimiter(max_events=settings.login_attempts_per_minute, window_seconds=60)
LOGIN_IP_LIMITER = SimpleRateLimiter(
    max_events=settings.login_attempts_per_minute * 2, window_seconds=60
)


def _issue_token(user: User) -> Token:
    token = create_access_token(
        subject=user.id,
        secret=settings.secret_key,
        alg=settings.jwt_alg,
        expires_minutes=settings.access_token_expire_minutes,
        extra={"email": user.email},
    )
    return Token(access_token=token)


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, request: Request, db: Session = Depends(get_db)):
    try:
        user, _clinic, _profile = register_account(
            db,
            email=payload.email,
            password=payload.password,
            name=payload.name,
            clinic_name=payload.clinic_name,
            ip_address=resolve_client_ip(request),
        )
    except EmailAlreadyRegisteredError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
    return _issue_token(user)


@router.post("/login", response_model=Token)
def login(payload: LoginRequest, request: Request, db: Session = Depends(get_db)):
    ip_address = request.client.host if request.client else "unknown"
    rate_key = f"{ip_address}:{payload.email.lower().strip()}"
    for limiter, key in ((LOGIN_LIMITER, rate_key), (LOGIN_IP_LIMITER, ip_address)):
        if not limiter.allow(key):
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many login attempts",
                headers={"Retry-After": str(limiter.retry_after(key))},
            )

    user = get_user_by_email(db, payload.email)
    if user and not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account disabled")
    if not authenticate(db, payload.email, payload.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return _issue_token(user)


@router.get("/me", response_model=MeOut)
def me(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return {"id": user.id, "email": user.email, "profile": get_profile(db, user.id)}


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    payload: ChangePasswordRequest,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if not verify_password(payload.old_password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect")
    log_event(
        db,
        ctx=None,
        actor_user_id=user.id,
        actor_email=user.email,
        ip_address=resolve_client_ip(request),
        action="password_change",
        entity_type="user",
        entity_id=user.id,
    )
    set_password(db, user=user, new_password=payload.new_password)
    return MessageResponse(message="Password updated")


@router.post("/change-email", response_model=MeOut)
def update_email(
    payload: ChangeEmailRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    gateway: DataGateway = Depends(get_read_gateway),
):
    try:
        user = change_email(db, gateway, user=user, new_email=payload.new_email)
    except EmailAlreadyRegisteredError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
    return {"id": user.id, "email": user.email, "profile": get_profile(db, user.id)}


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    log_event(
        db,
        ctx=None,
        actor_user_id=user.id,
        actor_email=user.email,
        ip_address=resolve_client_ip(request),
        action="logout",
        entity_type="user",
        entity_id=user.id,
    )
    db.commit()
    return MessageResponse(message="Signed out")
