from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from odonto.core.security import hash_password, verify_password
from odonto.models.base import RecordStatus, utcnow
from odonto.models.clinic import Clinic, ProfileRole, UserProfile
from odonto.models.user import User
from odonto.services.audit import log_event
from odonto.services.gateway import DataGateway

logger = logging.getLogger("odonto.users")


class EmailAlreadyRegisteredError(Exception):
    pass


def normalize_email(email: str) -> str:
    return email.lower().strip()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(User.email == normalize_email(email)))


def get_user_by_id(db: Session, user_id: str) -> User | None:
    return db.scalar(select(User).where(User.id == user_id))


def authenticate(db: Session, email: str, password: str) -> User | None:
    user = get_user_by_email(db, email)
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def get_profile(db: Session, user_id: str) -> UserProfile | None:
    """The user's profile, or None while it has not been created yet."""
    return db.scalar(
        select(UserProfile).where(
            UserProfile.user_id == user_id, UserProfile.status == RecordStatus.active
        )
    )


def register_account(
    db: Session,
    *,
    email: str,
    password: str,
    name: str,
    clinic_name: str,
    ip_address: str,
) -> tuple[User, Clinic, UserProfile]:
    """Create the login, its clinic and an admin profile in one transaction."""
    email = normalize_email(email)
    if get_user_by_email(db, email):
        raise EmailAlreadyRegisteredError(email)
    now = utcnow()
    user = User(email=email, hashed_password=hash_password(password), is_active=True)
    try:
        db.add(user)
        db.flush()
        clinic = Clinic(
            name=clinic_name,
            email=email,
            status=RecordStatus.active,
            created_by_user=user.id,
            created_by_ip=ip_address,
            created_date=now,
        )
        db.add(clinic)
        db.flush()
        profile = UserProfile(
            user_id=user.id,
            clinic_id=clinic.id,
            name=name,
            email=email,
            role=ProfileRole.admin,
            status=RecordStatus.active,
            created_by_user=user.id,
            created_by_ip=ip_address,
            created_date=now,
        )
        db.add(profile)
        db.flush()
        log_event(
            db,
            ctx=None,
            actor_user_id=user.id,
            actor_email=email,
            ip_address=ip_address,
            action="register",
            entity_type="clinics",
            entity_id=clinic.id,
            after_obj=clinic,
        )
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise EmailAlreadyRegisteredError(email) from exc
    db.refresh(user)
    logger.info("Registered clinic %s for %s", clinic.id, email)
    return user, clinic, profile


def set_password(db: Session, *, user: User, new_password: str) -> User:
    user.hashed_password = hash_password(new_password)
    user.updated_at = utcnow()
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def change_email(db: Session, gateway: DataGateway, *, user: User, new_email: str) -> User:
    new_email = normalize_email(new_email)
    existing = get_user_by_email(db, new_email)
    if existing and existing.id != user.id:
        raise EmailAlreadyRegisteredError(new_email)
    profile = get_profile(db, user.id)
    with gateway.atomic():
        user.email = new_email
        user.updated_at = utcnow()
        db.add(user)
        if profile is not None:
            gateway.update("user_profiles", profile.id, {"email": new_email})
    db.refresh(user)
    return user


def get_clinic(gateway: DataGateway) -> Clinic | None:
    if gateway.ctx is None:
        return None
    return gateway.maybe_get("clinics", {"id": gateway.ctx.clinic_id})


def update_clinic(gateway: DataGateway, patch: Mapping[str, Any]) -> Clinic:
    ctx = gateway.require_ctx("clinics", "update")
    return gateway.update("clinics", ctx.clinic_id, patch)


def update_profile(gateway: DataGateway, profile: UserProfile, patch: Mapping[str, Any]) -> UserProfile:
    return gateway.update("user_profiles", profile.id, patch)
