from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from odonto.schemas.settings import ProfileOut


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=72)
    name: str = Field(min_length=2, max_length=200)
    clinic_name: str = Field(min_length=2, max_length=200)


class ChangePasswordRequest(BaseModel):
    old_password: str
    new_password: str = Field(min_length=8, max_length=72)


class ChangeEmailRequest(BaseModel):
    new_email: EmailStr


class MessageResponse(BaseModel):
    message: str


class MeOut(BaseModel):
    id: str
    email: str
    profile: Optional[ProfileOut] = None
