"""Registration and login schemas."""
from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field

from civicpulse.schemas.user import UserRead


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    phone: str | None = Field(default=None, max_length=32)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class UserEnvelope(BaseModel):
    user: UserRead


class AuthResponse(BaseModel):
    status: str = "success"
    token: str
    data: UserEnvelope
