# -*- coding: utf-8 -*-
"""Auth — Pydantic models."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from .storage import normalize_email


class Credentials(BaseModel):
    email: str = Field(..., min_length=3, max_length=254, description="Lower-cased before lookup")
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def _normalize(cls, v: str) -> str:
        v = normalize_email(v)
        if "@" not in v:
            raise ValueError("Email must contain '@'")
        return v


class RegisterRequest(Credentials):
    password: str = Field(..., min_length=8, max_length=128)


class LoginRequest(Credentials):
    pass


class UserPublic(BaseModel):
    id: str
    email: str
    created_at: str


class AuthResponse(BaseModel):
    """Body of register / login / refresh; the same token is also set as the session cookie."""
    user: UserPublic
    token: str
    expires_at: int = Field(..., description="Unix timestamp (seconds)")


class LogoutResponse(BaseModel):
    status: str = "ok"
