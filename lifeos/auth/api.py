# -*- coding: utf-8 -*-
"""Auth — API endpoints.

Session lifecycle: register/login open a session, refresh re-issues the token
for the current session, logout tears it down by clearing the cookie.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from ..config import settings
from .models import AuthResponse, LoginRequest, LogoutResponse, RegisterRequest, UserPublic
from .security import TOKEN_COOKIE_NAME, Session, get_current_session, hash_password, open_session, verify_password
from .storage import EmailTakenError, create_user, get_user_by_email, get_user_by_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _user_public(row: dict) -> UserPublic:
    return UserPublic(id=row["id"], email=row["email"], created_at=row["created_at"])


def _set_auth_cookie(resp: Response, token: str) -> None:
    max_age = int(settings.token_ttl_days) * 24 * 60 * 60
    resp.set_cookie(
        TOKEN_COOKIE_NAME,
        token,
        httponly=True,
        secure=bool(settings.cookie_secure),
        samesite="lax",
        max_age=max_age,
        path="/",
    )


def _auth_response(user: dict, session: Session, response: Response) -> AuthResponse:
    _set_auth_cookie(response, session.token)
    return AuthResponse(user=_user_public(user), token=session.token, expires_at=session.expires_at)


@router.post("/register", response_model=AuthResponse, summary="Register a new user")
def register(request: RegisterRequest, response: Response):
    if get_user_by_email(request.email):
        raise HTTPException(status_code=400, detail="Email already registered")
    try:
        user = create_user(email=request.email, password_hash=hash_password(request.password))
    except EmailTakenError:
        raise HTTPException(status_code=400, detail="Email already registered")

    logger.info("Registered user %s", user["id"])
    session = open_session(user_id=user["id"], email=user["email"])
    return _auth_response(user, session, response)


@router.post("/login", response_model=AuthResponse, summary="Login")
def login(request: LoginRequest, response: Response):
    user = get_user_by_email(request.email)
    if not user or not verify_password(request.password, user["password_hash"]):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    logger.info("User %s logged in", user["id"])
    session = open_session(user_id=user["id"], email=user["email"])
    return _auth_response(user, session, response)


@router.post("/refresh", response_model=AuthResponse, summary="Re-issue the session token")
def refresh(response: Response, session: Session = Depends(get_current_session)):
    user = get_user_by_id(session.user_id)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    renewed = open_session(user_id=user["id"], email=user["email"])
    return _auth_response(user, renewed, response)


@router.post("/logout", response_model=LogoutResponse, summary="Logout")
def logout(response: Response):
    response.delete_cookie(TOKEN_COOKIE_NAME, path="/")
    return LogoutResponse()


@router.get("/me", response_model=UserPublic, summary="Get current user")
def me(session: Session = Depends(get_current_session)):
    user = get_user_by_id(session.user_id)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return _user_public(user)
