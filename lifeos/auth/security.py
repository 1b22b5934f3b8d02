# -*- coding: utf-8 -*-
"""Auth — password hashing, signed session tokens and the Session dependency.

Handlers never look up "the current user" from ambient state. The gate
middleware (or the dependency below) builds a :class:`Session` from the
request and FastAPI passes it down explicitly.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request

from ..config import settings
from .storage import get_user_by_id

TOKEN_COOKIE_NAME = "lifeos_token"

# Password hashing (stdlib pbkdf2_hmac).
_PBKDF2_ALG = "sha256"
_PBKDF2_ITERATIONS = 200_000


@dataclass(frozen=True)
class Session:
    user_id: str
    email: str
    token: str
    issued_at: int
    expires_at: int


def hash_password(password: str) -> str:
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac(_PBKDF2_ALG, password.encode("utf-8"), salt, _PBKDF2_ITERATIONS)
    return f"pbkdf2_{_PBKDF2_ALG}${_PBKDF2_ITERATIONS}${_b64url_encode(salt)}${_b64url_encode(dk)}"


def verify_password(password: str, password_hash: str) -> bool:
    try:
        scheme, iter_s, salt_b64, dk_b64 = password_hash.split("$", 3)
        if not scheme.startswith("pbkdf2_"):
            return False
        alg = scheme.split("_", 1)[1]
        actual = hashlib.pbkdf2_hmac(alg, password.encode("utf-8"), _b64url_decode(salt_b64), int(iter_s))
        return hmac.compare_digest(actual, _b64url_decode(dk_b64))
    except (ValueError, TypeError):
        return False


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def open_session(*, user_id: str, email: str) -> Session:
    """Issue a fresh token for ``user_id``; used by login, register and refresh."""
    now = _utc_now()
    exp = now + timedelta(days=int(settings.token_ttl_days))
    payload = {
        "sub": user_id,
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    token = _jwt_encode(payload, settings.jwt_secret)
    return Session(
        user_id=user_id,
        email=email,
        token=token,
        issued_at=payload["iat"],
        expires_at=payload["exp"],
    )


def decode_token(token: str) -> Dict[str, Any]:
    try:
        payload = _jwt_decode(token, settings.jwt_secret)
    except (ValueError, UnicodeDecodeError) as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc
    exp = int(payload.get("exp") or 0)
    if exp and exp < int(_utc_now().timestamp()):
        raise HTTPException(status_code=401, detail="Token expired")
    return payload


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64url_decode(data: str) -> bytes:
    pad = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode((data + pad).encode("ascii"))


_JWT_HEADER = {"alg": "HS256", "typ": "JWT"}


def _segment(obj: Dict[str, Any]) -> str:
    return _b64url_encode(json.dumps(obj, separators=(",", ":")).encode("utf-8"))


def _load_segment(segment: str) -> Dict[str, Any]:
    obj = json.loads(_b64url_decode(segment).decode("utf-8"))
    if not isinstance(obj, dict):
        raise ValueError("token segment is not an object")
    return obj


def _signature(secret: str, head: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), head.encode("ascii"), hashlib.sha256).digest()


def _jwt_encode(payload: Dict[str, Any], secret: str) -> str:
    head = f"{_segment(_JWT_HEADER)}.{_segment(payload)}"
    return f"{head}.{_b64url_encode(_signature(secret, head))}"


def _jwt_decode(token: str, secret: str) -> Dict[str, Any]:
    head, _, sig_b64 = token.rpartition(".")
    if head.count(".") != 1:
        raise ValueError("expected header.payload.signature")
    if not hmac.compare_digest(_signature(secret, head), _b64url_decode(sig_b64)):
        raise ValueError("bad signature")
    header_b64, payload_b64 = head.split(".")
    if _load_segment(header_b64).get("alg") != _JWT_HEADER["alg"]:
        raise ValueError("unsupported token algorithm")
    return _load_segment(payload_b64)


def get_token_from_request(request: Request) -> Optional[str]:
    auth = request.headers.get("authorization") or ""
    if auth.lower().startswith("bearer "):
        token = auth.split(" ", 1)[1].strip()
        return token or None
    cookie = request.cookies.get(TOKEN_COOKIE_NAME)
    return cookie or None


def get_session_from_request(request: Request) -> Session:
    # If middleware already authenticated, reuse it.
    session = getattr(request.state, "session", None)
    if session:
        return session

    token = get_token_from_request(request)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    payload = decode_token(token)
    user_id = str(payload.get("sub") or "")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token")

    user_row = get_user_by_id(user_id)
    if not user_row:
        raise HTTPException(status_code=401, detail="User not found")

    session = Session(
        user_id=user_row["id"],
        email=user_row["email"],
        token=token,
        issued_at=int(payload.get("iat") or 0),
        expires_at=int(payload.get("exp") or 0),
    )
    request.state.session = session
    return session


def find_session(request: Request) -> Optional[Session]:
    """Like :func:`get_session_from_request` but returns ``None`` instead of raising."""
    try:
        return get_session_from_request(request)
    except HTTPException:
        return None


def get_current_session(session: Session = Depends(get_session_from_request)) -> Session:
    return session
