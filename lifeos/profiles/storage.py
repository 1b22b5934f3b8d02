# -*- coding: utf-8 -*-
"""Profiles — DB storage helpers (last write wins)."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..app_db import db_conn
from ..config import settings
from .models import Profile, ProfileSetupRequest, ProfileUpdateRequest

_UPDATABLE = ("first_name", "gender", "height", "weight", "bmr", "timezone", "avatar_url")
# An explicit null clears these; the rest keep their value when sent as null.
_CLEARABLE = ("first_name", "gender", "avatar_url")


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


def _row_to_profile(row: Dict[str, Any]) -> Profile:
    return Profile.model_validate(row)


def get_profile(user_id: str) -> Optional[Profile]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute("SELECT * FROM profiles WHERE id = ?", (user_id,)).fetchone()
        return _row_to_profile(dict(row)) if row else None


def upsert_profile(user_id: str, request: ProfileSetupRequest) -> Profile:
    now = _utc_now()
    values = request.model_dump(mode="json")
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO profiles (id, first_name, gender, height, weight, bmr, timezone, avatar_url, created_at, updated_at)
            VALUES (:id, :first_name, :gender, :height, :weight, :bmr, :timezone, :avatar_url, :now, :now)
            ON CONFLICT(id) DO UPDATE SET
                first_name = COALESCE(excluded.first_name, profiles.first_name),
                gender = excluded.gender,
                height = excluded.height,
                weight = excluded.weight,
                bmr = excluded.bmr,
                timezone = excluded.timezone,
                avatar_url = COALESCE(excluded.avatar_url, profiles.avatar_url),
                updated_at = excluded.updated_at
            """,
            {"id": user_id, "now": now, **values},
        )
        row = conn.execute("SELECT * FROM profiles WHERE id = ?", (user_id,)).fetchone()
    return _row_to_profile(dict(row))


def update_profile(user_id: str, request: ProfileUpdateRequest) -> Optional[Profile]:
    """Apply only the fields the caller sent. Returns None if there is no profile yet."""
    changes = {
        key: value
        for key, value in request.model_dump(mode="json", exclude_unset=True).items()
        if key in _UPDATABLE and (value is not None or key in _CLEARABLE)
    }
    with db_conn(settings.app_db_path) as conn:
        if changes:
            assignments = ", ".join(f"{key} = :{key}" for key in changes)
            conn.execute(
                f"UPDATE profiles SET {assignments}, updated_at = :updated_at WHERE id = :id",
                {**changes, "updated_at": _utc_now(), "id": user_id},
            )
        row = conn.execute("SELECT * FROM profiles WHERE id = ?", (user_id,)).fetchone()
    return _row_to_profile(dict(row)) if row else None
