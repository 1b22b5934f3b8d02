# -*- coding: utf-8 -*-
"""MIT storage helpers (SQLite).

All reads and writes are filtered by ``user_id``. The per-day cap is checked
and the row inserted inside one ``BEGIN IMMEDIATE`` transaction so two
concurrent creates cannot both squeeze in as the last slot.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings
from .models import MIT

logger = logging.getLogger(__name__)


class MITLimitReachedError(ValueError):
    def __init__(self, date: str, limit: int) -> None:
        super().__init__(f"You've reached the maximum of {limit} MITs for {date}")
        self.date = date
        self.limit = limit


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


def _row_to_mit(row: Dict[str, Any]) -> MIT:
    data = dict(row)
    data["completed"] = bool(data.get("completed"))
    return MIT.model_validate(data)


def list_mits(*, user_id: str, date: str) -> List[MIT]:
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            """
            SELECT * FROM mits
            WHERE user_id = ? AND date = ?
            ORDER BY created_at ASC, rowid ASC
            """,
            (user_id, date),
        ).fetchall()
        return [_row_to_mit(r) for r in rows]


def get_mit(*, user_id: str, mit_id: str) -> Optional[MIT]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute("SELECT * FROM mits WHERE id = ? AND user_id = ?", (mit_id, user_id)).fetchone()
        return _row_to_mit(row) if row else None


def create_mit(*, user_id: str, date: str, title: str) -> MIT:
    limit = int(settings.max_mits_per_day)
    now = _utc_now()
    record = {
        "id": str(uuid4()),
        "user_id": user_id,
        "date": date,
        "title": title.strip(),
        "completed": 0,
        "completed_at": None,
        "created_at": now,
        "updated_at": now,
    }
    with db_conn(settings.app_db_path) as conn:
        conn.execute("BEGIN IMMEDIATE")
        (count,) = conn.execute(
            "SELECT COUNT(*) FROM mits WHERE user_id = ? AND date = ?", (user_id, date)
        ).fetchone()
        if count >= limit:
            conn.rollback()
            raise MITLimitReachedError(date, limit)
        conn.execute(
            """
            INSERT INTO mits (id, user_id, date, title, completed, completed_at, created_at, updated_at)
            VALUES (:id, :user_id, :date, :title, :completed, :completed_at, :created_at, :updated_at)
            """,
            record,
        )
    logger.info("Created MIT %s for %s on %s", record["id"], user_id, date)
    return _row_to_mit(record)


def set_mit_completed(*, user_id: str, mit_id: str, completed: bool) -> Optional[MIT]:
    now = _utc_now()
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute(
            """
            UPDATE mits
            SET completed = ?, completed_at = ?, updated_at = ?
            WHERE id = ? AND user_id = ?
            """,
            (1 if completed else 0, now if completed else None, now, mit_id, user_id),
        )
        if cur.rowcount == 0:
            return None
        row = conn.execute("SELECT * FROM mits WHERE id = ?", (mit_id,)).fetchone()
    return _row_to_mit(row)


def delete_mit(*, user_id: str, mit_id: str) -> bool:
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute("DELETE FROM mits WHERE id = ? AND user_id = ?", (mit_id, user_id))
        deleted = cur.rowcount > 0
    if deleted:
        logger.info("Deleted MIT %s for %s", mit_id, user_id)
    return deleted
