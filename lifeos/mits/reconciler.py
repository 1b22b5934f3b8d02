# -*- coding: utf-8 -*-
"""Client-side MIT list with optimistic updates.

The reconciler holds today's (at most ``limit``) MITs and applies add / toggle
/ delete against a remote store. Toggle and delete show their effect at once
and are reconciled when the remote answers; add waits for the server record
but clears the draft input straight away.

Reconciliation is per item, not a whole-list snapshot:

- every item keeps the last record the server confirmed (``_confirmed``),
  and confirmations older than the one already held (by ``updated_at``) are
  ignored;
- every item counts its in-flight operations; while any is pending the
  optimistic state stays on screen;
- when the last pending operation on an item settles, success or failure,
  the item is reset to its confirmed record (a failed delete puts it back
  at the position it was removed from).

This way a failure can never clobber the effect of a later operation that
succeeded, whatever order the responses arrive in.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Iterable, List, Optional, Protocol, Set, Tuple

from ..config import settings
from .models import MIT

logger = logging.getLogger(__name__)


class MITRemote(Protocol):
    async def list(self, date: str) -> List[MIT]: ...

    async def create(self, date: str, title: str) -> MIT: ...

    async def set_completed(self, mit_id: str, completed: bool) -> MIT: ...

    async def delete(self, mit_id: str) -> None: ...


class OpState(str, Enum):
    idle = "idle"
    in_flight = "in_flight"
    applied = "applied"
    reverted = "reverted"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


def _version(record: MIT) -> datetime:
    # Parsed, so "...:05Z" and "...:05.500000Z" order by time, not by text.
    return datetime.fromisoformat(record.updated_at.replace("Z", "+00:00"))


class MITReconciler:
    def __init__(
        self,
        remote: MITRemote,
        date: str,
        items: Iterable[MIT] = (),
        *,
        limit: Optional[int] = None,
    ) -> None:
        self.remote = remote
        self.date = date
        self.limit = int(limit or settings.max_mits_per_day)
        self.draft = ""
        self.adding = False
        self.last_outcome = OpState.idle
        self._load(items)

    def _load(self, items: Iterable[MIT]) -> None:
        self._items: List[MIT] = list(items)
        self._confirmed: Dict[str, MIT] = {m.id: m for m in self._items}
        self._pending: Dict[str, int] = {}
        self._removed_at: Dict[str, int] = {}
        self._deleted: Set[str] = set()

    # ---- read side ----

    @property
    def items(self) -> Tuple[MIT, ...]:
        return tuple(self._items)

    @property
    def busy(self) -> bool:
        return self.adding or any(self._pending.values())

    @property
    def slots_used(self) -> int:
        # Items hidden by an unconfirmed delete may come back, so they keep their slot.
        return len(self._items) + len(self._removed_at)

    @property
    def can_add(self) -> bool:
        return not self.busy and self.slots_used < self.limit

    def _index(self, mit_id: str) -> Optional[int]:
        for i, item in enumerate(self._items):
            if item.id == mit_id:
                return i
        return None

    # ---- bookkeeping ----

    def _begin(self, mit_id: str) -> None:
        self._pending[mit_id] = self._pending.get(mit_id, 0) + 1
        self.last_outcome = OpState.in_flight

    def _confirm(self, record: MIT) -> None:
        if record.id in self._deleted:
            return
        current = self._confirmed.get(record.id)
        if current is None or _version(record) >= _version(current):
            self._confirmed[record.id] = record

    def _finish(self, mit_id: str) -> None:
        left = self._pending.get(mit_id, 0) - 1
        if left > 0:
            self._pending[mit_id] = left
            return
        self._pending.pop(mit_id, None)
        self._settle(mit_id)

    def _settle(self, mit_id: str) -> None:
        index = self._index(mit_id)
        confirmed = self._confirmed.get(mit_id)
        removed_at = self._removed_at.pop(mit_id, None)

        if mit_id in self._deleted or confirmed is None:
            self._confirmed.pop(mit_id, None)
            if index is not None:
                del self._items[index]
            return

        if index is None:
            position = len(self._items) if removed_at is None else min(removed_at, len(self._items))
            self._items.insert(position, confirmed)
        else:
            self._items[index] = confirmed

    # ---- operations ----

    async def add(self, title: Optional[str] = None) -> Optional[MIT]:
        """Create an MIT from ``title`` (or the current draft).

        No-op returning None when the title is blank, the day is full or
        any operation (add, toggle or delete) is still in flight.
        """
        text = (self.draft if title is None else title).strip()
        if not text or not self.can_add:
            return None

        self.draft = ""
        self.adding = True
        self.last_outcome = OpState.in_flight
        try:
            created = await self.remote.create(self.date, text)
        except asyncio.CancelledError:
            self.draft = text
            self.last_outcome = OpState.reverted
            raise
        except Exception as exc:
            logger.error("Error adding MIT: %s", exc)
            self.draft = text
            self.last_outcome = OpState.reverted
            return None
        finally:
            self.adding = False

        self._confirmed[created.id] = created
        self._items.append(created)
        self.last_outcome = OpState.applied
        return created

    async def toggle(self, mit_id: str) -> Optional[MIT]:
        """Flip ``completed`` locally, then persist it. Returns the optimistic item."""
        index = self._index(mit_id)
        if index is None:
            return None

        current = self._items[index]
        completed = not current.completed
        optimistic = current.model_copy(
            update={"completed": completed, "completed_at": _utc_now() if completed else None}
        )
        self._items[index] = optimistic
        self._begin(mit_id)

        outcome = OpState.reverted
        try:
            record = await self.remote.set_completed(mit_id, completed)
        except Exception as exc:
            logger.error("Error toggling MIT %s: %s", mit_id, exc)
        else:
            self._confirm(record)
            outcome = OpState.applied
        finally:
            self._finish(mit_id)
        self.last_outcome = outcome
        return optimistic

    async def delete(self, mit_id: str) -> bool:
        """Remove the item locally, then delete it remotely. Returns False for unknown ids."""
        index = self._index(mit_id)
        if index is None:
            return False

        del self._items[index]
        self._removed_at[mit_id] = index
        self._begin(mit_id)

        outcome = OpState.reverted
        try:
            await self.remote.delete(mit_id)
        except Exception as exc:
            logger.error("Error deleting MIT %s: %s", mit_id, exc)
        else:
            self._deleted.add(mit_id)
            outcome = OpState.applied
        finally:
            self._finish(mit_id)
        self.last_outcome = outcome
        return True

    async def refresh(self) -> bool:
        """Replace local state with the server's list; skipped while anything is in flight."""
        if self.busy:
            return False
        items = await self.remote.list(self.date)
        if self.busy:
            return False
        self._load(items)
        return True
