# -*- coding: utf-8 -*-
"""HTTP remote for :class:`~lifeos.mits.reconciler.MITReconciler` (talks to /api/mits)."""

from __future__ import annotations

from typing import List, Optional

import httpx

from ..config import settings
from .models import MIT, MITListResponse


class MITApiError(RuntimeError):
    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


def _raise_for_status(resp: httpx.Response) -> None:
    if resp.status_code < 400:
        return
    try:
        body = resp.json()
        detail = body.get("detail") if isinstance(body, dict) else body
    except ValueError:
        detail = None
    raise MITApiError(resp.status_code, str(detail or resp.reason_phrase))


class HttpMITRemote:
    """Bearer-token client for the MIT endpoints.

    Pass an existing ``httpx.AsyncClient`` (e.g. one bound to an ASGI app in
    tests) or let the remote open its own against ``settings.api_base_url``.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=(base_url or settings.api_base_url).rstrip("/"),
            timeout=30,
            follow_redirects=True,
        )
        self._headers = {"Authorization": f"Bearer {token}"}

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpMITRemote":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def list(self, date: str) -> List[MIT]:
        resp = await self._client.get("/api/mits", params={"date": date}, headers=self._headers)
        _raise_for_status(resp)
        return MITListResponse.model_validate(resp.json()).items

    async def create(self, date: str, title: str) -> MIT:
        resp = await self._client.post("/api/mits", json={"date": date, "title": title}, headers=self._headers)
        _raise_for_status(resp)
        return MIT.model_validate(resp.json())

    async def set_completed(self, mit_id: str, completed: bool) -> MIT:
        resp = await self._client.patch(f"/api/mits/{mit_id}", json={"completed": completed}, headers=self._headers)
        _raise_for_status(resp)
        return MIT.model_validate(resp.json())

    async def delete(self, mit_id: str) -> None:
        resp = await self._client.delete(f"/api/mits/{mit_id}", headers=self._headers)
        _raise_for_status(resp)
