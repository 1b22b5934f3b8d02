# -*- coding: utf-8 -*-
"""MITs — API endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.security import Session, get_current_session
from ..config import settings
from ..dates import current_date_string, parse_day, resolve_timezone
from ..profiles.storage import get_profile
from .models import MIT, MITCreateRequest, MITListResponse, MITUpdateRequest
from .storage import MITLimitReachedError, create_mit, delete_mit, list_mits, set_mit_completed

router = APIRouter(prefix="/api/mits", tags=["MITs"])


def user_timezone(user_id: str) -> str:
    profile = get_profile(user_id)
    return resolve_timezone(profile.timezone if profile else None)


@router.get("", response_model=MITListResponse, summary="List MITs for a day")
def list_day(
    date: Optional[str] = Query(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$", description="YYYY-MM-DD, default today"),
    session: Session = Depends(get_current_session),
):
    if date:
        try:
            parse_day(date)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc))
    tz = user_timezone(session.user_id)
    day = date or current_date_string(tz)
    items = list_mits(user_id=session.user_id, date=day)
    return MITListResponse(
        date=day,
        timezone=tz,
        limit=int(settings.max_mits_per_day),
        count=len(items),
        items=items,
    )


@router.post("", response_model=MIT, summary="Add an MIT")
def add(request: MITCreateRequest, session: Session = Depends(get_current_session)):
    try:
        return create_mit(user_id=session.user_id, date=request.date, title=request.title)
    except MITLimitReachedError as exc:
        raise HTTPException(status_code=409, detail=str(exc))


@router.patch("/{mit_id}", response_model=MIT, summary="Mark an MIT completed or not")
def toggle(mit_id: str, request: MITUpdateRequest, session: Session = Depends(get_current_session)):
    mit = set_mit_completed(user_id=session.user_id, mit_id=mit_id, completed=request.completed)
    if not mit:
        raise HTTPException(status_code=404, detail="MIT not found")
    return mit


@router.delete("/{mit_id}", summary="Delete an MIT")
def remove(mit_id: str, session: Session = Depends(get_current_session)):
    if not delete_mit(user_id=session.user_id, mit_id=mit_id):
        raise HTTPException(status_code=404, detail="MIT not found")
    return {"status": "ok", "mit_id": mit_id}
