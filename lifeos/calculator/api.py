# -*- coding: utf-8 -*-
"""Calculator — API endpoints and the ``bmr_prefill`` handoff cookie."""

from __future__ import annotations

import base64
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import ValidationError

from ..calculations import ActivityLevel, CalculationError, calculate_bmr, calculate_tdee
from ..config import settings
from ..navigation import Route
from .models import (
    ActivityLevelOption,
    ActivityLevelsResponse,
    BMRPrefill,
    BMRRequest,
    BMRResponse,
    TDEERequest,
    TDEEResponse,
)

logger = logging.getLogger(__name__)

PREFILL_COOKIE_NAME = "bmr_prefill"
_PREFILL_MAX_AGE = 60 * 60

router = APIRouter(prefix="/api/calculator", tags=["Calculator"])


# Cookie values hold base64url(JSON) so quotes and commas survive cookie quoting.
def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64url_decode(data: str) -> bytes:
    pad = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode((data + pad).encode("ascii"))


def read_bmr_prefill(request: Request) -> Optional[BMRPrefill]:
    raw = request.cookies.get(PREFILL_COOKIE_NAME)
    if not raw:
        return None
    try:
        return BMRPrefill.model_validate_json(_b64url_decode(raw))
    except (ValueError, ValidationError):
        logger.warning("Ignoring malformed %s cookie", PREFILL_COOKIE_NAME)
        return None


@router.post("/bmr", response_model=BMRResponse, summary="Calculate BMR (Mifflin-St Jeor)")
def bmr(request: BMRRequest):
    try:
        value = calculate_bmr(request.age, request.gender, request.height, request.weight)
        tdee = calculate_tdee(value, request.activity_level) if request.activity_level is not None else None
    except CalculationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return BMRResponse(bmr=value, tdee=tdee, activity_level=request.activity_level)


@router.post("/tdee", response_model=TDEEResponse, summary="Calculate TDEE from BMR")
def tdee(request: TDEERequest):
    try:
        value = calculate_tdee(request.bmr, request.activity_level)
    except CalculationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return TDEEResponse(bmr=request.bmr, activity_level=request.activity_level, tdee=value)


@router.get("/activity-levels", response_model=ActivityLevelsResponse, summary="Named activity multipliers")
def activity_levels():
    return ActivityLevelsResponse(
        items=[ActivityLevelOption(name=level.name, multiplier=level.value) for level in ActivityLevel]
    )


@router.post("/bmr/prefill", summary="Hand a calculated BMR to the profile setup form")
def store_prefill(prefill: BMRPrefill, response: Response):
    response.set_cookie(
        PREFILL_COOKIE_NAME,
        _b64url_encode(prefill.model_dump_json().encode("utf-8")),
        httponly=False,
        secure=bool(settings.cookie_secure),
        samesite="lax",
        max_age=_PREFILL_MAX_AGE,
        path="/",
    )
    return {"status": "ok", "redirect": Route.profile_setup.href}
