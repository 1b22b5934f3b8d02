# -*- coding: utf-8 -*-
"""
Life OS API

Profile management, daily MITs, BMR/TDEE calculator and page routes.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .app_db import init_app_db
from .auth.api import router as auth_router
from .auth.security import get_session_from_request
from .calculator.api import router as calculator_router
from .config import settings
from .dates import PREVIEW_FORMAT, TIMEZONES, InvalidTimezoneError, format_datetime_in_timezone, get_zone, utc_now
from .mits.api import router as mits_router
from .navigation import NavigationResponse, NavVariant, build_navigation, variant_for_width
from .pages.api import router as pages_router
from .profiles.api import router as profile_router

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Life OS",
    description="Personal health tracking: profile, daily MITs, BMR calculator",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def _startup_init_db() -> None:
    init_app_db(settings.app_db_path)


# Ensure the app DB exists even when lifespan events are not triggered (e.g. some test clients).
init_app_db(settings.app_db_path)


_AUTH_EXEMPT_PREFIXES = (
    "/api/auth/login",
    "/api/auth/register",
    "/api/auth/logout",
    "/api/docs",
    "/api/redoc",
    "/api/openapi.json",
)


@app.middleware("http")
async def _auth_gate(request: Request, call_next):
    path = request.url.path
    if path.startswith("/api") and path != "/api/health" and not any(path.startswith(p) for p in _AUTH_EXEMPT_PREFIXES):
        try:
            request.state.session = get_session_from_request(request)
        except HTTPException as exc:
            return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})
    return await call_next(request)


app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(mits_router)
app.include_router(calculator_router)
app.include_router(pages_router)


@app.get("/api/health")
def health() -> dict:
    return {"ok": True}


@app.get("/api/navigation", response_model=NavigationResponse, summary="Navigation entries for a path")
def navigation(
    path: str = Query("/daily", description="Current path"),
    width: Optional[int] = Query(None, description="Viewport width (px); picks sidebar or bottom bar"),
    variant: Optional[NavVariant] = Query(None, description="Force a layout variant"),
):
    return build_navigation(path, variant or variant_for_width(width))


@app.get("/api/timezones", summary="Timezones offered in the profile forms")
def timezones(preview: Optional[str] = Query(None, description="Timezone to render a current-time preview for")) -> dict:
    payload: dict = {"items": [{"value": value, "label": label} for value, label in TIMEZONES]}
    if preview:
        try:
            get_zone(preview)
        except InvalidTimezoneError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        payload["preview"] = format_datetime_in_timezone(utc_now(), preview, PREVIEW_FORMAT)
    return payload


# Static frontend
frontend_dir = Path(__file__).resolve().parent.parent / "frontend"
if frontend_dir.exists():
    app.mount("/app", StaticFiles(directory=frontend_dir, html=True), name="app")


def main() -> None:
    import uvicorn

    uvicorn.run("lifeos.api:app", host="0.0.0.0", port=8000)
