# -*- coding: utf-8 -*-
"""Page routes.

Every protected page runs the same guard: no session -> /auth/login, no
profile -> /onboarding. Pages answer with a JSON view model the frontend
renders; form posts answer with the re-rendered view model or a redirect.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple, Union

from fastapi import APIRouter, Body, Query, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from ..auth.security import Session, find_session
from ..calculations import ActivityLevel, Gender
from ..calculator.api import PREFILL_COOKIE_NAME, read_bmr_prefill
from ..calculator.models import ActivityLevelOption
from ..config import settings
from ..dates import (
    PREVIEW_FORMAT,
    TIMEZONES,
    current_date_string,
    format_datetime_in_timezone,
    format_long_date,
    is_valid_timezone,
    resolve_timezone,
    utc_now,
)
from ..mits.storage import list_mits
from ..navigation import Route, build_navigation, variant_for_width
from ..profiles.models import Profile, ProfileSetupRequest, ProfileUpdateRequest
from ..profiles.storage import get_profile, update_profile, upsert_profile
from .models import (
    AuthPage,
    BMRCalculatorPage,
    DailyPage,
    Notification,
    PlaceholderPage,
    ProfileSetupDefaults,
    ProfileSetupPage,
    SettingsForm,
    SettingsPage,
    TimezoneOption,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"])

_REQUIRED_SETUP_FIELDS = ("bmr", "gender", "height", "weight")

PLACEHOLDERS: Dict[Route, Tuple[str, str]] = {
    Route.calories: ("Calories", "Track your daily caloric intake and nutritional goals"),
    Route.injections: ("Injections", "Log and track your medication injections"),
    Route.analytics: ("Analytics", "View insights and trends from your health data"),
    Route.winners_bible: ("Winners Bible", "Your collection of success principles and personal insights"),
    Route.nirvana: ("Nirvana", "Coming soon"),
}


@dataclass
class PageContext:
    session: Session
    profile: Optional[Profile]


def _redirect(route: Route) -> RedirectResponse:
    return RedirectResponse(route.href, status_code=303)


def guard(request: Request, *, needs_profile: bool = True) -> Union[PageContext, RedirectResponse]:
    session = find_session(request)
    if session is None:
        logger.debug("No session for %s, redirecting to login", request.url.path)
        return _redirect(Route.login)
    profile = get_profile(session.user_id)
    if needs_profile and profile is None:
        logger.debug("No profile for %s, redirecting to onboarding", session.user_id)
        return _redirect(Route.onboarding)
    return PageContext(session=session, profile=profile)


def _timezones():
    return [TimezoneOption(value=value, label=label) for value, label in TIMEZONES]


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    message = str(errors[0].get("msg") or "Invalid input")
    return message.removeprefix("Value error, ")


def _filled(payload: Dict[str, Any]) -> Dict[str, Any]:
    # Blank form inputs mean "not provided".
    return {k: v for k, v in payload.items() if v is not None and v != ""}


# ---- daily ----

@router.get(Route.daily.href, summary="Daily tracker page")
def daily_page(request: Request, width: Optional[int] = Query(None, description="Viewport width (px)")):
    ctx = guard(request)
    if isinstance(ctx, RedirectResponse):
        return ctx

    tz = resolve_timezone(ctx.profile.timezone)
    day = current_date_string(tz)
    mits = list_mits(user_id=ctx.session.user_id, date=day)
    limit = int(settings.max_mits_per_day)
    return DailyPage(
        title="Daily Tracker",
        path=Route.daily.href,
        navigation=build_navigation(Route.daily.href, variant_for_width(width)),
        date=day,
        formatted_date=format_long_date(utc_now(), tz),
        timezone=tz,
        limit=limit,
        can_add=len(mits) < limit,
        mits=mits,
    )


# ---- settings ----

def _settings_form(profile: Profile) -> SettingsForm:
    def _num(value) -> str:
        return "" if value is None else f"{value:g}"

    return SettingsForm(
        first_name=profile.first_name or "",
        gender=profile.gender.value if profile.gender else "",
        height=_num(profile.height),
        weight=_num(profile.weight),
        bmr=_num(profile.bmr),
        timezone=resolve_timezone(profile.timezone),
    )


def _settings_page(profile: Profile, width: Optional[int], notification: Optional[Notification] = None) -> SettingsPage:
    form = _settings_form(profile)
    return SettingsPage(
        title="Profile Settings",
        path=Route.settings.href,
        navigation=build_navigation(Route.settings.href, variant_for_width(width)),
        profile=profile,
        form=form,
        timezones=_timezones(),
        time_preview=format_datetime_in_timezone(utc_now(), form.timezone, PREVIEW_FORMAT),
        notification=notification,
    )


@router.get(Route.settings.href, summary="Settings page")
def settings_page(request: Request, width: Optional[int] = Query(None)):
    ctx = guard(request)
    if isinstance(ctx, RedirectResponse):
        return ctx
    return _settings_page(ctx.profile, width)


@router.post(Route.settings.href, summary="Submit the settings form")
def submit_settings(
    request: Request,
    payload: Dict[str, Any] = Body(...),
    width: Optional[int] = Query(None),
):
    ctx = guard(request)
    if isinstance(ctx, RedirectResponse):
        return ctx
    try:
        changes = ProfileUpdateRequest.model_validate(_filled(payload))
    except ValidationError as exc:
        return _settings_page(ctx.profile, width, Notification.error(_first_error(exc)))

    profile = update_profile(ctx.session.user_id, changes)
    if profile is None:
        return _redirect(Route.onboarding)
    return _settings_page(profile, width, Notification.success("Profile updated successfully!"))


# ---- onboarding ----

@router.get(Route.onboarding.href, summary="Onboarding entry point")
def onboarding(request: Request):
    ctx = guard(request, needs_profile=False)
    if isinstance(ctx, RedirectResponse):
        return ctx
    return _redirect(Route.profile_setup)


def _setup_page(request: Request, tz: Optional[str], error: Optional[str] = None) -> ProfileSetupPage:
    prefill = read_bmr_prefill(request)
    defaults = ProfileSetupDefaults(timezone=tz if tz and is_valid_timezone(tz) else resolve_timezone(None))
    if prefill:
        defaults.bmr = prefill.bmr
        defaults.gender = prefill.gender.value
        defaults.height = prefill.height
        defaults.weight = prefill.weight
    return ProfileSetupPage(
        title="Complete Your Profile",
        path=Route.profile_setup.href,
        defaults=defaults,
        prefilled=prefill is not None,
        calculator_href=Route.bmr_calculator.href,
        timezones=_timezones(),
        error=error,
    )


@router.get(Route.profile_setup.href, summary="Profile setup page")
def profile_setup_page(request: Request, tz: Optional[str] = Query(None, description="Browser-detected timezone")):
    ctx = guard(request, needs_profile=False)
    if isinstance(ctx, RedirectResponse):
        return ctx
    return _setup_page(request, tz)


@router.post(Route.profile_setup.href, summary="Submit the profile setup form")
def submit_profile_setup(request: Request, payload: Dict[str, Any] = Body(...)):
    ctx = guard(request, needs_profile=False)
    if isinstance(ctx, RedirectResponse):
        return ctx

    values = _filled(payload)
    tz = values.get("timezone")
    if any(field not in values for field in _REQUIRED_SETUP_FIELDS):
        return _setup_page(request, tz, error="Please fill in all required fields")
    try:
        setup = ProfileSetupRequest.model_validate(values)
    except ValidationError as exc:
        return _setup_page(request, tz, error=_first_error(exc))

    upsert_profile(ctx.session.user_id, setup)
    response = _redirect(Route.daily)
    response.delete_cookie(PREFILL_COOKIE_NAME, path="/")
    return response


# ---- calculator ----

@router.get(Route.bmr_calculator.href, summary="BMR calculator page")
def bmr_calculator_page(request: Request, width: Optional[int] = Query(None)):
    # Reachable from onboarding, so a profile is not required yet.
    ctx = guard(request, needs_profile=False)
    if isinstance(ctx, RedirectResponse):
        return ctx
    return BMRCalculatorPage(
        title="BMR Calculator",
        path=Route.bmr_calculator.href,
        navigation=build_navigation(Route.bmr_calculator.href, variant_for_width(width)),
        genders=[g.value for g in Gender],
        formulas=[
            "Male: (10 × weight) + (6.25 × height) - (5 × age) + 5",
            "Female: (10 × weight) + (6.25 × height) - (5 × age) - 161",
            "Other: average of the male and female results",
        ],
        activity_levels=[ActivityLevelOption(name=level.name, multiplier=level.value) for level in ActivityLevel],
        prefill_action="/api/calculator/bmr/prefill",
    )


# ---- placeholders ----

def _placeholder_handler(route: Route) -> Callable[..., Any]:
    title, description = PLACEHOLDERS[route]

    def handler(request: Request, width: Optional[int] = Query(None)):
        ctx = guard(request)
        if isinstance(ctx, RedirectResponse):
            return ctx
        return PlaceholderPage(
            title=title,
            path=route.href,
            navigation=build_navigation(route.href, variant_for_width(width)),
            description=description,
        )

    handler.__name__ = f"{route.name}_page"
    return handler


for _route in PLACEHOLDERS:
    router.add_api_route(_route.href, _placeholder_handler(_route), methods=["GET"], summary=f"{PLACEHOLDERS[_route][0]} page")


# ---- auth ----

@router.get(Route.login.href, summary="Login page")
def login_page(request: Request):
    if find_session(request):
        return _redirect(Route.daily)
    return AuthPage(title="Login", path=Route.login.href, action="/api/auth/login", alternate_href=Route.signup.href)


@router.get(Route.signup.href, summary="Sign-up page")
def signup_page(request: Request):
    if find_session(request):
        return _redirect(Route.daily)
    return AuthPage(title="Sign Up", path=Route.signup.href, action="/api/auth/register", alternate_href=Route.login.href)
