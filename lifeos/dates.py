# -*- coding: utf-8 -*-
"""Timezone-aware date helpers.

Every "day" in Life OS is a calendar day in the owner's profile timezone, so
day boundaries are computed in that zone and handed back as UTC datetimes for
storage and comparison. Naive datetimes are treated as UTC.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from typing import List, Optional, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError, available_timezones

from .config import settings

DEFAULT_FORMAT = "%b %d, %Y %I:%M %p"
PREVIEW_FORMAT = "%A, %B %d, %Y %I:%M:%S %p %Z"

DayLike = Union[date, datetime]

# (value, label) pairs offered in the profile forms.
TIMEZONES: List[Tuple[str, str]] = [
    ("Africa/Cairo", "Cairo (Africa/Cairo)"),
    ("Africa/Johannesburg", "Johannesburg (Africa/Johannesburg)"),
    ("America/Chicago", "Central Time - Chicago (America/Chicago)"),
    ("America/Denver", "Mountain Time - Denver (America/Denver)"),
    ("America/Los_Angeles", "Pacific Time - Los Angeles (America/Los_Angeles)"),
    ("America/Mexico_City", "Mexico City (America/Mexico_City)"),
    ("America/New_York", "Eastern Time - New York (America/New_York)"),
    ("America/Sao_Paulo", "São Paulo (America/Sao_Paulo)"),
    ("America/Toronto", "Toronto (America/Toronto)"),
    ("Asia/Dubai", "Dubai (Asia/Dubai)"),
    ("Asia/Hong_Kong", "Hong Kong (Asia/Hong_Kong)"),
    ("Asia/Kolkata", "India - Kolkata (Asia/Kolkata)"),
    ("Asia/Seoul", "Seoul (Asia/Seoul)"),
    ("Asia/Shanghai", "Shanghai (Asia/Shanghai)"),
    ("Asia/Singapore", "Singapore (Asia/Singapore)"),
    ("Asia/Tokyo", "Tokyo (Asia/Tokyo)"),
    ("Europe/Amsterdam", "Amsterdam (Europe/Amsterdam)"),
    ("Europe/Berlin", "Berlin (Europe/Berlin)"),
    ("Europe/London", "London (Europe/London)"),
    ("Europe/Madrid", "Madrid (Europe/Madrid)"),
    ("Europe/Paris", "Paris (Europe/Paris)"),
    ("Europe/Rome", "Rome (Europe/Rome)"),
    ("Australia/Sydney", "Sydney (Australia/Sydney)"),
    ("Pacific/Auckland", "Auckland (Pacific/Auckland)"),
    ("UTC", "UTC (Coordinated Universal Time)"),
]


class InvalidTimezoneError(ValueError):
    pass


@lru_cache(maxsize=1)
def _known_zones() -> frozenset:
    return frozenset(available_timezones())


def is_valid_timezone(name: str) -> bool:
    if not name:
        return False
    return name == "UTC" or name in _known_zones()


def get_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidTimezoneError(f"Unknown timezone: {name}") from exc


def resolve_timezone(name: Optional[str]) -> str:
    """Profile timezone if usable, else the configured default."""
    if name and is_valid_timezone(name):
        return name
    return settings.default_timezone or "UTC"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def now_in_timezone(tz: str) -> datetime:
    return utc_now().astimezone(get_zone(tz))


def convert_utc_to_timezone(value: datetime, tz: str) -> datetime:
    return _as_utc(value).astimezone(get_zone(tz))


def format_datetime_in_timezone(value: datetime, tz: str, fmt: str = DEFAULT_FORMAT) -> str:
    return convert_utc_to_timezone(value, tz).strftime(fmt)


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_long_date(value: datetime, tz: str) -> str:
    """e.g. ``Monday, January 30th, 2025`` for the daily page header."""
    local = convert_utc_to_timezone(value, tz)
    return f"{local.strftime('%A, %B')} {_ordinal(local.day)}, {local.year}"


def _local_day(tz: str, target: Optional[DayLike]) -> date:
    # A plain date is already a calendar day; a datetime is placed in tz first.
    if target is None:
        return now_in_timezone(tz).date()
    if isinstance(target, datetime):
        return convert_utc_to_timezone(target, tz).date()
    return target


def day_start_in_timezone(tz: str, target: Optional[DayLike] = None) -> datetime:
    day = _local_day(tz, target)
    return datetime.combine(day, time.min, tzinfo=get_zone(tz)).astimezone(timezone.utc)


def day_end_in_timezone(tz: str, target: Optional[DayLike] = None) -> datetime:
    """Last representable instant of the day (next midnight minus 1µs), in UTC."""
    day = _local_day(tz, target)
    next_start = datetime.combine(day + timedelta(days=1), time.min, tzinfo=get_zone(tz))
    return next_start.astimezone(timezone.utc) - timedelta(microseconds=1)


def is_datetime_in_day(value: datetime, tz: str, target: Optional[DayLike] = None) -> bool:
    instant = _as_utc(value)
    return day_start_in_timezone(tz, target) <= instant <= day_end_in_timezone(tz, target)


def current_date_string(tz: str) -> str:
    return now_in_timezone(tz).date().isoformat()


def parse_day(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string; raises ValueError otherwise."""
    if len(value) != 10:
        raise ValueError(f"Expected YYYY-MM-DD, got {value!r}")
    return date.fromisoformat(value)
