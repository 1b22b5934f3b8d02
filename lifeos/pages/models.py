# -*- coding: utf-8 -*-
"""Pages — view models returned by the page routes."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from ..calculator.models import ActivityLevelOption
from ..mits.models import MIT
from ..navigation import NavigationResponse
from ..profiles.models import Profile

SUCCESS_AUTO_DISMISS_MS = 3000


class TimezoneOption(BaseModel):
    value: str
    label: str


class NotificationType(str, Enum):
    success = "success"
    error = "error"


class Notification(BaseModel):
    type: NotificationType
    message: str
    auto_dismiss_ms: Optional[int] = Field(None, description="null = stays until the next action")

    @classmethod
    def success(cls, message: str) -> "Notification":
        return cls(type=NotificationType.success, message=message, auto_dismiss_ms=SUCCESS_AUTO_DISMISS_MS)

    @classmethod
    def error(cls, message: str) -> "Notification":
        return cls(type=NotificationType.error, message=message, auto_dismiss_ms=None)


class PageBase(BaseModel):
    title: str
    path: str
    navigation: Optional[NavigationResponse] = None


class DailyPage(PageBase):
    date: str
    formatted_date: str
    timezone: str
    limit: int
    can_add: bool
    mits: List[MIT]


class SettingsForm(BaseModel):
    first_name: str = ""
    gender: str = ""
    height: str = ""
    weight: str = ""
    bmr: str = ""
    timezone: str = ""


class SettingsPage(PageBase):
    description: str = "Manage your health profile and personal information"
    profile: Profile
    form: SettingsForm
    timezones: List[TimezoneOption]
    time_preview: str
    notification: Optional[Notification] = None


class ProfileSetupDefaults(BaseModel):
    bmr: Optional[int] = None
    gender: Optional[str] = None
    height: Optional[float] = None
    weight: Optional[float] = None
    timezone: str


class ProfileSetupPage(PageBase):
    description: str = "Tell us about yourself to personalize your health tracking experience"
    defaults: ProfileSetupDefaults
    prefilled: bool = False
    calculator_href: str
    timezones: List[TimezoneOption]
    error: Optional[str] = None


class BMRCalculatorPage(PageBase):
    description: str = "Calculate your Basal Metabolic Rate - the number of calories your body needs at rest"
    genders: List[str]
    formulas: List[str]
    activity_levels: List[ActivityLevelOption]
    prefill_action: str


class PlaceholderPage(PageBase):
    description: str
    coming_soon: bool = True


class AuthPage(PageBase):
    action: str
    alternate_href: str
