# -*- coding: utf-8 -*-
"""Profiles — Pydantic models.

One profile per authenticated identity:
- created by the onboarding form (bmr/gender/height/weight required),
- edited by the settings form (every field optional, only sent fields change).
"""

from __future__ import annotations

import math
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..calculations import Gender
from ..dates import is_valid_timezone


def _positive(label: str, value: Optional[float]) -> Optional[float]:
    if value is not None and (not math.isfinite(value) or value <= 0):
        raise ValueError(f"{label} must be a positive number")
    return value


def _timezone(value: Optional[str]) -> Optional[str]:
    if value is not None and not is_valid_timezone(value):
        raise ValueError(f"Unknown timezone: {value}")
    return value


class Profile(BaseModel):
    id: str
    first_name: Optional[str] = None
    gender: Optional[Gender] = None
    height: Optional[float] = Field(None, description="cm")
    weight: Optional[float] = Field(None, description="kg")
    bmr: Optional[int] = Field(None, description="kcal/day")
    timezone: str = "UTC"
    avatar_url: Optional[str] = None
    created_at: str
    updated_at: str


class ProfileSetupRequest(BaseModel):
    bmr: int
    gender: Gender
    height: float
    weight: float
    timezone: str = "UTC"
    first_name: Optional[str] = Field(None, max_length=128)
    avatar_url: Optional[str] = Field(None, max_length=2048)

    @field_validator("bmr")
    @classmethod
    def _bmr_positive(cls, v):
        return _positive("BMR", v)

    @field_validator("height")
    @classmethod
    def _height_positive(cls, v):
        return _positive("Height", v)

    @field_validator("weight")
    @classmethod
    def _weight_positive(cls, v):
        return _positive("Weight", v)

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, v):
        return _timezone(v)


class ProfileUpdateRequest(BaseModel):
    bmr: Optional[int] = None
    gender: Optional[Gender] = None
    height: Optional[float] = None
    weight: Optional[float] = None
    timezone: Optional[str] = None
    first_name: Optional[str] = Field(None, max_length=128)
    avatar_url: Optional[str] = Field(None, max_length=2048)

    @field_validator("bmr")
    @classmethod
    def _bmr_positive(cls, v):
        return _positive("BMR", v)

    @field_validator("height")
    @classmethod
    def _height_positive(cls, v):
        return _positive("Height", v)

    @field_validator("weight")
    @classmethod
    def _weight_positive(cls, v):
        return _positive("Weight", v)

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, v):
        return _timezone(v)
