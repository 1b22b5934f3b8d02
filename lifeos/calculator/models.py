# -*- coding: utf-8 -*-
"""Calculator — Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..calculations import Gender


class BMRRequest(BaseModel):
    age: float = Field(..., allow_inf_nan=False, description="years")
    gender: str = Field(..., description="male | female | other")
    height: float = Field(..., allow_inf_nan=False, description="cm")
    weight: float = Field(..., allow_inf_nan=False, description="kg")
    activity_level: Optional[float] = Field(None, allow_inf_nan=False, description="If set, TDEE is returned too")


class BMRResponse(BaseModel):
    bmr: int
    tdee: Optional[int] = None
    activity_level: Optional[float] = None


class TDEERequest(BaseModel):
    bmr: float = Field(..., gt=0, allow_inf_nan=False)
    activity_level: float = Field(1.2, allow_inf_nan=False)


class TDEEResponse(BaseModel):
    bmr: float
    activity_level: float
    tdee: int


class ActivityLevelOption(BaseModel):
    name: str
    multiplier: float


class ActivityLevelsResponse(BaseModel):
    items: List[ActivityLevelOption]


class BMRPrefill(BaseModel):
    """Calculator output handed to the profile setup form."""
    bmr: int = Field(..., gt=0)
    gender: Gender
    height: float = Field(..., gt=0, allow_inf_nan=False)
    weight: float = Field(..., gt=0, allow_inf_nan=False)
