# -*- coding: utf-8 -*-
"""MITs (Most Important Tasks) — Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..dates import parse_day


class MIT(BaseModel):
    id: str
    user_id: str
    date: str = Field(..., description="YYYY-MM-DD in the owner's timezone")
    title: str
    completed: bool = False
    completed_at: Optional[str] = None
    created_at: str
    updated_at: str


class MITCreateRequest(BaseModel):
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$", description="YYYY-MM-DD")
    title: str = Field(..., max_length=280)

    @field_validator("date")
    @classmethod
    def _real_day(cls, v: str) -> str:
        parse_day(v)
        return v

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title must not be blank")
        return v


class MITUpdateRequest(BaseModel):
    completed: bool


class MITListResponse(BaseModel):
    date: str
    timezone: str
    limit: int
    count: int
    items: List[MIT]
