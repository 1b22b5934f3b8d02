# -*- coding: utf-8 -*-
"""Profiles — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ..auth.security import Session, get_current_session
from .models import Profile, ProfileSetupRequest, ProfileUpdateRequest
from .storage import get_profile, update_profile, upsert_profile

router = APIRouter(prefix="/api/profile", tags=["Profile"])


@router.get("", response_model=Profile, summary="Get the current user's profile")
def read_profile(session: Session = Depends(get_current_session)):
    profile = get_profile(session.user_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.put("", response_model=Profile, summary="Create or replace the profile (onboarding)")
def setup_profile(request: ProfileSetupRequest, session: Session = Depends(get_current_session)):
    return upsert_profile(session.user_id, request)


@router.patch("", response_model=Profile, summary="Update profile fields (settings)")
def patch_profile(request: ProfileUpdateRequest, session: Session = Depends(get_current_session)):
    profile = update_profile(session.user_id, request)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile
