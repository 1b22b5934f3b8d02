# -*- coding: utf-8 -*-
"""
Energy expenditure calculations

BMR uses the Mifflin-St Jeor equation; TDEE scales BMR by an activity
multiplier.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Union


class Gender(str, Enum):
    male = "male"
    female = "female"
    other = "other"


class ActivityLevel(float, Enum):
    """Common TDEE multipliers."""
    sedentary = 1.2
    light = 1.375
    moderate = 1.55
    active = 1.725
    very_active = 1.9


MIN_ACTIVITY_LEVEL = 1.0
MAX_ACTIVITY_LEVEL = 2.5


class CalculationError(ValueError):
    """Invalid calculator input."""


def round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; the reference outputs round .5 up.
    return int(math.floor(value + 0.5))


def calculate_bmr(age: float, gender: Union[Gender, str], height: float, weight: float) -> int:
    """
    Basal Metabolic Rate in kcal/day (Mifflin-St Jeor)

    Args:
        age: years
        gender: male | female | other
        height: cm
        weight: kg

    Returns:
        int: BMR, rounded on the final value only

    Formula:
        base = 10 × weight + 6.25 × height − 5 × age
        male: base + 5, female: base − 161, other: mean of the two
    """
    if not all(math.isfinite(v) and v > 0 for v in (age, height, weight)):
        raise CalculationError("Age, height, and weight must be positive numbers")
    try:
        gender = Gender(gender)
    except ValueError:
        raise CalculationError(f"Invalid gender: {gender}")

    base = (10 * weight) + (6.25 * height) - (5 * age)
    male_result = base + 5
    female_result = base - 161

    if gender is Gender.male:
        return round_half_up(male_result)
    if gender is Gender.female:
        return round_half_up(female_result)
    return round_half_up((male_result + female_result) / 2)


def calculate_tdee(bmr: float, activity_level: Union[ActivityLevel, float] = ActivityLevel.sedentary) -> int:
    """Total Daily Energy Expenditure = BMR × activity multiplier (1.0 – 2.5)."""
    level = float(activity_level)
    if not math.isfinite(bmr) or bmr <= 0:
        raise CalculationError("BMR must be a positive number")
    if not MIN_ACTIVITY_LEVEL <= level <= MAX_ACTIVITY_LEVEL:
        raise CalculationError(
            f"Activity level must be between {MIN_ACTIVITY_LEVEL:g} and {MAX_ACTIVITY_LEVEL:g}"
        )
    return round_half_up(bmr * level)
