"""Daily nutrition goals derived from a user's body profile.

Energy needs follow the Mifflin-St Jeor equation scaled by an activity factor,
then shifted for the user's weight goal. Macros are split from the calorie
target: protein per kg of body weight, 27% of calories from fat, carbs filling
the rest and 14 g of fiber per 1000 kcal.
"""

import math
from typing import Literal

from pydantic import BaseModel, Field

from meal_dashboard.domain.nutrition import NutritionProfile

ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "lightly_active": 1.375,
    "moderately_active": 1.55,
    "very_active": 1.725,
    "extra_active": 1.9,
}
DEFAULT_DEFICIT = 500
DEFAULT_SURPLUS = 300
FAT_CALORIE_SHARE = 0.27
FIBER_PER_1000_KCAL = 14

GoalType = Literal["lose", "maintain", "gain"]


class UserProfile(BaseModel):
    """Body measurements and preferences goals are calculated from."""

    weight_kg: float = Field(gt=0)
    height_cm: float = Field(gt=0)
    age: int = Field(gt=0)
    gender: str = "other"
    activity_level: str = "sedentary"
    goal_type: GoalType = "maintain"
    calorie_adjustment: int | None = Field(default=None, ge=0)


def calculate_bmr(weight_kg: float, height_cm: float, age: int, gender: str) -> float:
    """Return basal metabolic rate in kcal."""
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if gender == "male":
        return base + 5
    if gender == "female":
        return base - 161
    return base - 78


def calculate_tdee(bmr: float, activity_level: str) -> int:
    """Return total daily energy expenditure; unknown levels count as sedentary."""
    return _round(bmr * ACTIVITY_MULTIPLIERS.get(activity_level, 1.2))


def adjust_calories_for_goal(
    tdee: int, goal_type: str, custom_amount: int | None = None
) -> int:
    if goal_type == "lose":
        return _round(tdee - (custom_amount or DEFAULT_DEFICIT))
    if goal_type == "gain":
        return _round(tdee + (custom_amount or DEFAULT_SURPLUS))
    return tdee


def calculate_macros(
    calories: int, weight_kg: float, goal_type: str
) -> NutritionProfile:
    """Split a calorie target into gram goals."""
    if goal_type == "lose":
        protein_per_kg = 2.2
    elif goal_type == "gain":
        protein_per_kg = 1.8
    else:
        protein_per_kg = 2.0
    protein = _round(weight_kg * protein_per_kg)
    fat_calories = _round(calories * FAT_CALORIE_SHARE)
    remaining = calories - protein * 4 - fat_calories
    return NutritionProfile(
        calories=calories,
        protein_g=protein,
        carbs_g=_round(remaining / 4),
        fat_g=_round(fat_calories / 9),
        fiber_g=_round(calories / 1000 * FIBER_PER_1000_KCAL),
    )


def goals_from_profile(profile: UserProfile) -> NutritionProfile:
    """Calculate daily goals for a profile."""
    bmr = calculate_bmr(
        profile.weight_kg, profile.height_cm, profile.age, profile.gender
    )
    tdee = calculate_tdee(bmr, profile.activity_level)
    calories = adjust_calories_for_goal(
        tdee, profile.goal_type, profile.calorie_adjustment
    )
    return calculate_macros(calories, profile.weight_kg, profile.goal_type)


def _round(value: float) -> int:
    # Halves round towards positive infinity, also for negative values.
    return math.floor(value + 0.5)
