"""Tests for profile-based goal calculation."""

import pytest
from pydantic import ValidationError

from meal_dashboard.domain.nutrition import NutritionProfile
from meal_dashboard.services.goals import (
    UserProfile,
    adjust_calories_for_goal,
    calculate_bmr,
    calculate_tdee,
    goals_from_profile,
)


def test_calculate_bmr_by_gender() -> None:
    assert calculate_bmr(80, 180, 30, "male") == 1780
    assert calculate_bmr(80, 180, 30, "female") == 1614
    assert calculate_bmr(80, 180, 30, "other") == 1697


def test_calculate_tdee_defaults_to_sedentary() -> None:
    assert calculate_tdee(1000, "very_active") == 1725
    assert calculate_tdee(1000, "unknown") == 1200


def test_adjust_calories_for_goal() -> None:
    assert adjust_calories_for_goal(2000, "lose") == 1500
    assert adjust_calories_for_goal(2000, "lose", 250) == 1750
    assert adjust_calories_for_goal(2000, "gain") == 2300
    assert adjust_calories_for_goal(2000, "maintain", 400) == 2000


def test_goals_for_maintaining_profile() -> None:
    profile = UserProfile(
        weight_kg=80,
        height_cm=180,
        age=30,
        gender="male",
        activity_level="moderately_active",
    )

    assert goals_from_profile(profile) == NutritionProfile(2759, 160, 344, 83, 39)


def test_goals_for_losing_profile() -> None:
    profile = UserProfile(
        weight_kg=60, height_cm=165, age=25, gender="female", goal_type="lose"
    )

    assert goals_from_profile(profile) == NutritionProfile(1114, 132, 71, 33, 16)


def test_goals_for_gaining_profile_with_custom_surplus() -> None:
    profile = UserProfile(
        weight_kg=70,
        height_cm=175,
        age=40,
        activity_level="couch",
        goal_type="gain",
        calorie_adjustment=250,
    )

    assert goals_from_profile(profile) == NutritionProfile(2069, 126, 252, 62, 29)


def test_profile_validation() -> None:
    with pytest.raises(ValidationError):
        UserProfile(weight_kg=0, height_cm=180, age=30)
    with pytest.raises(ValidationError):
        UserProfile(weight_kg=80, height_cm=180, age=30, goal_type="bulk")
