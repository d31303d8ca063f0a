"""Domain models for daily statistics."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from meal_dashboard.domain.nutrition import NutritionProfile, Totals


@dataclass(frozen=True)
class MealTotalsRow:
    """Totals of one logged meal, as read for daily roll-ups."""

    consumed_at: datetime
    totals: Totals


@dataclass(frozen=True)
class DailyAchievement:
    """Actual intake for a day next to the user's goals."""

    user_id: UUID
    day: date
    goals: NutritionProfile
    actual: Totals
