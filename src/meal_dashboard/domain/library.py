"""Domain models for the user's custom food library."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from meal_dashboard.domain.nutrition import NutritionProfile


class FoodSource(StrEnum):
    """Where a custom food definition was derived from."""

    SIMPLE_MEAL = "simple_meal"
    EDITED_FROM_MEAL = "edited_from_meal"
    COMPOUND_MEAL = "compound_meal"


@dataclass(frozen=True)
class CustomFood:
    """Reusable food definition normalized to 100 units."""

    id: UUID | None
    user_id: UUID
    name: str
    base_per_100: NutritionProfile
    source: FoodSource
    original_food_name: str
    created_at: datetime | None = None
