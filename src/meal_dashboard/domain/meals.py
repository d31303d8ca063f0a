"""Domain models for meals and their food components."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, get_args
from uuid import UUID

from meal_dashboard.domain.nutrition import NutritionProfile, Totals

DEFAULT_PORTION_UNIT = "g"
DEFAULT_PORTION_SIZE = 100.0
MealType = Literal["breakfast", "lunch", "dinner", "snack"]
MEAL_TYPES: tuple[str, ...] = get_args(MealType)
NOTES_MAX_LENGTH = 500


@dataclass(frozen=True)
class FoodComponent:
    """One food inside a compound meal."""

    id: UUID
    name: str
    base_per_100: NutritionProfile
    portion_size: float = DEFAULT_PORTION_SIZE
    portion_unit: str = DEFAULT_PORTION_UNIT
    portion_display: str = ""
    custom_food_id: UUID | None = None


@dataclass(frozen=True)
class Meal:
    """A logged meal, simple or compound.

    Simple meals carry ``base_per_100`` and a single portion. Compound meals
    derive everything from ``components``. ``totals`` is a cache of the
    aggregation of whichever of the two applies.
    """

    id: UUID
    user_id: UUID
    name: str
    meal_type: str
    consumed_at: datetime
    is_compound: bool
    totals: Totals
    components: tuple[FoodComponent, ...] = field(default_factory=tuple)
    base_per_100: NutritionProfile | None = None
    portion_size: float | None = None
    portion_unit: str | None = DEFAULT_PORTION_UNIT
    notes: str | None = None
    photo_url: str | None = None
