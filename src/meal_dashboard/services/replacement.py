"""Replacement foods for swapping a component or simple meal's food."""

import re
from typing import Protocol
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from meal_dashboard.domain.library import CustomFood
from meal_dashboard.domain.meals import DEFAULT_PORTION_SIZE, DEFAULT_PORTION_UNIT
from meal_dashboard.domain.nutrition import NutritionProfile

_LEADING_INT = re.compile(r"\s*[+-]?\d+")
_LEADING_FLOAT = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)")


class FoodSelection(BaseModel):
    """A chosen food with the portion to log or keep when replacing."""

    name: str = Field(min_length=1)
    base_calories: float = Field(default=0.0, ge=0)
    base_protein_g: float = Field(default=0.0, ge=0)
    base_carbs_g: float = Field(default=0.0, ge=0)
    base_fat_g: float = Field(default=0.0, ge=0)
    base_fiber_g: float = Field(default=0.0, ge=0)
    portion_size: float = Field(default=DEFAULT_PORTION_SIZE, ge=0)
    portion_unit: str = DEFAULT_PORTION_UNIT
    custom_food_id: UUID | None = None

    @property
    def base_per_100(self) -> NutritionProfile:
        return NutritionProfile(
            calories=self.base_calories,
            protein_g=self.base_protein_g,
            carbs_g=self.base_carbs_g,
            fat_g=self.base_fat_g,
            fiber_g=self.base_fiber_g,
        )


class NewFoodForm(BaseModel):
    """Raw text of the "create new food" form."""

    name: str
    calories: str
    protein_g: str = ""
    carbs_g: str = ""
    fat_g: str = ""
    fiber_g: str = ""

    @field_validator("name", "calories")
    @classmethod
    def _required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Please enter at least a name and calories")
        return value.strip()

    def to_selection(self, portion_size: float) -> FoodSelection:
        return FoodSelection(
            name=self.name,
            base_calories=max(_leading(self.calories, _LEADING_INT), 0.0),
            base_protein_g=max(_leading(self.protein_g, _LEADING_FLOAT), 0.0),
            base_carbs_g=max(_leading(self.carbs_g, _LEADING_FLOAT), 0.0),
            base_fat_g=max(_leading(self.fat_g, _LEADING_FLOAT), 0.0),
            base_fiber_g=max(_leading(self.fiber_g, _LEADING_FLOAT), 0.0),
            portion_size=portion_size,
        )


class ReplacementLookup(Protocol):
    """Collaborator that resolves a user's selection into a replacement food."""

    def resolve(self, selection: object, portion_size: float) -> FoodSelection:
        """Return the food for a selection at the given portion."""


def from_search_result(
    result: dict[str, object], portion_size: float
) -> FoodSelection:
    """Build a replacement from a food database search hit."""
    return FoodSelection(
        name=str(result.get("name") or ""),
        base_calories=float(result.get("calories") or 0.0),
        base_protein_g=float(result.get("protein_g") or 0.0),
        base_carbs_g=float(result.get("carbs_g") or 0.0),
        base_fat_g=float(result.get("fat_g") or 0.0),
        base_fiber_g=float(result.get("fiber_g") or 0.0),
        portion_size=portion_size,
    )


def from_custom_food(food: CustomFood, portion_size: float) -> FoodSelection:
    base = food.base_per_100
    return FoodSelection(
        name=food.name,
        base_calories=base.calories,
        base_protein_g=base.protein_g,
        base_carbs_g=base.carbs_g,
        base_fat_g=base.fat_g,
        base_fiber_g=base.fiber_g,
        portion_size=portion_size,
        custom_food_id=food.id,
    )


def _leading(text: str, pattern: re.Pattern[str]) -> float:
    match = pattern.match(text)
    if match is None:
        return 0.0
    return float(match.group(0))
