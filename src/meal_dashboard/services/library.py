"""Services for the user's custom food library."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from meal_dashboard.domain.library import CustomFood, FoodSource
from meal_dashboard.domain.meals import Meal
from meal_dashboard.services.derivation import (
    DerivationInput,
    derivation_for_component,
    derivation_for_meal,
    derive_per_100,
)

_logger = logging.getLogger(__name__)


class LibraryRepository(Protocol):
    """Persistence interface for custom foods."""

    def create_food(self, food: CustomFood) -> CustomFood:
        """Create a custom food and return it with its id."""

    def get_food(self, food_id: UUID) -> CustomFood | None:
        """Return a custom food by id, if present."""

    def list_foods(self, user_id: UUID) -> list[CustomFood]:
        """Return a user's custom foods, newest first."""


@dataclass
class LibraryService:
    """Application service for saving and listing custom foods."""

    repository: LibraryRepository

    def save_meal_as_food(
        self, user_id: UUID, meal: Meal, name: str | None = None
    ) -> CustomFood:
        """Save a meal's current nutrition as a reusable per-100 food.

        Raises ``DerivationRejected`` when the meal weighs nothing.
        """
        source = FoodSource.COMPOUND_MEAL if meal.is_compound else FoodSource.SIMPLE_MEAL
        return self._save(user_id, derivation_for_meal(meal), source, name)

    def save_component_as_food(
        self,
        user_id: UUID,
        meal: Meal,
        component_id: UUID,
        name: str | None = None,
    ) -> CustomFood:
        """Save one edited component of a meal as a reusable food."""
        for component in meal.components:
            if component.id == component_id:
                return self._save(
                    user_id,
                    derivation_for_component(component),
                    FoodSource.EDITED_FROM_MEAL,
                    name,
                )
        raise KeyError(f"Component {component_id} is not part of meal {meal.id}")

    def get_food(self, food_id: UUID) -> CustomFood | None:
        return self.repository.get_food(food_id)

    def list_foods(self, user_id: UUID) -> list[CustomFood]:
        return self.repository.list_foods(user_id)

    def _save(
        self,
        user_id: UUID,
        derivation: DerivationInput,
        source: FoodSource,
        name: str | None,
    ) -> CustomFood:
        base = derive_per_100(derivation.totals, derivation.total_weight)
        food = self.repository.create_food(
            CustomFood(
                id=None,
                user_id=user_id,
                name=name or derivation.name,
                base_per_100=base,
                source=source,
                original_food_name=derivation.name,
            )
        )
        _logger.info("Saved custom food %s from %s", food.id, source.value)
        return food
