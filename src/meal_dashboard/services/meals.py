"""Meal logging, editing persistence and deletion."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol, TypeVar
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from meal_dashboard.domain.meals import (
    DEFAULT_PORTION_UNIT,
    NOTES_MAX_LENGTH,
    FoodComponent,
    Meal,
    MealType,
)
from meal_dashboard.domain.nutrition import Totals
from meal_dashboard.domain.sessions import EditSession
from meal_dashboard.services.derivation import base_from_totals
from meal_dashboard.services.replacement import FoodSelection
from meal_dashboard.services.scaling import compute_totals, format_amount
from meal_dashboard.services.sessions import begin_edit
from meal_dashboard.services.stats import AchievementService

_logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class MealRepository(Protocol):
    """Persistence interface for meals and their components."""

    def read_meal(self, meal_id: UUID) -> Meal | None:
        """Return a meal record without components, if present."""

    def read_components(self, meal_id: UUID) -> list[FoodComponent]:
        """Return a meal's components in display order."""

    def write_meal(self, meal: Meal) -> None:
        """Insert or update a meal record, including its totals."""

    def write_components(self, meal_id: UUID, components: list[FoodComponent]) -> None:
        """Insert or update component records for a meal."""

    def delete_components(self, meal_id: UUID) -> None:
        """Delete all component records for a meal."""

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal record."""


class MealNotFoundError(LookupError):
    """Raised when a meal id does not exist."""


class SaveFailedError(RuntimeError):
    """Raised when a meal could not be fully written.

    ``phase`` is ``"components"`` when nothing was written for the edit, or
    ``"meal"`` when components were written but the meal record (and its
    totals) was not.
    """

    def __init__(self, meal_id: UUID, phase: str) -> None:
        super().__init__(f"Failed to save {phase} for meal {meal_id}")
        self.meal_id = meal_id
        self.phase = phase


class MealInput(BaseModel):
    """Descriptive fields of a meal being logged."""

    name: str = Field(min_length=1)
    meal_type: MealType = "lunch"
    consumed_at: datetime | None = None
    notes: str | None = Field(default=None, max_length=NOTES_MAX_LENGTH)


@dataclass
class MealService:
    """Service that persists meals built and edited by the engine."""

    repository: MealRepository
    achievement_service: AchievementService | None = None
    retry_attempts: int = 1

    def log_simple_meal(
        self, user_id: UUID, details: MealInput, food: FoodSelection
    ) -> Meal:
        """Log a meal consisting of one food."""
        meal = Meal(
            id=uuid4(),
            user_id=user_id,
            name=details.name,
            meal_type=details.meal_type,
            consumed_at=details.consumed_at or datetime.now(tz=UTC),
            is_compound=False,
            totals=Totals.zero(),
            base_per_100=food.base_per_100,
            portion_size=food.portion_size,
            portion_unit=food.portion_unit,
            notes=details.notes,
        )
        return self._create(replace(meal, totals=compute_totals(meal)))

    def log_compound_meal(
        self, user_id: UUID, details: MealInput, foods: list[FoodSelection]
    ) -> Meal:
        """Log a meal made of several foods, each with its own portion."""
        components = tuple(
            FoodComponent(
                id=uuid4(),
                name=food.name,
                base_per_100=food.base_per_100,
                portion_size=food.portion_size,
                portion_unit=food.portion_unit,
                portion_display=f"{format_amount(food.portion_size)}"
                f"{food.portion_unit}",
                custom_food_id=food.custom_food_id,
            )
            for food in foods
        )
        meal = Meal(
            id=uuid4(),
            user_id=user_id,
            name=details.name,
            meal_type=details.meal_type,
            consumed_at=details.consumed_at or datetime.now(tz=UTC),
            is_compound=True,
            totals=Totals.zero(),
            components=components,
            portion_unit=DEFAULT_PORTION_UNIT,
            notes=details.notes,
        )
        return self._create(replace(meal, totals=compute_totals(meal)))

    def duplicate_meal(self, meal_id: UUID, consumed_at: datetime | None = None) -> Meal:
        """Log a copy of a meal with new ids and without its photo."""
        original = self.get_meal(meal_id)
        components = tuple(replace(c, id=uuid4()) for c in original.components)
        copy = replace(
            original,
            id=uuid4(),
            consumed_at=consumed_at or datetime.now(tz=UTC),
            components=components,
            photo_url=None,
        )
        return self._create(copy)

    def get_meal(self, meal_id: UUID) -> Meal:
        """Return a meal with its components and freshly computed totals."""
        meal = self.repository.read_meal(meal_id)
        if meal is None:
            raise MealNotFoundError(f"Meal {meal_id} not found")
        if meal.is_compound:
            components = tuple(self.repository.read_components(meal_id))
            meal = replace(meal, components=components)
        elif meal.base_per_100 is None:
            meal = replace(
                meal, base_per_100=base_from_totals(meal.totals, meal.portion_size)
            )
        return replace(meal, totals=compute_totals(meal))

    def load_for_editing(self, meal_id: UUID) -> EditSession:
        """Start an edit session for a stored meal."""
        return begin_edit(self.get_meal(meal_id))

    def save_session(self, session: EditSession) -> Meal:
        """Persist an edit session in two phases: components, then the meal.

        Raises ``SaveFailedError`` if either phase keeps failing; the caller
        keeps the session so no input is lost.
        """
        meal = replace(session.meal, totals=compute_totals(session.meal))
        stored = self.repository.read_meal(meal.id)
        if meal.is_compound:
            self._with_retry(
                lambda: self.repository.write_components(
                    meal.id, list(meal.components)
                ),
                meal.id,
                "components",
            )
        self._with_retry(lambda: self.repository.write_meal(meal), meal.id, "meal")
        _logger.info("Saved meal %s (calories=%s)", meal.id, meal.totals.calories)
        self._refresh_achievement(meal, stored)
        return meal

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal, its components and its cached totals."""
        meal = self.repository.read_meal(meal_id)
        if meal is None:
            raise MealNotFoundError(f"Meal {meal_id} not found")
        self.repository.delete_components(meal_id)
        self.repository.delete_meal(meal_id)
        _logger.info("Deleted meal %s", meal_id)
        self._refresh_achievement(meal)

    def repair_totals(self, meal_id: UUID) -> Meal:
        """Recompute a stored meal's totals from its stored components."""
        meal = self.get_meal(meal_id)
        self._with_retry(lambda: self.repository.write_meal(meal), meal.id, "meal")
        _logger.info("Repaired totals for meal %s", meal_id)
        return meal

    def _create(self, meal: Meal) -> Meal:
        self._with_retry(lambda: self.repository.write_meal(meal), meal.id, "meal")
        if meal.components:
            try:
                self._with_retry(
                    lambda: self.repository.write_components(
                        meal.id, list(meal.components)
                    ),
                    meal.id,
                    "components",
                )
            except SaveFailedError:
                try:
                    self.repository.delete_meal(meal.id)
                except Exception:
                    _logger.exception(
                        "Failed to remove meal %s after its components failed",
                        meal.id,
                    )
                raise
        _logger.info("Logged meal %s (compound=%s)", meal.id, meal.is_compound)
        self._refresh_achievement(meal)
        return meal

    def _with_retry(self, func: Callable[[], _T], meal_id: UUID, phase: str) -> _T:
        attempt = 0
        while True:
            try:
                return func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Writing %s for meal %s failed (attempt %s/%s): %s",
                    phase,
                    meal_id,
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise SaveFailedError(meal_id, phase) from exc

    def _refresh_achievement(self, meal: Meal, previous: Meal | None = None) -> None:
        """Refresh the meal's day, and its former day when it was moved."""
        service = self.achievement_service
        if service is None:
            return
        days = {service.day_of(meal.consumed_at)}
        if previous is not None:
            days.add(service.day_of(previous.consumed_at))
        for day in sorted(days):
            try:
                service.refresh(meal.user_id, day)
            except Exception:
                _logger.exception(
                    "Failed to refresh daily achievement",
                    extra={"meal_id": meal.id, "day": day.isoformat()},
                )
