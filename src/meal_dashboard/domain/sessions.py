"""Domain model for a meal editing session."""

from dataclasses import dataclass

from meal_dashboard.domain.meals import FoodComponent, Meal


@dataclass(frozen=True)
class EditSession:
    """Working state for editing one meal.

    ``meal`` is the live copy that reflects in-progress edits and is what gets
    saved. ``snapshot`` holds the components as they were when editing began;
    it is only ever read, as the basis for meal-wide rescaling.
    """

    meal: Meal
    snapshot: tuple[FoodComponent, ...]
    quantity_text: str = ""
    multiplier_text: str = ""
