"""Back-computing per-100 profiles from displayed nutrition."""

from dataclasses import dataclass

from meal_dashboard.domain.meals import FoodComponent, Meal
from meal_dashboard.domain.nutrition import NutritionProfile, Totals
from meal_dashboard.services.scaling import (
    component_nutrition,
    compute_totals,
    effective_portion,
    round_half_up,
    round_totals,
    total_weight,
)


class DerivationRejected(ValueError):
    """Raised when a per-100 profile cannot be derived."""


@dataclass(frozen=True)
class DerivationInput:
    """Totals and the weight they were measured over."""

    name: str
    totals: Totals
    total_weight: float


def derive_per_100(totals: Totals, total_weight: float) -> NutritionProfile:
    """Normalize totals measured over ``total_weight`` units to 100 units."""
    if total_weight <= 0:
        raise DerivationRejected(
            f"Cannot derive per-100 values from a total weight of {total_weight}"
        )
    factor = 100.0 / total_weight
    return NutritionProfile(
        calories=round_half_up(totals.calories * factor),
        protein_g=round_half_up(totals.protein_g * factor, 1),
        carbs_g=round_half_up(totals.carbs_g * factor, 1),
        fat_g=round_half_up(totals.fat_g * factor, 1),
        fiber_g=round_half_up(totals.fiber_g * factor, 1),
    )


def derivation_for_meal(meal: Meal) -> DerivationInput:
    """Return what a whole meal's custom food is derived from."""
    totals = compute_totals(meal)
    if meal.is_compound:
        weight = total_weight(meal.components)
    else:
        weight = effective_portion(meal.portion_size)
    return DerivationInput(name=meal.name, totals=totals, total_weight=weight)


def derivation_for_component(component: FoodComponent) -> DerivationInput:
    return DerivationInput(
        name=component.name,
        totals=round_totals(component_nutrition(component)),
        total_weight=component.portion_size,
    )


def base_from_totals(totals: Totals, portion_size: float | None) -> NutritionProfile:
    """Recover an unrounded per-100 base for a stored simple meal."""
    portion = effective_portion(portion_size)
    if portion == 0:
        portion = 100.0
    factor = 100.0 / portion
    profile = totals.as_profile()
    return NutritionProfile(
        calories=profile.calories * factor,
        protein_g=profile.protein_g * factor,
        carbs_g=profile.carbs_g * factor,
        fat_g=profile.fat_g * factor,
        fiber_g=profile.fiber_g * factor,
    )
