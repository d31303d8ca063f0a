"""Portion scaling and meal aggregation."""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from meal_dashboard.domain.meals import DEFAULT_PORTION_SIZE, FoodComponent, Meal
from meal_dashboard.domain.nutrition import NutritionProfile, Totals


def scale_nutrition(
    base_per_100: NutritionProfile, portion_size: float
) -> NutritionProfile:
    """Return absolute nutrition for a portion of a per-100 profile."""
    factor = portion_size / 100.0
    return NutritionProfile(
        calories=base_per_100.calories * factor,
        protein_g=base_per_100.protein_g * factor,
        carbs_g=base_per_100.carbs_g * factor,
        fat_g=base_per_100.fat_g * factor,
        fiber_g=base_per_100.fiber_g * factor,
    )


def round_half_up(value: float, places: int = 0) -> float:
    """Round like a calculator: halves always go up."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_totals(profile: NutritionProfile) -> Totals:
    """Round calories to an integer and grams to one decimal place."""
    return Totals(
        calories=int(round_half_up(profile.calories)),
        protein_g=round_half_up(profile.protein_g, 1),
        carbs_g=round_half_up(profile.carbs_g, 1),
        fat_g=round_half_up(profile.fat_g, 1),
        fiber_g=round_half_up(profile.fiber_g, 1),
    )


def sum_profiles(profiles: Iterable[NutritionProfile]) -> NutritionProfile:
    total = NutritionProfile.zero()
    for profile in profiles:
        total = NutritionProfile(
            calories=total.calories + profile.calories,
            protein_g=total.protein_g + profile.protein_g,
            carbs_g=total.carbs_g + profile.carbs_g,
            fat_g=total.fat_g + profile.fat_g,
            fiber_g=total.fiber_g + profile.fiber_g,
        )
    return total


def component_nutrition(component: FoodComponent) -> NutritionProfile:
    """Return the unrounded absolute nutrition of a component's portion."""
    return scale_nutrition(component.base_per_100, component.portion_size)


def aggregate_components(components: Iterable[FoodComponent]) -> Totals:
    """Sum component nutrition at full precision, rounding once at the end."""
    return round_totals(sum_profiles(component_nutrition(c) for c in components))


def aggregate_simple(base_per_100: NutritionProfile, portion_size: float) -> Totals:
    return round_totals(scale_nutrition(base_per_100, portion_size))


def total_weight(components: Iterable[FoodComponent]) -> float:
    """Return the summed portion of all components, 0 when there are none."""
    return sum((component.portion_size for component in components), 0.0)


def effective_portion(portion_size: float | None) -> float:
    """Return a usable portion size; missing or invalid sizes count as 100."""
    if portion_size is None or portion_size < 0:
        return DEFAULT_PORTION_SIZE
    return portion_size


def compute_totals(meal: Meal) -> Totals:
    """Aggregate a meal's current state into totals."""
    if meal.is_compound:
        return aggregate_components(meal.components)
    if meal.base_per_100 is None:
        return meal.totals
    return aggregate_simple(meal.base_per_100, effective_portion(meal.portion_size))


def format_amount(value: float) -> str:
    """Render a number without a trailing ``.0``."""
    rounded = round_half_up(value, 2)
    if rounded == int(rounded):
        return str(int(rounded))
    return str(rounded)
