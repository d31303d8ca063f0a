"""Editing operations on a meal edit session.

Every operation takes an :class:`EditSession` and returns a new one whose live
meal has its totals recomputed, so the cached totals always match the current
portions and components.
"""

import re
from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime
from uuid import UUID

from meal_dashboard.domain.meals import (
    MEAL_TYPES,
    NOTES_MAX_LENGTH,
    FoodComponent,
    Meal,
)
from meal_dashboard.domain.nutrition import NUTRITION_FIELDS, NutritionProfile, Totals
from meal_dashboard.domain.quantities import QuantityContext
from meal_dashboard.domain.sessions import EditSession
from meal_dashboard.services.naming import decode_name
from meal_dashboard.services.quantities import is_blank, parse_quantity, to_portion
from meal_dashboard.services.reconciler import apply_meal_multiplier
from meal_dashboard.services.replacement import FoodSelection
from meal_dashboard.services.scaling import compute_totals, format_amount, total_weight

_MULTIPLIER_SUFFIX = re.compile(r"^(\d+(?:\.\d+)?)x$")


def begin_edit(meal: Meal) -> EditSession:
    """Start editing a meal, capturing the snapshot of its components."""
    base_name, quantity_text = meal.name, ""
    portion_size = meal.portion_size
    if not meal.is_compound:
        base_name, suffix = decode_name(meal.name)
        if suffix:
            quantity_text = _quantity_text_from_suffix(suffix)
        if portion_size is None and quantity_text:
            portion_size = to_portion(
                parse_quantity(quantity_text, QuantityContext.MULTIPLIER)
            )
        if not quantity_text and portion_size is not None:
            quantity_text = _portion_text(portion_size, meal.portion_unit or "")
    components = tuple(_with_display(component) for component in meal.components)
    live = replace(
        meal, name=base_name, portion_size=portion_size, components=components
    )
    return _refresh(
        EditSession(meal=live, snapshot=components, quantity_text=quantity_text),
        live,
    )


def current_totals(session: EditSession) -> Totals:
    return session.meal.totals


def set_simple_quantity(session: EditSession, text: str) -> EditSession:
    """Apply the quantity typed for a simple meal (``"2"`` or ``"150g"``)."""
    _require_simple(session.meal)
    if is_blank(text):
        return replace(session, quantity_text=text)
    portion = to_portion(parse_quantity(text, QuantityContext.MULTIPLIER))
    meal = replace(session.meal, portion_size=portion)
    return _refresh(replace(session, quantity_text=text), meal)


def set_component_quantity(
    session: EditSession, component_id: UUID, text: str
) -> EditSession:
    """Apply a quantity typed directly for one component.

    The meal-wide multiplier text is left as it is.
    """
    component = _find_component(session.meal, component_id)
    if is_blank(text):
        updated = replace(component, portion_display=text)
    else:
        portion = to_portion(parse_quantity(text, QuantityContext.COMPONENT))
        updated = replace(component, portion_size=portion, portion_display=text)
    return _refresh(session, _swap_component(session.meal, updated))


def set_meal_multiplier(session: EditSession, text: str) -> EditSession:
    """Rescale all components from the snapshot by a meal-wide multiplier."""
    meal = session.meal
    if not meal.is_compound:
        return set_simple_quantity(replace(session, multiplier_text=text), text)
    if total_weight(session.snapshot) == 0:
        return replace(session, multiplier_text=text)
    rescaled = apply_meal_multiplier(text, session.snapshot, meal.components)
    portions = {c.id: (c.portion_size, c.portion_display) for c in rescaled}
    components = []
    for component in meal.components:
        if component.id in portions:
            size, display = portions[component.id]
            component = replace(component, portion_size=size, portion_display=display)
        components.append(component)
    updated = replace(meal, components=tuple(components))
    return _refresh(replace(session, multiplier_text=text), updated)


def override_nutrition(
    session: EditSession,
    values: Mapping[str, float],
    component_id: UUID | None = None,
) -> EditSession:
    """Overwrite per-100 nutrition values of a component or a simple meal.

    Negative values are stored as zero. Unknown field names raise ``KeyError``.
    """
    unknown = set(values) - set(NUTRITION_FIELDS)
    if unknown:
        raise KeyError(f"Unknown nutrition fields: {sorted(unknown)}")
    cleaned = {name: max(float(value), 0.0) for name, value in values.items()}
    meal = session.meal
    if meal.is_compound:
        if component_id is None:
            raise ValueError("A component id is required for compound meals")
        component = _find_component(meal, component_id)
        updated = replace(
            component, base_per_100=replace(component.base_per_100, **cleaned)
        )
        return _refresh(session, _swap_component(meal, updated))
    base = meal.base_per_100 or NutritionProfile.zero()
    return _refresh(session, replace(meal, base_per_100=replace(base, **cleaned)))


def replace_food(
    session: EditSession,
    replacement: FoodSelection,
    component_id: UUID | None = None,
) -> EditSession:
    """Swap a component's food, or a simple meal's food, for another one."""
    meal = session.meal
    if meal.is_compound:
        if component_id is None:
            raise ValueError("A component id is required for compound meals")
        component = _find_component(meal, component_id)
        updated = replace(
            component,
            name=replacement.name,
            base_per_100=replacement.base_per_100,
            portion_size=replacement.portion_size,
            portion_unit=replacement.portion_unit,
            portion_display=_portion_text(
                replacement.portion_size, replacement.portion_unit
            ),
            custom_food_id=replacement.custom_food_id,
        )
        return _refresh(session, _swap_component(meal, updated))
    updated_meal = replace(
        meal,
        name=replacement.name,
        base_per_100=replacement.base_per_100,
        portion_size=replacement.portion_size,
        portion_unit=replacement.portion_unit,
    )
    text = _portion_text(replacement.portion_size, replacement.portion_unit)
    return _refresh(replace(session, quantity_text=text), updated_meal)


def update_details(
    session: EditSession,
    *,
    name: str | None = None,
    meal_type: str | None = None,
    notes: str | None = None,
    consumed_at: datetime | None = None,
) -> EditSession:
    """Change descriptive fields that do not affect nutrition."""
    changes: dict[str, object] = {}
    if name is not None:
        changes["name"] = name
    if meal_type is not None:
        if meal_type not in MEAL_TYPES:
            raise ValueError(f"Unknown meal type: {meal_type}")
        changes["meal_type"] = meal_type
    if notes is not None:
        changes["notes"] = notes[:NOTES_MAX_LENGTH] or None
    if consumed_at is not None:
        changes["consumed_at"] = consumed_at
    return replace(session, meal=replace(session.meal, **changes))


def _refresh(session: EditSession, meal: Meal) -> EditSession:
    return replace(session, meal=replace(meal, totals=compute_totals(meal)))


def _find_component(meal: Meal, component_id: UUID) -> FoodComponent:
    for component in meal.components:
        if component.id == component_id:
            return component
    raise KeyError(f"Component {component_id} is not part of meal {meal.id}")


def _swap_component(meal: Meal, updated: FoodComponent) -> Meal:
    components = tuple(
        updated if component.id == updated.id else component
        for component in meal.components
    )
    return replace(meal, components=components)


def _require_simple(meal: Meal) -> None:
    if meal.is_compound:
        raise ValueError("Compound meals are scaled per component or meal-wide")


def _with_display(component: FoodComponent) -> FoodComponent:
    if component.portion_display:
        return component
    return replace(
        component,
        portion_display=_portion_text(component.portion_size, component.portion_unit),
    )


def _portion_text(portion_size: float, portion_unit: str) -> str:
    return f"{format_amount(portion_size)}{portion_unit}"


def _quantity_text_from_suffix(suffix: str) -> str:
    """Turn a name suffix into quantity text; ``"2x"`` becomes multiplier ``"2"``."""
    match = _MULTIPLIER_SUFFIX.match(suffix)
    if match is not None:
        return match.group(1)
    return suffix
