"""Meal-wide rescaling of compound meal components."""

import logging
from collections.abc import Sequence
from dataclasses import replace

from meal_dashboard.domain.meals import FoodComponent
from meal_dashboard.domain.quantities import Absolute, QuantityContext
from meal_dashboard.services.quantities import is_blank, parse_quantity
from meal_dashboard.services.scaling import format_amount, round_half_up, total_weight

_logger = logging.getLogger(__name__)


def apply_meal_multiplier(
    text: str,
    snapshot: Sequence[FoodComponent],
    current: Sequence[FoodComponent] | None = None,
) -> list[FoodComponent]:
    """Rescale every component proportionally from the original snapshot.

    Numeric text is a factor (``"2"`` doubles every portion). Text with a unit
    is a target total weight (``"600g"``). The factor is always applied to the
    snapshot portions, so typing ``"2"`` and then ``"3"`` yields 3x, not 6x.
    Blank text, or a snapshot weighing nothing, leaves ``current`` (or the
    snapshot) untouched.
    """
    original_total = total_weight(snapshot)
    if not snapshot or original_total == 0 or is_blank(text):
        return list(current if current is not None else snapshot)

    quantity = parse_quantity(text, QuantityContext.MULTIPLIER)
    if isinstance(quantity, Absolute):
        factor = quantity.amount / original_total
    else:
        factor = quantity.factor
    _logger.debug("Meal multiplier %r resolved to factor %s", text, factor)
    return [_rescale(component, factor) for component in snapshot]


def _rescale(component: FoodComponent, factor: float) -> FoodComponent:
    portion = component.portion_size * factor
    display = f"{format_amount(round_half_up(portion))}{component.portion_unit}"
    return replace(component, portion_size=portion, portion_display=display)
