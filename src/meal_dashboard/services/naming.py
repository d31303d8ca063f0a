"""Portion annotations embedded in meal display names.

A simple meal is titled with its portion, e.g. ``"Oatmeal (2x)"`` for 200 g or
``"Oatmeal (150g)"`` otherwise. Loading a meal for editing strips the suffix
back off.
"""

import re

from meal_dashboard.domain.meals import DEFAULT_PORTION_UNIT, Meal
from meal_dashboard.services.scaling import format_amount

_SUFFIX = re.compile(
    r"^(?P<base>.*?)\s*\((?P<suffix>\d+(?:\.\d+)?[^\W\d_][^)]*)\)\s*$"
)


def decode_name(display_name: str) -> tuple[str, str | None]:
    """Split a display name into its base name and portion suffix, if any."""
    match = _SUFFIX.match(display_name)
    if match is None:
        return display_name, None
    return match.group("base"), match.group("suffix")


def encode_name(
    base_name: str, portion_size: float | None, portion_unit: str | None
) -> str:
    """Append a portion suffix to a name, replacing any existing one."""
    name, _ = decode_name(base_name)
    if portion_size is None or not portion_unit:
        return name
    if (
        portion_unit == DEFAULT_PORTION_UNIT
        and portion_size > 0
        and portion_size % 100 == 0
    ):
        suffix = f"({format_amount(portion_size / 100)}x)"
    else:
        suffix = f"({format_amount(portion_size)}{portion_unit})"
    return f"{name} {suffix}" if name else suffix


def display_name(meal: Meal) -> str:
    """Return the title shown for a meal."""
    if meal.is_compound:
        return meal.name
    return encode_name(meal.name, meal.portion_size, meal.portion_unit)
