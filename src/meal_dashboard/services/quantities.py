"""Free-text quantity parsing.

A quantity typed by the user is either an absolute amount (``"150g"``) or a
multiplier of the 100-unit base (``"1.5"``). The only signal distinguishing the
two is whether the text contains a letter, so ``"2.5x"`` is read as 2.5 grams.
"""

import re
from dataclasses import dataclass
from typing import Protocol

from meal_dashboard.domain.meals import DEFAULT_PORTION_SIZE
from meal_dashboard.domain.quantities import (
    Absolute,
    Multiplier,
    Quantity,
    QuantityContext,
)

_LETTER = re.compile(r"[^\W\d_]")
_NON_NUMERIC = re.compile(r"[^0-9.]")
_UNSIGNED_NUMBER = re.compile(r"\d+\.?\d*|\.\d+")
_SIGNED_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)")

_DEFAULTS: dict[QuantityContext, Quantity] = {
    QuantityContext.COMPONENT: Absolute(DEFAULT_PORTION_SIZE),
    QuantityContext.MULTIPLIER: Multiplier(1.0),
}


class QuantityParser(Protocol):
    """Interface for turning quantity text into a quantity."""

    def parse(self, text: str, context: QuantityContext) -> Quantity:
        """Parse text, falling back to the default for the context."""


@dataclass(frozen=True)
class LetterHeuristicParser(QuantityParser):
    """Parser that treats any text containing a letter as an absolute amount."""

    def parse(self, text: str, context: QuantityContext) -> Quantity:
        default = default_quantity(context)
        if is_blank(text):
            return default
        if _LETTER.search(text):
            amount = _leading_number(_NON_NUMERIC.sub("", text), _UNSIGNED_NUMBER)
            return Absolute(amount) if amount is not None else default
        factor = _leading_number(text.strip(), _SIGNED_NUMBER)
        if factor is None or factor < 0:
            return default
        return Multiplier(factor)


_parser: QuantityParser = LetterHeuristicParser()


def parse_quantity(
    text: str, context: QuantityContext = QuantityContext.COMPONENT
) -> Quantity:
    """Parse quantity text with the default parser."""
    return _parser.parse(text, context)


def default_quantity(context: QuantityContext) -> Quantity:
    return _DEFAULTS[context]


def is_blank(text: str | None) -> bool:
    """Return True while the user is clearing a quantity field."""
    return text is None or not text.strip()


def to_portion(quantity: Quantity) -> float:
    """Convert a quantity to an absolute portion size."""
    if isinstance(quantity, Absolute):
        return quantity.amount
    return quantity.factor * DEFAULT_PORTION_SIZE


def _leading_number(text: str, pattern: re.Pattern[str]) -> float | None:
    match = pattern.match(text)
    if match is None:
        return None
    return float(match.group(0))
