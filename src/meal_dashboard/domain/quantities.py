"""Parsed portion quantities."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Absolute:
    """An absolute amount in the portion unit, e.g. ``150`` grams."""

    amount: float


@dataclass(frozen=True)
class Multiplier:
    """A factor applied to a 100-unit base portion."""

    factor: float


Quantity = Absolute | Multiplier


class QuantityContext(Enum):
    """Which input field a quantity was typed into; selects the fallback."""

    COMPONENT = "component"
    MULTIPLIER = "multiplier"
