"""Nutrition domain models."""

from dataclasses import dataclass

NUTRITION_FIELDS = ("calories", "protein_g", "carbs_g", "fat_g", "fiber_g")


@dataclass(frozen=True)
class NutritionProfile:
    """Nutrition values, either per 100 units or for an absolute portion."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: float

    @classmethod
    def zero(cls) -> "NutritionProfile":
        return cls(0.0, 0.0, 0.0, 0.0, 0.0)

    def as_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in NUTRITION_FIELDS}


@dataclass(frozen=True)
class Totals:
    """Rounded nutrition totals as surfaced to users and persisted."""

    calories: int
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: float

    @classmethod
    def zero(cls) -> "Totals":
        return cls(0, 0.0, 0.0, 0.0, 0.0)

    def as_profile(self) -> NutritionProfile:
        """Return the totals as an unrounded profile for further arithmetic."""
        return NutritionProfile(
            calories=float(self.calories),
            protein_g=self.protein_g,
            carbs_g=self.carbs_g,
            fat_g=self.fat_g,
            fiber_g=self.fiber_g,
        )
