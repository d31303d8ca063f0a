"""Supabase implementation for the custom food library."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from meal_dashboard.domain.library import CustomFood, FoodSource
from meal_dashboard.domain.nutrition import NutritionProfile
from meal_dashboard.services.library import LibraryRepository


@dataclass
class SupabaseLibraryRepository(LibraryRepository):
    """Supabase-backed repository for custom foods."""

    client: Client

    def create_food(self, food: CustomFood) -> CustomFood:
        """Create a custom food row and return it."""
        base = food.base_per_100
        response = (
            self.client.table("user_foods")
            .insert(
                {
                    "user_id": str(food.user_id),
                    "name": food.name,
                    "base_calories": base.calories,
                    "base_protein_g": base.protein_g,
                    "base_carbs_g": base.carbs_g,
                    "base_fat_g": base.fat_g,
                    "base_fiber_g": base.fiber_g,
                    "source": food.source.value,
                    "original_food_name": food.original_food_name,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create custom food")
        return _parse_food(response.data[0])

    def get_food(self, food_id: UUID) -> CustomFood | None:
        """Return a custom food by id, if present."""
        response = (
            self.client.table("user_foods")
            .select("*")
            .eq("id", str(food_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_food(response.data[0])

    def list_foods(self, user_id: UUID) -> list[CustomFood]:
        """Return a user's custom foods, newest first."""
        response = (
            self.client.table("user_foods")
            .select("*")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_food(row) for row in response.data or []]


def _parse_food(row: dict[str, object]) -> CustomFood:
    """Parse a custom food row into a domain model."""
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None
    )
    return CustomFood(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        name=str(row.get("name", "")),
        base_per_100=NutritionProfile(
            calories=float(row.get("base_calories") or 0.0),
            protein_g=float(row.get("base_protein_g") or 0.0),
            carbs_g=float(row.get("base_carbs_g") or 0.0),
            fat_g=float(row.get("base_fat_g") or 0.0),
            fiber_g=float(row.get("base_fiber_g") or 0.0),
        ),
        source=FoodSource(row.get("source") or FoodSource.SIMPLE_MEAL),
        original_food_name=str(row.get("original_food_name") or ""),
        created_at=created_at,
    )
