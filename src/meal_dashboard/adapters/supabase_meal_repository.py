"""Supabase repository for meals and meal components."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from meal_dashboard.domain.meals import DEFAULT_PORTION_UNIT, FoodComponent, Meal
from meal_dashboard.domain.nutrition import NutritionProfile, Totals
from meal_dashboard.services.meals import MealRepository


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meals."""

    client: Client

    def read_meal(self, meal_id: UUID) -> Meal | None:
        """Return a meal row by id."""
        response = (
            self.client.table("meals")
            .select(
                "id, user_id, meal_name, meal_type, consumed_at, total_calories, "
                "total_protein_g, total_carbs_g, total_fat_g, total_fiber_g, "
                "portion_size, portion_unit, is_compound, notes, photo_url"
            )
            .eq("id", str(meal_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def read_components(self, meal_id: UUID) -> list[FoodComponent]:
        """Return component rows for a meal in display order."""
        response = (
            self.client.table("meal_components")
            .select(
                "id, meal_id, component_name, portion_size, portion_unit, "
                "base_calories, base_protein_g, base_carbs_g, base_fat_g, "
                "base_fiber_g, custom_food_id, position"
            )
            .eq("meal_id", str(meal_id))
            .order("position", desc=False)
            .execute()
        )
        return [_parse_component(row) for row in response.data or []]

    def write_meal(self, meal: Meal) -> None:
        """Upsert a meal row with its totals."""
        response = (
            self.client.table("meals")
            .upsert(
                {
                    "id": str(meal.id),
                    "user_id": str(meal.user_id),
                    "meal_name": meal.name,
                    "meal_type": meal.meal_type,
                    "consumed_at": meal.consumed_at.isoformat(),
                    "total_calories": meal.totals.calories,
                    "total_protein_g": meal.totals.protein_g,
                    "total_carbs_g": meal.totals.carbs_g,
                    "total_fat_g": meal.totals.fat_g,
                    "total_fiber_g": meal.totals.fiber_g,
                    "portion_size": meal.portion_size,
                    "portion_unit": meal.portion_unit,
                    "is_compound": meal.is_compound,
                    "notes": meal.notes,
                    "photo_url": meal.photo_url,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save meal")

    def write_components(self, meal_id: UUID, components: list[FoodComponent]) -> None:
        """Upsert component rows in one request."""
        payload = []
        for position, component in enumerate(components):
            base = component.base_per_100
            payload.append(
                {
                    "id": str(component.id),
                    "meal_id": str(meal_id),
                    "component_name": component.name,
                    "portion_size": component.portion_size,
                    "portion_unit": component.portion_unit,
                    "base_calories": base.calories,
                    "base_protein_g": base.protein_g,
                    "base_carbs_g": base.carbs_g,
                    "base_fat_g": base.fat_g,
                    "base_fiber_g": base.fiber_g,
                    "custom_food_id": str(component.custom_food_id)
                    if component.custom_food_id
                    else None,
                    "position": position,
                }
            )
        if not payload:
            return
        response = self.client.table("meal_components").upsert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to save meal components")

    def delete_components(self, meal_id: UUID) -> None:
        """Delete all components of a meal."""
        self.client.table("meal_components").delete().eq(
            "meal_id", str(meal_id)
        ).execute()

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal row."""
        self.client.table("meals").delete().eq("id", str(meal_id)).execute()


def _parse_meal(row: dict[str, object]) -> Meal:
    consumed_raw = row.get("consumed_at")
    consumed_at = (
        datetime.fromisoformat(consumed_raw)
        if isinstance(consumed_raw, str) and consumed_raw
        else datetime.now(tz=UTC)
    )
    portion_raw = row.get("portion_size")
    return Meal(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        name=str(row.get("meal_name") or ""),
        meal_type=str(row.get("meal_type") or "lunch"),
        consumed_at=consumed_at,
        is_compound=bool(row.get("is_compound")),
        totals=Totals(
            calories=int(row.get("total_calories") or 0),
            protein_g=float(row.get("total_protein_g") or 0.0),
            carbs_g=float(row.get("total_carbs_g") or 0.0),
            fat_g=float(row.get("total_fat_g") or 0.0),
            fiber_g=float(row.get("total_fiber_g") or 0.0),
        ),
        portion_size=float(portion_raw) if portion_raw is not None else None,
        portion_unit=row.get("portion_unit") or DEFAULT_PORTION_UNIT,
        notes=row.get("notes"),
        photo_url=row.get("photo_url"),
    )


def _parse_component(row: dict[str, object]) -> FoodComponent:
    portion_raw = row.get("portion_size")
    return FoodComponent(
        id=UUID(row["id"]),
        name=str(row.get("component_name") or ""),
        base_per_100=NutritionProfile(
            calories=float(row.get("base_calories") or 0.0),
            protein_g=float(row.get("base_protein_g") or 0.0),
            carbs_g=float(row.get("base_carbs_g") or 0.0),
            fat_g=float(row.get("base_fat_g") or 0.0),
            fiber_g=float(row.get("base_fiber_g") or 0.0),
        ),
        portion_size=float(portion_raw) if portion_raw is not None else 100.0,
        portion_unit=str(row.get("portion_unit") or DEFAULT_PORTION_UNIT),
        custom_food_id=UUID(row["custom_food_id"])
        if row.get("custom_food_id")
        else None,
    )
