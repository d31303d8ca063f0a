"""Supabase repository for daily statistics."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from meal_dashboard.domain.nutrition import NutritionProfile, Totals
from meal_dashboard.domain.stats import DailyAchievement, MealTotalsRow
from meal_dashboard.services.stats import StatsRepository


@dataclass
class SupabaseStatsRepository(StatsRepository):
    """Supabase implementation for daily roll-ups."""

    client: Client

    def list_meal_totals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealTotalsRow]:
        """Return meal totals consumed in the time range."""
        response = (
            self.client.table("meals")
            .select(
                "consumed_at, total_calories, total_protein_g, total_carbs_g, "
                "total_fat_g, total_fiber_g"
            )
            .eq("user_id", str(user_id))
            .gte("consumed_at", start.isoformat())
            .lt("consumed_at", end.isoformat())
            .order("consumed_at", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def upsert_achievement(self, achievement: DailyAchievement) -> None:
        """Upsert the achievement row for the user and day."""
        goals = achievement.goals
        actual = achievement.actual
        self.client.table("daily_achievements").upsert(
            {
                "user_id": str(achievement.user_id),
                "achievement_date": achievement.day.isoformat(),
                "calories_goal": goals.calories,
                "protein_goal": goals.protein_g,
                "carbs_goal": goals.carbs_g,
                "fat_goal": goals.fat_g,
                "fiber_goal": goals.fiber_g,
                "calories_actual": actual.calories,
                "protein_actual": actual.protein_g,
                "carbs_actual": actual.carbs_g,
                "fat_actual": actual.fat_g,
                "fiber_actual": actual.fiber_g,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id,achievement_date",
        ).execute()

    def get_user_goals(self, user_id: UUID) -> NutritionProfile | None:
        """Return the user's saved goals, if any."""
        response = (
            self.client.table("user_goals")
            .select("calories, protein, carbs, fat, fiber")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return NutritionProfile(
            calories=float(row.get("calories") or 0.0),
            protein_g=float(row.get("protein") or 0.0),
            carbs_g=float(row.get("carbs") or 0.0),
            fat_g=float(row.get("fat") or 0.0),
            fiber_g=float(row.get("fiber") or 0.0),
        )

    def upsert_user_goals(self, user_id: UUID, goals: NutritionProfile) -> None:
        """Upsert the user's goals row."""
        response = (
            self.client.table("user_goals")
            .upsert(
                {
                    "user_id": str(user_id),
                    "calories": goals.calories,
                    "protein": goals.protein_g,
                    "carbs": goals.carbs_g,
                    "fat": goals.fat_g,
                    "fiber": goals.fiber_g,
                },
                on_conflict="user_id",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save goals")


def _parse_row(row: dict[str, object]) -> MealTotalsRow:
    consumed_raw = row.get("consumed_at")
    consumed_at = (
        datetime.fromisoformat(consumed_raw)
        if isinstance(consumed_raw, str) and consumed_raw
        else datetime.min.replace(tzinfo=UTC)
    )
    return MealTotalsRow(
        consumed_at=consumed_at,
        totals=Totals(
            calories=int(row.get("total_calories") or 0),
            protein_g=float(row.get("total_protein_g") or 0.0),
            carbs_g=float(row.get("total_carbs_g") or 0.0),
            fat_g=float(row.get("total_fat_g") or 0.0),
            fiber_g=float(row.get("total_fiber_g") or 0.0),
        ),
    )
