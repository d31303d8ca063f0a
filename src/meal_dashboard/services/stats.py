"""Daily goal achievement roll-up."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from meal_dashboard.domain.nutrition import NutritionProfile, Totals
from meal_dashboard.domain.stats import DailyAchievement, MealTotalsRow
from meal_dashboard.services.goals import UserProfile, goals_from_profile
from meal_dashboard.services.scaling import round_totals, sum_profiles

_logger = logging.getLogger(__name__)

DEFAULT_GOALS = NutritionProfile(
    calories=2000, protein_g=150, carbs_g=250, fat_g=65, fiber_g=30
)


class StatsRepository(Protocol):
    """Persistence interface for daily statistics."""

    def list_meal_totals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealTotalsRow]:
        """Return totals of meals consumed within a time range."""

    def upsert_achievement(self, achievement: DailyAchievement) -> None:
        """Create or replace the achievement row for the user and day."""

    def get_user_goals(self, user_id: UUID) -> NutritionProfile | None:
        """Return the goals a user has saved, if any."""

    def upsert_user_goals(self, user_id: UUID, goals: NutritionProfile) -> None:
        """Create or replace a user's saved goals."""


@dataclass
class AchievementService:
    """Keeps the per-day achievement row in step with logged meals."""

    repository: StatsRepository
    goals: NutritionProfile = DEFAULT_GOALS
    timezone_name: str = "UTC"

    def daily_totals(self, user_id: UUID, day: date) -> Totals:
        """Return the summed meal totals for a day in the service timezone."""
        tz = ZoneInfo(self.timezone_name)
        start = datetime.combine(day, time.min, tzinfo=tz)
        end = start + timedelta(days=1)
        rows = self.repository.list_meal_totals(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )
        return _aggregate_day(day, rows, tz)

    def refresh(
        self,
        user_id: UUID,
        day: date | None = None,
        goals: NutritionProfile | None = None,
    ) -> DailyAchievement:
        """Recompute and store the achievement row for a day (today by default).

        Without explicit goals the user's saved goals are used; fields they
        leave unset fall back to the service defaults.
        """
        tz = ZoneInfo(self.timezone_name)
        resolved_day = day or datetime.now(tz=tz).date()
        if goals is None:
            goals = self.repository.get_user_goals(user_id)
        achievement = DailyAchievement(
            user_id=user_id,
            day=resolved_day,
            goals=_merge_goals(goals, self.goals),
            actual=self.daily_totals(user_id, resolved_day),
        )
        self.repository.upsert_achievement(achievement)
        return achievement

    def set_goals_from_profile(
        self, user_id: UUID, profile: UserProfile
    ) -> NutritionProfile:
        """Calculate goals from a body profile and save them for the user."""
        goals = goals_from_profile(profile)
        self.repository.upsert_user_goals(user_id, goals)
        _logger.info("Saved goals for user %s (calories=%s)", user_id, goals.calories)
        return goals

    def day_of(self, moment: datetime) -> date:
        """Return the calendar day a timestamp falls on in the service timezone."""
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=UTC)
        return moment.astimezone(ZoneInfo(self.timezone_name)).date()


def _aggregate_day(day: date, rows: list[MealTotalsRow], tz: ZoneInfo) -> Totals:
    profiles = [
        row.totals.as_profile()
        for row in rows
        if row.consumed_at.astimezone(tz).date() == day
    ]
    return round_totals(sum_profiles(profiles))


def _merge_goals(
    goals: NutritionProfile | None, defaults: NutritionProfile
) -> NutritionProfile:
    """Fill goals that are missing or zero from the defaults."""
    if goals is None:
        return defaults
    return NutritionProfile(
        calories=goals.calories or defaults.calories,
        protein_g=goals.protein_g or defaults.protein_g,
        carbs_g=goals.carbs_g or defaults.carbs_g,
        fat_g=goals.fat_g or defaults.fat_g,
        fiber_g=goals.fiber_g or defaults.fiber_g,
    )
