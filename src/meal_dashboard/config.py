"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from meal_dashboard.domain.nutrition import NutritionProfile

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    environment: str = _ENVIRONMENT
    log_level: str = "INFO"
    default_timezone: str = "UTC"
    save_retry_attempts: int = 1
    goal_calories: float = 2000
    goal_protein_g: float = 150
    goal_carbs_g: float = 250
    goal_fat_g: float = 65
    goal_fiber_g: float = 30

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def default_goals(self) -> NutritionProfile:
        """Return the daily goals used when a user has none set."""
        return NutritionProfile(
            calories=self.goal_calories,
            protein_g=self.goal_protein_g,
            carbs_g=self.goal_carbs_g,
            fat_g=self.goal_fat_g,
            fiber_g=self.goal_fiber_g,
        )
