"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from meal_dashboard.adapters.supabase_auth_provider import SupabaseAuthProvider
from meal_dashboard.adapters.supabase_library_repository import (
    SupabaseLibraryRepository,
)
from meal_dashboard.adapters.supabase_meal_repository import SupabaseMealRepository
from meal_dashboard.adapters.supabase_stats_repository import SupabaseStatsRepository
from meal_dashboard.app_logging import configure_logging
from meal_dashboard.config import Settings
from meal_dashboard.services.library import LibraryService
from meal_dashboard.services.meals import MealService
from meal_dashboard.services.stats import AchievementService
from meal_dashboard.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_service: UserService
    meal_service: MealService
    library_service: LibraryService
    achievement_service: AchievementService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.log_level)
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    achievement_service = AchievementService(
        repository=SupabaseStatsRepository(supabase_client),
        goals=resolved_settings.default_goals(),
        timezone_name=resolved_settings.default_timezone,
    )
    meal_service = MealService(
        repository=SupabaseMealRepository(supabase_client),
        achievement_service=achievement_service,
        retry_attempts=resolved_settings.save_retry_attempts,
    )
    return AppContainer(
        settings=resolved_settings,
        user_service=UserService(SupabaseAuthProvider(supabase_client)),
        meal_service=meal_service,
        library_service=LibraryService(SupabaseLibraryRepository(supabase_client)),
        achievement_service=achievement_service,
    )
