"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from meal_dashboard.config import Settings
from meal_dashboard.domain.library import CustomFood
from meal_dashboard.domain.meals import FoodComponent, Meal
from meal_dashboard.domain.nutrition import NutritionProfile, Totals
from meal_dashboard.domain.stats import DailyAchievement, MealTotalsRow
from meal_dashboard.services.library import LibraryRepository, LibraryService
from meal_dashboard.services.meals import MealRepository, MealService
from meal_dashboard.services.scaling import compute_totals
from meal_dashboard.services.stats import AchievementService, StatsRepository
from meal_dashboard.services.users import CurrentUserProvider


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository for tests."""

    meals: dict[UUID, Meal] = field(default_factory=dict)
    components: dict[UUID, list[FoodComponent]] = field(default_factory=dict)
    fail_meal_writes: int = 0
    fail_component_writes: int = 0
    writes: list[str] = field(default_factory=list)

    def read_meal(self, meal_id: UUID) -> Meal | None:
        meal = self.meals.get(meal_id)
        if meal is None:
            return None
        # Mirror the store: simple meals keep no base values, nothing nests.
        return replace(meal, components=(), base_per_100=None)

    def read_components(self, meal_id: UUID) -> list[FoodComponent]:
        return [
            replace(component, portion_display="")
            for component in self.components.get(meal_id, [])
        ]

    def write_meal(self, meal: Meal) -> None:
        if self.fail_meal_writes:
            self.fail_meal_writes -= 1
            raise RuntimeError("Failed to save meal")
        self.writes.append("meal")
        self.meals[meal.id] = meal

    def write_components(self, meal_id: UUID, components: list[FoodComponent]) -> None:
        if self.fail_component_writes:
            self.fail_component_writes -= 1
            raise RuntimeError("Failed to save meal components")
        self.writes.append("components")
        self.components[meal_id] = list(components)

    def delete_components(self, meal_id: UUID) -> None:
        self.components.pop(meal_id, None)

    def delete_meal(self, meal_id: UUID) -> None:
        self.meals.pop(meal_id, None)


@dataclass
class InMemoryLibraryRepository(LibraryRepository):
    """In-memory custom food repository for tests."""

    foods: dict[UUID, CustomFood] = field(default_factory=dict)

    def create_food(self, food: CustomFood) -> CustomFood:
        created = replace(food, id=uuid4(), created_at=datetime.now(tz=UTC))
        self.foods[created.id] = created
        return created

    def get_food(self, food_id: UUID) -> CustomFood | None:
        return self.foods.get(food_id)

    def list_foods(self, user_id: UUID) -> list[CustomFood]:
        foods = [food for food in self.foods.values() if food.user_id == user_id]
        return sorted(foods, key=lambda food: food.created_at, reverse=True)


@dataclass
class InMemoryStatsRepository(StatsRepository):
    """In-memory stats repository reading meal totals from a meal repository."""

    meal_repository: InMemoryMealRepository
    achievements: dict[tuple[UUID, object], DailyAchievement] = field(
        default_factory=dict
    )
    goals: dict[UUID, NutritionProfile] = field(default_factory=dict)

    def list_meal_totals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealTotalsRow]:
        return [
            MealTotalsRow(consumed_at=meal.consumed_at, totals=meal.totals)
            for meal in self.meal_repository.meals.values()
            if meal.user_id == user_id and start <= meal.consumed_at < end
        ]

    def upsert_achievement(self, achievement: DailyAchievement) -> None:
        self.achievements[(achievement.user_id, achievement.day)] = achievement

    def get_user_goals(self, user_id: UUID) -> NutritionProfile | None:
        return self.goals.get(user_id)

    def upsert_user_goals(self, user_id: UUID, goals: NutritionProfile) -> None:
        self.goals[user_id] = goals


@dataclass
class FakeUserProvider(CurrentUserProvider):
    """Fake auth provider with a fixed user."""

    user_id: UUID | None = field(default_factory=uuid4)

    def current_user_id(self) -> UUID | None:
        return self.user_id


def make_component(
    calories: float,
    portion_size: float,
    name: str = "food",
    protein_g: float = 0.0,
    carbs_g: float = 0.0,
    fat_g: float = 0.0,
    fiber_g: float = 0.0,
) -> FoodComponent:
    return FoodComponent(
        id=uuid4(),
        name=name,
        base_per_100=NutritionProfile(calories, protein_g, carbs_g, fat_g, fiber_g),
        portion_size=portion_size,
    )


def make_compound_meal(components: list[FoodComponent], name: str = "Bowl") -> Meal:
    meal = Meal(
        id=uuid4(),
        user_id=uuid4(),
        name=name,
        meal_type="lunch",
        consumed_at=datetime.now(tz=UTC),
        is_compound=True,
        totals=Totals.zero(),
        components=tuple(components),
    )
    return replace(meal, totals=compute_totals(meal))


def make_simple_meal(
    base: NutritionProfile, portion_size: float | None, name: str = "Oatmeal"
) -> Meal:
    meal = Meal(
        id=uuid4(),
        user_id=uuid4(),
        name=name,
        meal_type="breakfast",
        consumed_at=datetime.now(tz=UTC),
        is_compound=False,
        totals=Totals.zero(),
        base_per_100=base,
        portion_size=portion_size,
    )
    return replace(meal, totals=compute_totals(meal))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
    )


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def stats_repository(
    meal_repository: InMemoryMealRepository,
) -> InMemoryStatsRepository:
    return InMemoryStatsRepository(meal_repository)


@pytest.fixture
def achievement_service(
    stats_repository: InMemoryStatsRepository,
) -> AchievementService:
    return AchievementService(stats_repository)


@pytest.fixture
def meal_service(
    meal_repository: InMemoryMealRepository,
    achievement_service: AchievementService,
) -> MealService:
    return MealService(
        repository=meal_repository, achievement_service=achievement_service
    )


@pytest.fixture
def library_service() -> LibraryService:
    return LibraryService(InMemoryLibraryRepository())
