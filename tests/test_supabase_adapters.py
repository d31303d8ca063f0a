"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from types import SimpleNamespace
from uuid import uuid4

import pytest

from meal_dashboard.adapters.supabase_auth_provider import SupabaseAuthProvider
from meal_dashboard.adapters.supabase_library_repository import (
    SupabaseLibraryRepository,
)
from meal_dashboard.adapters.supabase_meal_repository import SupabaseMealRepository
from meal_dashboard.adapters.supabase_stats_repository import SupabaseStatsRepository
from meal_dashboard.domain.library import CustomFood, FoodSource
from meal_dashboard.domain.nutrition import NutritionProfile, Totals
from meal_dashboard.domain.stats import DailyAchievement
from meal_dashboard.services.stats import DEFAULT_GOALS
from tests.conftest import make_component, make_compound_meal


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {
            "select": [],
            "insert": [],
            "upsert": [],
            "delete": [],
        }
    )
    last_payload: object | None = None
    last_options: dict[str, object] = field(default_factory=dict)
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_order: tuple[str, bool] | None = None
    actions: list[str] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def upsert(self, payload, **options) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "upsert"
        self.last_payload = payload
        self.last_options = options
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((f"{column}>=", value))
        return self

    def lt(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((f"{column}<", value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self.last_order = (column, desc)
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        self.actions.append(action)
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeAuth:
    user_id: str | None = None

    def get_user(self):  # type: ignore[no-untyped-def]
        if self.user_id is None:
            return None
        return SimpleNamespace(user=SimpleNamespace(id=self.user_id))


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)
    auth: FakeAuth = field(default_factory=FakeAuth)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _meal_row(meal_id: str, user_id: str, **overrides) -> dict[str, object]:
    row: dict[str, object] = {
        "id": meal_id,
        "user_id": user_id,
        "meal_name": "Rice bowl",
        "meal_type": "dinner",
        "consumed_at": "2026-05-01T18:30:00+00:00",
        "total_calories": 175,
        "total_protein_g": 7.5,
        "total_carbs_g": 30.0,
        "total_fat_g": 1.2,
        "total_fiber_g": 4.0,
        "portion_size": None,
        "portion_unit": "g",
        "is_compound": True,
        "notes": None,
        "photo_url": None,
    }
    row.update(overrides)
    return row


def test_supabase_meal_repository_reads_meal() -> None:
    client = FakeSupabaseClient()
    meal_id = str(uuid4())
    user_id = str(uuid4())
    client.table("meals").queue("select", [_meal_row(meal_id, user_id)])

    repository = SupabaseMealRepository(client)
    meal = repository.read_meal(uuid4())

    assert meal is not None
    assert str(meal.id) == meal_id
    assert meal.is_compound
    assert meal.totals == Totals(175, 7.5, 30.0, 1.2, 4.0)
    assert meal.consumed_at == datetime(2026, 5, 1, 18, 30, tzinfo=UTC)
    assert repository.read_meal(uuid4()) is None


def test_supabase_meal_repository_reads_components_in_order() -> None:
    client = FakeSupabaseClient()
    components_table = client.table("meal_components")
    food_id = str(uuid4())
    components_table.queue(
        "select",
        [
            {
                "id": str(uuid4()),
                "meal_id": str(uuid4()),
                "component_name": "rice",
                "portion_size": 150,
                "portion_unit": "g",
                "base_calories": 130,
                "base_protein_g": 2.7,
                "base_carbs_g": 28,
                "base_fat_g": None,
                "base_fiber_g": 0.4,
                "custom_food_id": food_id,
                "position": 0,
            }
        ],
    )

    components = SupabaseMealRepository(client).read_components(uuid4())

    assert components_table.last_order == ("position", False)
    assert components[0].name == "rice"
    assert components[0].portion_size == 150
    assert components[0].base_per_100.fat_g == 0
    assert str(components[0].custom_food_id) == food_id


def test_supabase_meal_repository_writes_components_with_position() -> None:
    client = FakeSupabaseClient()
    components_table = client.table("meal_components")
    components_table.queue("upsert", [{"id": "x"}])
    meal = make_compound_meal(
        [make_component(150, 100, name="rice"), make_component(50, 50, name="beans")]
    )

    SupabaseMealRepository(client).write_components(meal.id, list(meal.components))

    payload = components_table.last_payload
    assert isinstance(payload, list)
    assert [row["component_name"] for row in payload] == ["rice", "beans"]
    assert [row["position"] for row in payload] == [0, 1]
    assert payload[1]["portion_size"] == 50


def test_supabase_meal_repository_write_failures_raise() -> None:
    client = FakeSupabaseClient()
    meal = make_compound_meal([make_component(150, 100)])
    repository = SupabaseMealRepository(client)

    with pytest.raises(RuntimeError):
        repository.write_meal(meal)
    with pytest.raises(RuntimeError):
        repository.write_components(meal.id, list(meal.components))


def test_supabase_meal_repository_writes_meal_totals() -> None:
    client = FakeSupabaseClient()
    meals_table = client.table("meals")
    meals_table.queue("upsert", [{"id": "x"}])
    meal = make_compound_meal([make_component(150, 100), make_component(50, 50)])

    SupabaseMealRepository(client).write_meal(meal)

    payload = meals_table.last_payload
    assert isinstance(payload, dict)
    assert payload["id"] == str(meal.id)
    assert payload["total_calories"] == 175
    assert payload["is_compound"] is True


def test_supabase_meal_repository_deletes() -> None:
    client = FakeSupabaseClient()
    meal_id = uuid4()
    repository = SupabaseMealRepository(client)

    repository.delete_components(meal_id)
    repository.delete_meal(meal_id)

    assert client.table("meal_components").last_filters == [("meal_id", str(meal_id))]
    assert client.table("meals").actions == ["delete"]


def test_supabase_library_repository() -> None:
    client = FakeSupabaseClient()
    foods_table = client.table("user_foods")
    food_id = str(uuid4())
    user_id = uuid4()
    row = {
        "id": food_id,
        "user_id": str(user_id),
        "name": "My bowl",
        "base_calories": 117,
        "base_protein_g": 5,
        "base_carbs_g": 20,
        "base_fat_g": 1,
        "base_fiber_g": 3,
        "source": "compound_meal",
        "original_food_name": "Rice bowl",
        "created_at": "2026-05-01T18:30:00+00:00",
    }
    foods_table.queue("insert", [row])
    foods_table.queue("select", [row])

    repository = SupabaseLibraryRepository(client)
    created = repository.create_food(
        CustomFood(
            id=None,
            user_id=user_id,
            name="My bowl",
            base_per_100=NutritionProfile(117, 5, 20, 1, 3),
            source=FoodSource.COMPOUND_MEAL,
            original_food_name="Rice bowl",
        )
    )
    listed = repository.list_foods(user_id)

    assert str(created.id) == food_id
    assert created.source == FoodSource.COMPOUND_MEAL
    assert foods_table.last_order == ("created_at", True)
    assert listed[0].name == "My bowl"
    assert repository.get_food(uuid4()) is None


def test_supabase_stats_repository() -> None:
    client = FakeSupabaseClient()
    meals_table = client.table("meals")
    meals_table.queue(
        "select",
        [{"consumed_at": "2026-05-01T08:00:00+00:00", "total_calories": 300}],
    )
    repository = SupabaseStatsRepository(client)
    user_id = uuid4()

    rows = repository.list_meal_totals(
        user_id,
        datetime(2026, 5, 1, tzinfo=UTC),
        datetime(2026, 5, 2, tzinfo=UTC),
    )
    repository.upsert_achievement(
        DailyAchievement(
            user_id=user_id,
            day=date(2026, 5, 1),
            goals=DEFAULT_GOALS,
            actual=rows[0].totals,
        )
    )

    assert rows[0].totals.calories == 300
    assert rows[0].totals.protein_g == 0
    achievements_table = client.table("daily_achievements")
    payload = achievements_table.last_payload
    assert isinstance(payload, dict)
    assert payload["achievement_date"] == "2026-05-01"
    assert payload["calories_actual"] == 300
    assert payload["calories_goal"] == 2000
    assert achievements_table.last_options == {
        "on_conflict": "user_id,achievement_date"
    }


def test_supabase_stats_repository_user_goals() -> None:
    client = FakeSupabaseClient()
    goals_table = client.table("user_goals")
    goals_table.queue(
        "select",
        [{"calories": 1800, "protein": 120, "carbs": 200, "fat": 60, "fiber": None}],
    )
    repository = SupabaseStatsRepository(client)
    user_id = uuid4()

    goals = repository.get_user_goals(user_id)

    assert goals == NutritionProfile(1800, 120, 200, 60, 0)
    assert goals_table.last_filters == [("user_id", str(user_id))]
    assert repository.get_user_goals(uuid4()) is None

    goals_table.queue("upsert", [{"user_id": str(user_id)}])
    repository.upsert_user_goals(user_id, NutritionProfile(2759, 160, 344, 83, 39))

    assert goals_table.last_payload == {
        "user_id": str(user_id),
        "calories": 2759,
        "protein": 160,
        "carbs": 344,
        "fat": 83,
        "fiber": 39,
    }
    assert goals_table.last_options == {"on_conflict": "user_id"}
    with pytest.raises(RuntimeError, match="Failed to save goals"):
        repository.upsert_user_goals(user_id, DEFAULT_GOALS)

def test_supabase_auth_provider() -> None:
    user_id = uuid4()
    signed_in = FakeSupabaseClient(auth=FakeAuth(str(user_id)))

    assert SupabaseAuthProvider(signed_in).current_user_id() == user_id
    assert SupabaseAuthProvider(FakeSupabaseClient()).current_user_id() is None
