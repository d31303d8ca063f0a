"""Tests for container wiring."""

from meal_dashboard.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.meal_service is not None
    assert container.library_service is not None
    assert container.user_service is not None
    assert container.meal_service.achievement_service is container.achievement_service
    assert container.meal_service.retry_attempts == settings.save_retry_attempts


def test_settings_default_goals(settings) -> None:
    goals = settings.default_goals()

    assert goals.calories == 2000
    assert goals.fiber_g == 30
