"""Tests for user settings service."""

from uuid import uuid4

import pytest

from calorie_tracker.domain.goals import UserGoalSettings
from calorie_tracker.services.user_settings import UserSettingsService
from tests.conftest import InMemoryUserSettingsRepository


def test_get_goals_returns_defaults_when_missing() -> None:
    service = UserSettingsService(InMemoryUserSettingsRepository())

    goals = service.get_goals(uuid4())

    assert goals.target_calories == 2000
    assert goals.maintenance_calories == 2000
    assert goals.target_protein == 150
    assert goals.timezone == "UTC"


def test_update_goals_merges_supplied_fields() -> None:
    repo = InMemoryUserSettingsRepository()
    user_id = uuid4()
    repo.goals[user_id] = UserGoalSettings(target_calories=1800)
    service = UserSettingsService(repo)

    goals = service.update_goals(
        user_id, maintenance_calories=2300, timezone="Europe/Berlin"
    )

    assert goals == UserGoalSettings(
        target_calories=1800,
        maintenance_calories=2300,
        target_protein=150,
        timezone="Europe/Berlin",
    )
    assert repo.goals[user_id] == goals
    assert service.get_timezone(user_id) == "Europe/Berlin"


def test_update_goals_accepts_zero_target() -> None:
    repo = InMemoryUserSettingsRepository()
    user_id = uuid4()

    goals = UserSettingsService(repo).update_goals(user_id, target_calories=0)

    assert goals.target_calories == 0


def test_update_goals_rejects_negative_values() -> None:
    repo = InMemoryUserSettingsRepository()

    with pytest.raises(ValueError, match="target_protein"):
        UserSettingsService(repo).update_goals(uuid4(), target_protein=-5)
    assert repo.goals == {}


def test_update_goals_rejects_unknown_timezone() -> None:
    with pytest.raises(ValueError, match="Unknown timezone"):
        UserSettingsService(InMemoryUserSettingsRepository()).update_goals(
            uuid4(), timezone="Mars/Olympus_Mons"
        )
