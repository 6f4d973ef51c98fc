"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import pytest

from calorie_tracker.config import Settings
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.admin import AdminUser
from calorie_tracker.domain.entries import FoodLogEntry
from calorie_tracker.domain.goals import UserGoalSettings
from calorie_tracker.services.admin import AdminRepository, AdminService
from calorie_tracker.services.analysis import FoodAnalysisClient, FoodAnalysisService
from calorie_tracker.services.cache import InMemoryCache
from calorie_tracker.services.food_log import FoodEntryRepository, FoodLogService
from calorie_tracker.services.stats import StatsService
from calorie_tracker.services.user_settings import (
    UserSettingsRepository,
    UserSettingsService,
)

# Thursday of the week starting Monday 2024-01-15.
FIXED_NOW = datetime(2024, 1, 18, 12, 0, tzinfo=UTC)


def fixed_clock() -> datetime:
    return FIXED_NOW


def make_entry(  # noqa: PLR0913
    user_id: UUID,
    entry_date: date,
    calories: float | None,
    protein: float | None = 0,
    name: str = "Meal",
    description: str | None = None,
) -> FoodLogEntry:
    return FoodLogEntry(
        id=uuid4(),
        user_id=user_id,
        entry_date=entry_date,
        created_at=FIXED_NOW,
        name=name,
        description=description,
        calories=calories,
        protein=protein,
    )


@dataclass
class InMemoryFoodEntryRepository(FoodEntryRepository):
    """In-memory food entry repository for tests."""

    entries: list[FoodLogEntry] = field(default_factory=list)
    range_calls: list[tuple[UUID, date, date]] = field(default_factory=list)
    fail_with: Exception | None = None

    def list_entries(self, user_id: UUID, start: date, end: date) -> list[FoodLogEntry]:
        self.range_calls.append((user_id, start, end))
        if self.fail_with is not None:
            raise self.fail_with
        return [
            entry
            for entry in self.entries
            if entry.user_id == user_id and start <= entry.entry_date <= end
        ]

    def get_entry(self, user_id: UUID, entry_id: UUID) -> FoodLogEntry | None:
        for entry in self.entries:
            if entry.id == entry_id and entry.user_id == user_id:
                return entry
        return None

    def create_entry(  # noqa: PLR0913
        self,
        user_id: UUID,
        entry_date: date,
        name: str,
        description: str | None,
        calories: float,
        protein: float,
    ) -> FoodLogEntry:
        entry = make_entry(
            user_id,
            entry_date,
            calories,
            protein,
            name=name,
            description=description,
        )
        self.entries.append(entry)
        return entry

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> None:
        self.entries = [
            entry
            for entry in self.entries
            if not (entry.id == entry_id and entry.user_id == user_id)
        ]


@dataclass
class InMemoryUserSettingsRepository(UserSettingsRepository):
    """In-memory user settings repository for tests."""

    goals: dict[UUID, UserGoalSettings] = field(default_factory=dict)

    def get_goals(self, user_id: UUID) -> UserGoalSettings | None:
        return self.goals.get(user_id)

    def upsert_goals(self, user_id: UUID, goals: UserGoalSettings) -> None:
        self.goals[user_id] = goals


@dataclass
class InMemoryAdminRepository(AdminRepository):
    """In-memory admin repository backed by the settings fake."""

    settings_repository: InMemoryUserSettingsRepository
    entry_repository: InMemoryFoodEntryRepository = field(
        default_factory=InMemoryFoodEntryRepository
    )
    users: list[AdminUser] = field(default_factory=list)

    def list_users(self) -> list[AdminUser]:
        return [self._with_goals(user) for user in self.users]

    def get_user(self, user_id: UUID) -> AdminUser | None:
        for user in self.users:
            if user.id == user_id:
                return self._with_goals(user)
        return None

    def count_users(self) -> int:
        return len(self.users)

    def count_food_entries(self) -> int:
        return len(self.entry_repository.entries)

    def list_entry_activity(self, start: date, end: date) -> list[tuple[date, UUID]]:
        return [
            (entry.entry_date, entry.user_id)
            for entry in self.entry_repository.entries
            if start <= entry.entry_date <= end
        ]

    def _with_goals(self, user: AdminUser) -> AdminUser:
        goals = self.settings_repository.goals.get(user.id, user.goals)
        return AdminUser(
            id=user.id,
            email=user.email,
            last_active_at=user.last_active_at,
            goals=goals,
        )


@dataclass
class FakeFoodAnalysisClient(FoodAnalysisClient):
    """Fake analysis client returning a fixed estimate."""

    payload: dict[str, object] = field(
        default_factory=lambda: {"name": "2 rotis, dal", "calories": 450, "protein": 18}
    )
    calls: list[dict[str, object]] = field(default_factory=list)

    async def estimate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        description: str | None,
        image_data_url: str | None,
        schema: dict[str, object],
    ) -> dict[str, object]:
        self.calls.append({"description": description, "image": image_data_url})
        return self.payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="test.service.key",
        admin_token="admin-token",
        openai_api_key="openai-key",
    )


@pytest.fixture
def entry_repository() -> InMemoryFoodEntryRepository:
    return InMemoryFoodEntryRepository()


@pytest.fixture
def settings_repository() -> InMemoryUserSettingsRepository:
    return InMemoryUserSettingsRepository()


@pytest.fixture
def user_settings_service(
    settings_repository: InMemoryUserSettingsRepository,
) -> UserSettingsService:
    return UserSettingsService(settings_repository)


@pytest.fixture
def analysis_client() -> FakeFoodAnalysisClient:
    return FakeFoodAnalysisClient()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    entry_repository: InMemoryFoodEntryRepository,
    settings_repository: InMemoryUserSettingsRepository,
    user_settings_service: UserSettingsService,
    analysis_client: FakeFoodAnalysisClient,
) -> AppContainer:
    analysis_service = FoodAnalysisService(
        client=analysis_client,
        model=settings.openai_model,
        reasoning_effort=settings.openai_reasoning_effort,
        store=settings.openai_store,
    )
    food_log_service = FoodLogService(
        repository=entry_repository,
        settings_service=user_settings_service,
        analysis_service=analysis_service,
        clock=fixed_clock,
    )
    stats_service = StatsService(
        repository=entry_repository,
        settings_service=user_settings_service,
        clock=fixed_clock,
    )
    admin_service = AdminService(
        admin_repository=InMemoryAdminRepository(
            settings_repository, entry_repository=entry_repository
        ),
        entry_repository=entry_repository,
        settings_service=user_settings_service,
        clock=fixed_clock,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        user_settings_service=user_settings_service,
        food_log_service=food_log_service,
        stats_service=stats_service,
        admin_service=admin_service,
        cache=InMemoryCache(),
        close_resources=close_resources,
    )
