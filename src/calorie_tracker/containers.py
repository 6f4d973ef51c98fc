"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from calorie_tracker.adapters.openai_food_analysis_client import (
    OpenAIFoodAnalysisClient,
)
from calorie_tracker.adapters.supabase_admin_repository import SupabaseAdminRepository
from calorie_tracker.adapters.supabase_food_entry_repository import (
    SupabaseFoodEntryRepository,
)
from calorie_tracker.adapters.supabase_user_settings_repository import (
    SupabaseUserSettingsRepository,
)
from calorie_tracker.config import Settings
from calorie_tracker.services.admin import AdminService
from calorie_tracker.services.analysis import FoodAnalysisService
from calorie_tracker.services.cache import Cache, InMemoryCache
from calorie_tracker.services.food_log import FoodLogService
from calorie_tracker.services.stats import StatsService
from calorie_tracker.services.user_settings import UserSettingsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_settings_service: UserSettingsService
    food_log_service: FoodLogService
    stats_service: StatsService
    admin_service: AdminService
    cache: Cache
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    entry_repository = SupabaseFoodEntryRepository(supabase_client)
    user_settings_service = UserSettingsService(
        SupabaseUserSettingsRepository(supabase_client)
    )
    analysis_client = OpenAIFoodAnalysisClient.create(resolved_settings.openai_api_key)
    analysis_service = FoodAnalysisService(
        client=analysis_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    food_log_service = FoodLogService(
        repository=entry_repository,
        settings_service=user_settings_service,
        analysis_service=analysis_service,
    )
    stats_service = StatsService(
        repository=entry_repository,
        settings_service=user_settings_service,
    )
    admin_service = AdminService(
        admin_repository=SupabaseAdminRepository(supabase_client),
        entry_repository=entry_repository,
        settings_service=user_settings_service,
    )

    async def close_resources() -> None:
        await analysis_client.client.close()

    return AppContainer(
        settings=resolved_settings,
        user_settings_service=user_settings_service,
        food_log_service=food_log_service,
        stats_service=stats_service,
        admin_service=admin_service,
        cache=InMemoryCache(),
        close_resources=close_resources,
    )
