"""Supabase repository for user goal settings."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from calorie_tracker.domain.goals import DEFAULT_TIMEZONE, UserGoalSettings
from calorie_tracker.services.user_settings import UserSettingsRepository


@dataclass
class SupabaseUserSettingsRepository(UserSettingsRepository):
    """Supabase implementation for user settings."""

    client: Client

    def get_goals(self, user_id: UUID) -> UserGoalSettings | None:
        """Return the stored goals for a user."""
        response = (
            self.client.table("user_settings")
            .select("target_calories, maintenance_calories, target_protein, timezone")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_goals(response.data[0])

    def upsert_goals(self, user_id: UUID, goals: UserGoalSettings) -> None:
        """Create or update the user's settings row."""
        self.client.table("user_settings").upsert(
            {
                "user_id": str(user_id),
                "target_calories": goals.target_calories,
                "maintenance_calories": goals.maintenance_calories,
                "target_protein": goals.target_protein,
                "timezone": goals.timezone,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id",
        ).execute()


def parse_goals(row: dict[str, object]) -> UserGoalSettings:
    """Build goal settings from a user_settings row, filling defaults."""
    defaults = UserGoalSettings()
    return UserGoalSettings(
        target_calories=_int_or(row.get("target_calories"), defaults.target_calories),
        maintenance_calories=_int_or(
            row.get("maintenance_calories"), defaults.maintenance_calories
        ),
        target_protein=_int_or(row.get("target_protein"), defaults.target_protein),
        timezone=str(row.get("timezone") or DEFAULT_TIMEZONE),
    )


def _int_or(value: object, default: int) -> int:
    if value is None:
        return default
    return int(value)
