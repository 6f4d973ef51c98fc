"""Supabase admin data access."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from calorie_tracker.adapters.supabase_user_settings_repository import parse_goals
from calorie_tracker.domain.admin import AdminUser
from calorie_tracker.services.admin import AdminRepository

_PROFILE_COLUMNS = "user_id, email, last_active_at"
_SETTINGS_COLUMNS = (
    "user_id, target_calories, maintenance_calories, target_protein, timezone"
)


@dataclass
class SupabaseAdminRepository(AdminRepository):
    """Supabase implementation for admin queries."""

    client: Client

    def list_users(self) -> list[AdminUser]:
        """Return all users ordered by last activity."""
        profiles = (
            self.client.table("user_profiles")
            .select(_PROFILE_COLUMNS)
            .order("last_active_at", desc=True)
            .execute()
        )
        settings = (
            self.client.table("user_settings").select(_SETTINGS_COLUMNS).execute()
        )
        settings_by_user = {str(row["user_id"]): row for row in settings.data or []}
        return [
            _build_user(row, settings_by_user.get(str(row["user_id"]), {}))
            for row in profiles.data or []
        ]

    def get_user(self, user_id: UUID) -> AdminUser | None:
        """Return one user with their goals."""
        profile = (
            self.client.table("user_profiles")
            .select(_PROFILE_COLUMNS)
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not profile.data:
            return None
        settings = (
            self.client.table("user_settings")
            .select(_SETTINGS_COLUMNS)
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        settings_row = settings.data[0] if settings.data else {}
        return _build_user(profile.data[0], settings_row)

    def count_users(self) -> int:
        """Return the number of user profiles."""
        response = (
            self.client.table("user_profiles")
            .select("user_id", count="exact", head=True)
            .execute()
        )
        return response.count or 0

    def count_food_entries(self) -> int:
        """Return the number of food entries."""
        response = (
            self.client.table("food_entries")
            .select("id", count="exact", head=True)
            .execute()
        )
        return response.count or 0

    def list_entry_activity(self, start: date, end: date) -> list[tuple[date, UUID]]:
        """Return entry dates and owners for entries in [start, end]."""
        response = (
            self.client.table("food_entries")
            .select("entry_date, user_id")
            .gte("entry_date", start.isoformat())
            .lte("entry_date", end.isoformat())
            .execute()
        )
        return [
            (date.fromisoformat(str(row["entry_date"])), UUID(str(row["user_id"])))
            for row in response.data or []
        ]


def _build_user(profile: dict[str, object], settings: dict[str, object]) -> AdminUser:
    last_active = profile.get("last_active_at")
    last_active_at = (
        datetime.fromisoformat(last_active)
        if isinstance(last_active, str) and last_active
        else None
    )
    return AdminUser(
        id=UUID(str(profile["user_id"])),
        email=profile.get("email"),
        last_active_at=last_active_at,
        goals=parse_goals(settings),
    )
