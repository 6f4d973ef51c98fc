"""User goal settings service."""

from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from calorie_tracker.domain.goals import UserGoalSettings


class UserSettingsRepository(Protocol):
    """Persistence interface for user goal settings."""

    def get_goals(self, user_id: UUID) -> UserGoalSettings | None:
        """Return the stored goals for a user, if any."""

    def upsert_goals(self, user_id: UUID, goals: UserGoalSettings) -> None:
        """Create or replace the goals for a user."""


@dataclass
class UserSettingsService:
    """Service for reading and updating user goals."""

    repository: UserSettingsRepository

    def get_goals(self, user_id: UUID) -> UserGoalSettings:
        """Return the user's goals or the defaults when none are stored."""
        return self.repository.get_goals(user_id) or UserGoalSettings()

    def get_timezone(self, user_id: UUID) -> str:
        """Return the user's timezone."""
        return self.get_goals(user_id).timezone

    def update_goals(
        self,
        user_id: UUID,
        *,
        target_calories: int | None = None,
        maintenance_calories: int | None = None,
        target_protein: int | None = None,
        timezone: str | None = None,
    ) -> UserGoalSettings:
        """Persist the supplied fields and return the merged goals."""
        changes: dict[str, object] = {}
        for name, value in (
            ("target_calories", target_calories),
            ("maintenance_calories", maintenance_calories),
            ("target_protein", target_protein),
        ):
            if value is None:
                continue
            if value < 0:
                raise ValueError(f"{name} must be non-negative")
            changes[name] = value
        if timezone is not None:
            _validate_timezone(timezone)
            changes["timezone"] = timezone

        goals = replace(self.get_goals(user_id), **changes)
        self.repository.upsert_goals(user_id, goals)
        return goals


def _validate_timezone(timezone_name: str) -> None:
    try:
        ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone: {timezone_name}") from exc
