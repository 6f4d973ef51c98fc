"""Admin domain models."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from calorie_tracker.domain.goals import UserGoalSettings


@dataclass(frozen=True)
class AdminUser:
    """Admin view of a user and their goals."""

    id: UUID
    email: str | None
    last_active_at: datetime | None
    goals: UserGoalSettings
