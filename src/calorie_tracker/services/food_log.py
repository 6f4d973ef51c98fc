"""Food logging service."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID

from calorie_tracker.domain.entries import FoodLogEntry
from calorie_tracker.services.analysis import FoodAnalysisService
from calorie_tracker.services.calendar import current_app_day
from calorie_tracker.services.user_settings import UserSettingsService

_logger = logging.getLogger(__name__)


class EntryNotFoundError(LookupError):
    """Raised when a food log entry does not exist for the user."""


class FoodEntryRepository(Protocol):
    """Persistence interface for food log entries."""

    def list_entries(self, user_id: UUID, start: date, end: date) -> list[FoodLogEntry]:
        """Return entries whose entry date falls within [start, end]."""

    def get_entry(self, user_id: UUID, entry_id: UUID) -> FoodLogEntry | None:
        """Return one entry owned by the user."""

    def create_entry(  # noqa: PLR0913
        self,
        user_id: UUID,
        entry_date: date,
        name: str,
        description: str | None,
        calories: float,
        protein: float,
    ) -> FoodLogEntry:
        """Insert an entry and return it."""

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete an entry owned by the user."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class FoodLogService:
    """Creates, duplicates and deletes food log entries."""

    repository: FoodEntryRepository
    settings_service: UserSettingsService
    analysis_service: FoodAnalysisService
    clock: Callable[[], datetime] = field(default=_utc_now)

    def today(self, user_id: UUID) -> date:
        """Return the user's current app day."""
        timezone_name = self.settings_service.get_timezone(user_id)
        return current_app_day(timezone_name, self.clock())

    def list_day(self, user_id: UUID, day: date | None = None) -> list[FoodLogEntry]:
        """Return entries logged on a day, today by default."""
        resolved = day or self.today(user_id)
        return self.repository.list_entries(user_id, resolved, resolved)

    def add_entry(  # noqa: PLR0913
        self,
        user_id: UUID,
        *,
        name: str,
        calories: float,
        protein: float,
        description: str | None = None,
        entry_date: date | None = None,
    ) -> FoodLogEntry:
        """Store a manually entered meal."""
        if calories < 0 or protein < 0:
            raise ValueError("calories and protein must be non-negative")
        resolved = entry_date or self.today(user_id)
        entry = self.repository.create_entry(
            user_id=user_id,
            entry_date=resolved,
            name=name,
            description=description,
            calories=calories,
            protein=protein,
        )
        _logger.info(
            "Food entry logged: user_id=%s entry_date=%s calories=%s",
            user_id,
            resolved,
            calories,
        )
        return entry

    async def log_meal(
        self,
        user_id: UUID,
        *,
        description: str | None = None,
        image_bytes: bytes | None = None,
    ) -> FoodLogEntry:
        """Estimate a meal with the analysis service and store it for today."""
        estimate = await self.analysis_service.analyze(
            description=description, image_bytes=image_bytes
        )
        return self.add_entry(
            user_id,
            name=estimate.name,
            calories=estimate.calories,
            protein=estimate.protein,
            description=description,
        )

    def duplicate_entry(self, user_id: UUID, entry_id: UUID) -> FoodLogEntry:
        """Log a copy of an existing entry on today's app day."""
        original = self.repository.get_entry(user_id, entry_id)
        if original is None:
            raise EntryNotFoundError(str(entry_id))
        return self.add_entry(
            user_id,
            name=original.name,
            calories=original.calories or 0,
            protein=original.protein or 0,
            description=original.description,
        )

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> None:
        """Remove an entry owned by the user."""
        if self.repository.get_entry(user_id, entry_id) is None:
            raise EntryNotFoundError(str(entry_id))
        self.repository.delete_entry(user_id, entry_id)
