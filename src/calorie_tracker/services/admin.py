"""Admin analytics service."""

import logging
from collections import Counter, defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID

from calorie_tracker.domain.admin import AdminUser
from calorie_tracker.domain.entries import DayAggregate, WeeklyStats
from calorie_tracker.domain.goals import DEFAULT_TIMEZONE, UserGoalSettings
from calorie_tracker.services.adherence import (
    classify_calories,
    classify_protein,
    energy_balance,
)
from calorie_tracker.services.aggregation import round_protein
from calorie_tracker.services.calendar import (
    current_app_day,
    format_date,
    week_range_label,
    week_start,
)
from calorie_tracker.services.food_log import FoodEntryRepository
from calorie_tracker.services.stats import compute_weekly_stats, repository_fetch_range
from calorie_tracker.services.user_settings import UserSettingsService

_logger = logging.getLogger(__name__)


class AdminRepository(Protocol):
    """Persistence interface for admin data."""

    def list_users(self) -> list[AdminUser]:
        """Return all users with their goals."""

    def get_user(self, user_id: UUID) -> AdminUser | None:
        """Return one user with their goals."""

    def count_users(self) -> int:
        """Return the number of user profiles."""

    def count_food_entries(self) -> int:
        """Return the number of food log entries across all users."""

    def list_entry_activity(self, start: date, end: date) -> list[tuple[date, UUID]]:
        """Return ``(entry_date, user_id)`` for every entry dated in [start, end]."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class AdminService:
    """Service for the coach analytics dashboard."""

    admin_repository: AdminRepository
    entry_repository: FoodEntryRepository
    settings_service: UserSettingsService
    clock: Callable[[], datetime] = field(default=_utc_now)

    def list_users(self, start: date | None = None) -> list[dict[str, object]]:
        """Return every user with their weekly averages and energy balance."""
        rows = []
        for user in self.admin_repository.list_users():
            today, resolved_start, stats = self._weekly_stats(user, start)
            rows.append(
                {
                    "id": str(user.id),
                    "email": user.email,
                    "last_active_at": user.last_active_at.isoformat()
                    if user.last_active_at
                    else None,
                    "week_start": format_date(resolved_start),
                    "today": format_date(today),
                    **_serialize_goals(user.goals),
                    **_serialize_summary(stats, user.goals),
                }
            )
        _logger.info("Admin weekly overview built: users=%s", len(rows))
        return rows

    def user_week(
        self, user_id: UUID, start: date | None = None
    ) -> dict[str, object] | None:
        """Return the per-day adherence grid for one user."""
        user = self.admin_repository.get_user(user_id)
        if user is None:
            return None
        today, resolved_start, stats = self._weekly_stats(user, start)
        return {
            "user_id": str(user.id),
            "week_start": format_date(resolved_start),
            "week_label": week_range_label(resolved_start),
            "today": format_date(today),
            **_serialize_goals(user.goals),
            **_serialize_summary(stats, user.goals),
            "days": [_serialize_day(day, user.goals) for day in stats.daily_data],
        }

    def update_user_macros(
        self,
        user_id: UUID,
        *,
        maintenance_calories: int,
        target_calories: int,
        target_protein: int,
    ) -> UserGoalSettings:
        """Overwrite a user's calorie and protein goals."""
        _logger.info("Admin macro update: user_id=%s", user_id)
        return self.settings_service.update_goals(
            user_id,
            maintenance_calories=maintenance_calories,
            target_calories=target_calories,
            target_protein=target_protein,
        )

    def summary(self) -> dict[str, int]:
        """Return platform totals for the analytics header."""
        return {
            "total_users": self.admin_repository.count_users(),
            "total_food_logs": self.admin_repository.count_food_entries(),
        }

    def daily_metrics(self, days_back: int = 30) -> dict[str, list[dict[str, object]]]:
        """Return daily active users and food log counts for the last days.

        The window ends on today's app day in UTC and every day in it is
        present, with zero counts where nothing was logged.
        """
        if days_back < 1:
            raise ValueError("days_back must be at least 1")
        today = current_app_day(DEFAULT_TIMEZONE, self.clock())
        start = today - timedelta(days=days_back - 1)
        users_by_day: dict[date, set[UUID]] = defaultdict(set)
        logs_by_day: Counter[date] = Counter()
        for entry_date, user_id in self.admin_repository.list_entry_activity(
            start, today
        ):
            users_by_day[entry_date].add(user_id)
            logs_by_day[entry_date] += 1

        days = [start + timedelta(days=offset) for offset in range(days_back)]
        return {
            "daily_active_users": [
                {"date": format_date(day), "count": len(users_by_day.get(day, ()))}
                for day in days
            ],
            "daily_food_logs": [
                {"date": format_date(day), "count": logs_by_day[day]} for day in days
            ],
        }

    def _weekly_stats(
        self, user: AdminUser, start: date | None
    ) -> tuple[date, date, WeeklyStats]:
        today = current_app_day(user.goals.timezone, self.clock())
        resolved_start = week_start(start or today)
        stats = compute_weekly_stats(
            resolved_start,
            user.goals.target_calories,
            user.goals.maintenance_calories,
            repository_fetch_range(self.entry_repository, user.id),
            today=today,
        )
        return today, resolved_start, stats


def _serialize_goals(goals: UserGoalSettings) -> dict[str, object]:
    return {
        "target_calories": goals.target_calories,
        "maintenance_calories": goals.maintenance_calories,
        "target_protein": goals.target_protein,
        "timezone": goals.timezone,
    }


def _serialize_summary(
    stats: WeeklyStats, goals: UserGoalSettings
) -> dict[str, object]:
    balance = energy_balance(
        stats.deficit.daily, goals.target_calories, goals.maintenance_calories
    )
    return {
        "avg_calories": stats.averages.calories,
        "avg_protein": stats.averages.protein,
        "avg_calories_tier": classify_calories(
            stats.averages.calories, goals.target_calories, goals.maintenance_calories
        ).value,
        "avg_protein_tier": classify_protein(
            stats.averages.protein, goals.target_protein
        ).value,
        "daily_deficit": stats.deficit.daily,
        "weekly_deficit": stats.deficit.weekly,
        "days_logged": stats.days_logged,
        "energy_balance": {
            "kind": balance.kind,
            "amount": balance.amount,
            "aligned": balance.aligned,
        },
    }


def _serialize_day(day: DayAggregate, goals: UserGoalSettings) -> dict[str, object]:
    return {
        "date": format_date(day.day),
        "calories": day.calories,
        "protein": round_protein(day.protein),
        "entries": len(day.entries),
        "calories_tier": classify_calories(
            day.calories, goals.target_calories, goals.maintenance_calories
        ).value,
        "protein_tier": classify_protein(day.protein, goals.target_protein).value,
    }
