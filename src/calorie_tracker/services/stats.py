"""Weekly statistics engine and the service that feeds it from storage."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import UUID

from calorie_tracker.domain.entries import (
    Averages,
    DayAggregate,
    Deficit,
    FoodLogEntry,
    WeeklyStats,
)
from calorie_tracker.domain.goals import Tier, UserGoalSettings
from calorie_tracker.services.adherence import (
    classify_calories,
    classify_protein,
    round_half_up,
)
from calorie_tracker.services.aggregation import (
    aggregate_day,
    entries_for,
    group_by_date,
)
from calorie_tracker.services.calendar import (
    app_day,
    current_app_day,
    format_date,
    parse_date,
    week_days,
    week_end,
    week_start,
)
from calorie_tracker.services.food_log import FoodEntryRepository
from calorie_tracker.services.user_settings import UserSettingsService

_logger = logging.getLogger(__name__)

FetchRange = Callable[[str, str], Mapping[str, list[FoodLogEntry]]]


def compute_weekly_stats(
    start: date,
    target_calories: float,
    maintenance_calories: float,
    fetch_range: FetchRange,
    *,
    today: date | None = None,
) -> WeeklyStats:
    """Build the Monday to Sunday summary for the week opening on ``start``.

    ``fetch_range`` is called exactly once with the first and last date of the
    week and may omit dates without entries. Its errors propagate unchanged.

    Averages only cover days before ``today`` that have calories logged, so the
    day in progress never drags them down. The deficit is measured against
    maintenance, and its weekly figure multiplies by the number of counted
    days rather than by seven. Without ``today`` the app day of the local
    system clock is used. ``target_calories`` plays no part in the
    arithmetic; callers use it for adherence tiers.
    """
    grouped = fetch_range(format_date(start), format_date(week_end(start)))
    resolved_today = today or app_day()

    daily_data: list[DayAggregate] = []
    days_logged = 0
    for day in week_days(start):
        entries = entries_for(grouped, day)
        if entries:
            days_logged += 1
        daily_data.append(aggregate_day(day, entries))

    completed = [
        day for day in daily_data if day.day < resolved_today and day.calories > 0
    ]
    counted = len(completed)
    if counted:
        avg_calories = round_half_up(sum(day.calories for day in completed) / counted)
        avg_protein = round_half_up(sum(day.protein for day in completed) / counted)
    else:
        avg_calories = 0
        avg_protein = 0

    if counted:
        daily_deficit = avg_calories - maintenance_calories
        weekly_deficit = daily_deficit * counted
    else:
        daily_deficit = 0
        weekly_deficit = 0

    return WeeklyStats(
        daily_data=daily_data,
        averages=Averages(calories=avg_calories, protein=avg_protein),
        deficit=Deficit(daily=daily_deficit, weekly=weekly_deficit),
        days_logged=days_logged,
    )


def repository_fetch_range(
    repository: FoodEntryRepository, user_id: UUID
) -> FetchRange:
    """Adapt a repository range query to the engine's fetch contract."""

    def fetch_range(start: str, end: str) -> dict[str, list[FoodLogEntry]]:
        entries = repository.list_entries(user_id, parse_date(start), parse_date(end))
        return group_by_date(entries)

    return fetch_range


@dataclass(frozen=True)
class WeeklyReport:
    """Weekly stats together with the goals and day they were computed for."""

    week_start: date
    today: date
    goals: UserGoalSettings
    stats: WeeklyStats


@dataclass(frozen=True)
class DayReport:
    """One day's totals with their adherence tiers."""

    today: date
    goals: UserGoalSettings
    totals: DayAggregate
    calorie_tier: Tier
    protein_tier: Tier


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class StatsService:
    """Service computing a user's daily and weekly progress."""

    repository: FoodEntryRepository
    settings_service: UserSettingsService
    clock: Callable[[], datetime] = field(default=_utc_now)

    def get_week(self, user_id: UUID, start: date | None = None) -> WeeklyReport:
        """Return weekly stats for the week containing ``start``.

        Defaults to the week of the user's current app day.
        """
        goals = self.settings_service.get_goals(user_id)
        today = current_app_day(goals.timezone, self.clock())
        resolved_start = week_start(start or today)
        stats = compute_weekly_stats(
            resolved_start,
            goals.target_calories,
            goals.maintenance_calories,
            repository_fetch_range(self.repository, user_id),
            today=today,
        )
        _logger.info(
            "Weekly stats computed: user_id=%s week_start=%s days_logged=%s",
            user_id,
            resolved_start,
            stats.days_logged,
        )
        return WeeklyReport(
            week_start=resolved_start, today=today, goals=goals, stats=stats
        )

    def get_day(self, user_id: UUID, day: date | None = None) -> DayReport:
        """Return one day's totals, today by default."""
        goals = self.settings_service.get_goals(user_id)
        today = current_app_day(goals.timezone, self.clock())
        resolved = day or today
        entries = self.repository.list_entries(user_id, resolved, resolved)
        totals = aggregate_day(resolved, entries)
        return DayReport(
            today=today,
            goals=goals,
            totals=totals,
            calorie_tier=classify_calories(
                totals.calories, goals.target_calories, goals.maintenance_calories
            ),
            protein_tier=classify_protein(totals.protein, goals.target_protein),
        )
