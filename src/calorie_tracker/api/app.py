"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID

from fastapi import FastAPI, HTTPException, Request, status

from calorie_tracker.api.admin import router as admin_router
from calorie_tracker.api.models import (
    AveragesPayload,
    DayTotalsPayload,
    DaySummary,
    DeficitPayload,
    EnergyBalancePayload,
    EntryCreate,
    EntryPayload,
    GoalSettingsPayload,
    GoalSettingsUpdate,
    WeeklyStatsPayload,
)
from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.entries import DayAggregate, FoodLogEntry
from calorie_tracker.domain.goals import UserGoalSettings
from calorie_tracker.services.adherence import (
    classify_calories,
    classify_protein,
    energy_balance,
    goal_mode,
)
from calorie_tracker.services.aggregation import round_protein
from calorie_tracker.services.cache import invalidate_user_goals, weekly_stats_key
from calorie_tracker.services.calendar import (
    is_current_week,
    step_week,
    week_end,
    week_range_label,
)
from calorie_tracker.services.calendar import week_start as monday_of
from calorie_tracker.services.food_log import EntryNotFoundError
from calorie_tracker.services.stats import WeeklyReport


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/users/{user_id}/settings")
    async def get_settings(user_id: UUID, request: Request) -> GoalSettingsPayload:
        """Return the user's goals, defaults included."""
        state_container: AppContainer = request.app.state.container
        goals = state_container.user_settings_service.get_goals(user_id)
        return _goals_payload(goals)

    @app.put("/users/{user_id}/settings")
    async def update_settings(
        user_id: UUID, update: GoalSettingsUpdate, request: Request
    ) -> GoalSettingsPayload:
        """Update some or all of the user's goals."""
        state_container: AppContainer = request.app.state.container
        try:
            goals = state_container.user_settings_service.update_goals(
                user_id, **update.model_dump(exclude_none=True)
            )
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        invalidate_user_goals(state_container.cache, user_id)
        return _goals_payload(goals)

    @app.get("/users/{user_id}/entries")
    async def list_entries(
        user_id: UUID, request: Request, day: date | None = None
    ) -> dict[str, list[EntryPayload]]:
        """Return the entries logged on a day, today by default."""
        state_container: AppContainer = request.app.state.container
        entries = state_container.food_log_service.list_day(user_id, day)
        return {"entries": [_entry_payload(entry) for entry in entries]}

    @app.post("/users/{user_id}/entries", status_code=status.HTTP_201_CREATED)
    async def create_entry(
        user_id: UUID, payload: EntryCreate, request: Request
    ) -> EntryPayload:
        """Log a meal, estimating it from the description when needed."""
        state_container: AppContainer = request.app.state.container
        service = state_container.food_log_service
        if (payload.calories is None) != (payload.protein is None):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="calories and protein must be given together",
            )
        try:
            if payload.calories is not None and payload.protein is not None:
                entry = service.add_entry(
                    user_id,
                    name=payload.name or payload.description or "Food",
                    calories=payload.calories,
                    protein=payload.protein,
                    description=payload.description,
                    entry_date=payload.entry_date,
                )
            else:
                entry = await service.log_meal(
                    user_id, description=payload.description
                )
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        return _entry_payload(entry)

    @app.post(
        "/users/{user_id}/entries/{entry_id}/duplicate",
        status_code=status.HTTP_201_CREATED,
    )
    async def duplicate_entry(
        user_id: UUID, entry_id: UUID, request: Request
    ) -> EntryPayload:
        """Log a copy of an entry for today."""
        state_container: AppContainer = request.app.state.container
        try:
            entry = state_container.food_log_service.duplicate_entry(user_id, entry_id)
        except EntryNotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc
        return _entry_payload(entry)

    @app.delete(
        "/users/{user_id}/entries/{entry_id}",
        status_code=status.HTTP_204_NO_CONTENT,
    )
    async def delete_entry(user_id: UUID, entry_id: UUID, request: Request) -> None:
        """Delete an entry."""
        state_container: AppContainer = request.app.state.container
        try:
            state_container.food_log_service.delete_entry(user_id, entry_id)
        except EntryNotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc

    @app.get("/users/{user_id}/stats/today")
    async def today_stats(
        user_id: UUID, request: Request, day: date | None = None
    ) -> DayTotalsPayload:
        """Return the totals widget data for one day."""
        state_container: AppContainer = request.app.state.container
        report = state_container.stats_service.get_day(user_id, day)
        return DayTotalsPayload(
            today=report.today,
            goals=_goals_payload(report.goals),
            day=_day_summary(report.totals, report.goals),
        )

    @app.get("/users/{user_id}/stats/week")
    async def weekly_stats(
        user_id: UUID, request: Request, week_start: date | None = None
    ) -> WeeklyStatsPayload:
        """Return the weekly dashboard, falling back to the last good result."""
        state_container: AppContainer = request.app.state.container
        cache_key = weekly_stats_key(
            user_id, monday_of(week_start) if week_start else "current"
        )
        try:
            report = state_container.stats_service.get_week(user_id, week_start)
        except Exception as exc:
            logger.exception(
                "Weekly stats failed, trying cached copy",
                extra={"user_id": str(user_id)},
            )
            cached = state_container.cache.get_stale(cache_key)
            if not isinstance(cached, WeeklyReport):
                raise HTTPException(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    detail="Weekly stats are unavailable",
                ) from exc
            return _weekly_payload(cached, stale=True)
        ttl_seconds = state_container.settings.stats_cache_ttl_seconds
        resolved_key = weekly_stats_key(user_id, report.week_start)
        for key in {cache_key, resolved_key}:
            state_container.cache.set(key, report, ttl_seconds=ttl_seconds)
        return _weekly_payload(report, stale=False)

    return app


def _goals_payload(goals: UserGoalSettings) -> GoalSettingsPayload:
    return GoalSettingsPayload(
        target_calories=goals.target_calories,
        maintenance_calories=goals.maintenance_calories,
        target_protein=goals.target_protein,
        timezone=goals.timezone,
    )


def _entry_payload(entry: FoodLogEntry) -> EntryPayload:
    return EntryPayload(
        id=entry.id,
        entry_date=entry.entry_date,
        created_at=entry.created_at,
        name=entry.name,
        description=entry.description,
        calories=entry.calories or 0,
        protein=entry.protein or 0,
    )


def _day_summary(day: DayAggregate, goals: UserGoalSettings) -> DaySummary:
    return DaySummary(
        day=day.day,
        calories=day.calories,
        protein=round_protein(day.protein),
        calories_tier=classify_calories(
            day.calories, goals.target_calories, goals.maintenance_calories
        ).value,
        protein_tier=classify_protein(day.protein, goals.target_protein).value,
        entries=[_entry_payload(entry) for entry in day.entries],
    )


def _weekly_payload(report: WeeklyReport, *, stale: bool) -> WeeklyStatsPayload:
    goals = report.goals
    stats = report.stats
    balance = energy_balance(
        stats.deficit.daily, goals.target_calories, goals.maintenance_calories
    )
    return WeeklyStatsPayload(
        week_start=report.week_start,
        week_end=week_end(report.week_start),
        week_label=week_range_label(report.week_start),
        today=report.today,
        is_current_week=is_current_week(report.week_start, report.today),
        previous_week=step_week(report.week_start, -1, report.today),
        next_week=step_week(report.week_start, 1, report.today),
        goal_mode=goal_mode(goals.target_calories, goals.maintenance_calories).value,
        days=[_day_summary(day, goals) for day in stats.daily_data],
        averages=AveragesPayload(
            calories=stats.averages.calories,
            protein=stats.averages.protein,
            calories_tier=classify_calories(
                stats.averages.calories,
                goals.target_calories,
                goals.maintenance_calories,
            ).value,
            protein_tier=classify_protein(
                stats.averages.protein, goals.target_protein
            ).value,
        ),
        deficit=DeficitPayload(daily=stats.deficit.daily, weekly=stats.deficit.weekly),
        energy_balance=EnergyBalancePayload(
            kind=balance.kind, amount=balance.amount, aligned=balance.aligned
        ),
        days_logged=stats.days_logged,
        stale=stale,
    )
