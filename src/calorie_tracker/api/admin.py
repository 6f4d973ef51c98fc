"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

from calorie_tracker.api.models import GoalSettingsPayload, MacroUpdate
from calorie_tracker.services.cache import admin_users_key, invalidate_user_goals
from calorie_tracker.services.calendar import week_start as monday_of

if TYPE_CHECKING:
    from calorie_tracker.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/users", dependencies=[Depends(require_admin)])
async def list_users(
    request: Request, week_start: date | None = None, refresh: bool = False
) -> dict[str, object]:
    """Return every user with weekly averages, cached briefly."""
    container: AppContainer = request.app.state.container
    cache_key = admin_users_key(monday_of(week_start) if week_start else "current")
    cached = None if refresh else container.cache.get(cache_key)
    if isinstance(cached, list):
        return {"users": cached}
    users = container.admin_service.list_users(week_start)
    container.cache.set(
        cache_key, users, ttl_seconds=container.settings.stats_cache_ttl_seconds
    )
    return {"users": users}


@router.get("/users/{user_id}/week", dependencies=[Depends(require_admin)])
async def user_week(
    user_id: UUID, request: Request, week_start: date | None = None
) -> dict[str, object]:
    """Return a user's per-day adherence grid."""
    container: AppContainer = request.app.state.container
    detail = container.admin_service.user_week(user_id, week_start)
    if detail is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return detail


@router.put("/users/{user_id}/macros", dependencies=[Depends(require_admin)])
async def update_macros(
    user_id: UUID, update: MacroUpdate, request: Request
) -> GoalSettingsPayload:
    """Overwrite a user's calorie and protein goals."""
    container: AppContainer = request.app.state.container
    goals = container.admin_service.update_user_macros(
        user_id,
        maintenance_calories=update.maintenance_calories,
        target_calories=update.target_calories,
        target_protein=update.target_protein,
    )
    invalidate_user_goals(container.cache, user_id)
    return GoalSettingsPayload(
        target_calories=goals.target_calories,
        maintenance_calories=goals.maintenance_calories,
        target_protein=goals.target_protein,
        timezone=goals.timezone,
    )


@router.get("/summary", dependencies=[Depends(require_admin)])
async def summary(request: Request) -> dict[str, int]:
    """Return total users and total food logs."""
    container: AppContainer = request.app.state.container
    return container.admin_service.summary()


@router.get("/metrics", dependencies=[Depends(require_admin)])
async def metrics(
    request: Request, days_back: int = Query(default=30, ge=1, le=365)
) -> dict[str, list[dict[str, object]]]:
    """Return daily active users and daily food log counts."""
    container: AppContainer = request.app.state.container
    return container.admin_service.daily_metrics(days_back)
