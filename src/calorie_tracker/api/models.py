"""Pydantic request and response models for the HTTP API."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field


class GoalSettingsPayload(BaseModel):
    """User goals as returned by the API."""

    target_calories: int
    maintenance_calories: int
    target_protein: int
    timezone: str


class GoalSettingsUpdate(BaseModel):
    """Partial goal update; omitted fields keep their value."""

    target_calories: int | None = Field(default=None, ge=0)
    maintenance_calories: int | None = Field(default=None, ge=0)
    target_protein: int | None = Field(default=None, ge=0)
    timezone: str | None = None


class MacroUpdate(BaseModel):
    """Admin overwrite of a user's calorie and protein goals."""

    maintenance_calories: int = Field(ge=0)
    target_calories: int = Field(ge=0)
    target_protein: int = Field(ge=0)


class EntryCreate(BaseModel):
    """New food log entry.

    With calories and protein the entry is stored as given; otherwise the
    description is sent to the food analysis model.
    """

    name: str | None = None
    description: str | None = None
    calories: float | None = Field(default=None, ge=0)
    protein: float | None = Field(default=None, ge=0)
    entry_date: date | None = None


class EntryPayload(BaseModel):
    """Food log entry as returned by the API."""

    id: UUID
    entry_date: date
    created_at: datetime
    name: str
    description: str | None = None
    calories: float
    protein: float


class DaySummary(BaseModel):
    """One day's totals with adherence tiers."""

    day: date
    calories: float
    protein: float
    calories_tier: str
    protein_tier: str
    entries: list[EntryPayload]


class AveragesPayload(BaseModel):
    """Trailing averages over completed days."""

    calories: int
    protein: int
    calories_tier: str
    protein_tier: str


class DeficitPayload(BaseModel):
    """Energy balance relative to maintenance."""

    daily: float
    weekly: float


class EnergyBalancePayload(BaseModel):
    """Deficit or surplus read-out."""

    kind: str
    amount: int
    aligned: bool


class WeeklyStatsPayload(BaseModel):
    """Weekly dashboard data."""

    week_start: date
    week_end: date
    week_label: str
    today: date
    is_current_week: bool
    previous_week: date
    next_week: date | None
    goal_mode: str
    days: list[DaySummary]
    averages: AveragesPayload
    deficit: DeficitPayload
    energy_balance: EnergyBalancePayload
    days_logged: int
    stale: bool = False


class DayTotalsPayload(BaseModel):
    """Single-day totals widget data."""

    today: date
    goals: GoalSettingsPayload
    day: DaySummary
