"""Domain models for food log entries and derived aggregates."""

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID


@dataclass(frozen=True)
class FoodLogEntry:
    """A single logged meal attributed to an app date."""

    id: UUID
    user_id: UUID
    entry_date: date
    created_at: datetime
    name: str
    description: str | None
    calories: float | None
    protein: float | None


@dataclass(frozen=True)
class DayAggregate:
    """Summed calories and protein for one app date."""

    day: date
    calories: float
    protein: float
    entries: list[FoodLogEntry] = field(default_factory=list)


@dataclass(frozen=True)
class Averages:
    """Trailing averages over completed days with food."""

    calories: int
    protein: int


@dataclass(frozen=True)
class Deficit:
    """Energy balance against maintenance, negative for a deficit."""

    daily: float
    weekly: float


@dataclass(frozen=True)
class WeeklyStats:
    """Monday to Sunday summary of a user's logging."""

    daily_data: list[DayAggregate]
    averages: Averages
    deficit: Deficit
    days_logged: int
