"""Daily aggregation of food log entries."""

from collections.abc import Iterable, Mapping
from datetime import date

from calorie_tracker.domain.entries import DayAggregate, FoodLogEntry
from calorie_tracker.services.calendar import format_date


def aggregate_day(day: date, entries: Iterable[FoodLogEntry]) -> DayAggregate:
    """Sum calories and protein of entries logged on one app day.

    Missing values count as zero. Totals keep full precision.
    """
    collected = list(entries)
    calories = 0.0
    protein = 0.0
    for entry in collected:
        calories += entry.calories or 0
        protein += entry.protein or 0
    return DayAggregate(day=day, calories=calories, protein=protein, entries=collected)


def group_by_date(entries: Iterable[FoodLogEntry]) -> dict[str, list[FoodLogEntry]]:
    """Group entries by their entry date string, preserving order."""
    grouped: dict[str, list[FoodLogEntry]] = {}
    for entry in entries:
        grouped.setdefault(format_date(entry.entry_date), []).append(entry)
    return grouped


def entries_for(
    grouped: Mapping[str, list[FoodLogEntry]], day: date
) -> list[FoodLogEntry]:
    """Return the entries for a day, or an empty list when none were logged."""
    return list(grouped.get(format_date(day)) or [])


def round_protein(value: float) -> float:
    """Round protein grams to one decimal for display."""
    return round(value, 1)
