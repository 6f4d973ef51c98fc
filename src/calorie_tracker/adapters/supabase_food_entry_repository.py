"""Supabase repository for food log entries."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from calorie_tracker.domain.entries import FoodLogEntry
from calorie_tracker.services.food_log import FoodEntryRepository

_COLUMNS = "id, user_id, entry_date, created_at, name, description, calories, protein"


@dataclass
class SupabaseFoodEntryRepository(FoodEntryRepository):
    """Supabase implementation for the food_entries table."""

    client: Client

    def list_entries(self, user_id: UUID, start: date, end: date) -> list[FoodLogEntry]:
        """Return entries with entry_date in [start, end], oldest first."""
        response = (
            self.client.table("food_entries")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("entry_date", start.isoformat())
            .lte("entry_date", end.isoformat())
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def get_entry(self, user_id: UUID, entry_id: UUID) -> FoodLogEntry | None:
        """Return an entry owned by the user."""
        response = (
            self.client.table("food_entries")
            .select(_COLUMNS)
            .eq("id", str(entry_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def create_entry(  # noqa: PLR0913
        self,
        user_id: UUID,
        entry_date: date,
        name: str,
        description: str | None,
        calories: float,
        protein: float,
    ) -> FoodLogEntry:
        """Insert an entry row and return it."""
        response = (
            self.client.table("food_entries")
            .insert(
                {
                    "user_id": str(user_id),
                    "entry_date": entry_date.isoformat(),
                    "name": name,
                    "description": description,
                    "calories": calories,
                    "protein": protein,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food entry")
        return _parse_row(response.data[0])

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete an entry owned by the user."""
        self.client.table("food_entries").delete().eq("id", str(entry_id)).eq(
            "user_id", str(user_id)
        ).execute()


def _parse_row(row: dict[str, object]) -> FoodLogEntry:
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else datetime.now(tz=UTC)
    )
    return FoodLogEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        entry_date=date.fromisoformat(str(row["entry_date"])),
        created_at=created_at,
        name=str(row.get("name") or ""),
        description=row.get("description"),
        calories=_optional_float(row.get("calories")),
        protein=_optional_float(row.get("protein")),
    )


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    return float(value)
