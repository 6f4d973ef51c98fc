"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import date
from uuid import uuid4

import pytest

from calorie_tracker.adapters.supabase_admin_repository import SupabaseAdminRepository
from calorie_tracker.adapters.supabase_food_entry_repository import (
    SupabaseFoodEntryRepository,
)
from calorie_tracker.adapters.supabase_user_settings_repository import (
    SupabaseUserSettingsRepository,
    parse_goals,
)
from calorie_tracker.domain.goals import UserGoalSettings


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None
    count: int | None = None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "upsert": [], "delete": []}
    )
    last_payload: object | None = None
    last_on_conflict: str | None = None
    row_count: int = 0
    last_filters: list[tuple[str, str, object]] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(  # type: ignore[no-untyped-def]
        self, *_args, count: str | None = None, head: bool = False
    ) -> "FakeTable":
        self._action = "select"
        self._count = count
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def upsert(  # type: ignore[no-untyped-def]
        self, payload, on_conflict: str = ""
    ) -> "FakeTable":
        self._action = "upsert"
        self.last_payload = payload
        self.last_on_conflict = on_conflict
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("eq", column, value))
        return self

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("gte", column, value))
        return self

    def lte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("lte", column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        if action == "select" and getattr(self, "_count", None) == "exact":
            return FakeResponse(data=[], count=self.row_count)
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _entry_row(user_id: str, **overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": str(uuid4()),
        "user_id": user_id,
        "entry_date": "2024-01-16",
        "created_at": "2024-01-16T12:30:00+00:00",
        "name": "Dal rice",
        "description": "1 bowl dal, 1 cup rice",
        "calories": 520,
        "protein": "18.5",
    }
    row.update(overrides)
    return row


def test_food_entry_repository_lists_week_range() -> None:
    client = FakeSupabaseClient()
    table = client.table("food_entries")
    user_id = uuid4()
    table.queue(
        "select",
        [
            _entry_row(str(user_id)),
            _entry_row(str(user_id), calories=None, protein=None),
        ],
    )

    repository = SupabaseFoodEntryRepository(client)
    entries = repository.list_entries(user_id, date(2024, 1, 15), date(2024, 1, 21))

    assert table.last_filters == [
        ("eq", "user_id", str(user_id)),
        ("gte", "entry_date", "2024-01-15"),
        ("lte", "entry_date", "2024-01-21"),
    ]
    assert entries[0].entry_date == date(2024, 1, 16)
    assert entries[0].protein == 18.5
    assert entries[1].calories is None


def test_food_entry_repository_create_get_delete() -> None:
    client = FakeSupabaseClient()
    table = client.table("food_entries")
    user_id = uuid4()
    row = _entry_row(str(user_id))
    table.queue("insert", [row])
    table.queue("select", [row])

    repository = SupabaseFoodEntryRepository(client)
    created = repository.create_entry(
        user_id=user_id,
        entry_date=date(2024, 1, 16),
        name="Dal rice",
        description="1 bowl dal, 1 cup rice",
        calories=520,
        protein=18.5,
    )
    assert isinstance(table.last_payload, dict)
    assert table.last_payload["entry_date"] == "2024-01-16"

    fetched = repository.get_entry(user_id, created.id)
    repository.delete_entry(user_id, created.id)

    assert fetched is not None
    assert fetched.id == created.id
    assert table.last_filters[-2:] == [
        ("eq", "id", str(created.id)),
        ("eq", "user_id", str(user_id)),
    ]


def test_food_entry_repository_missing_entry() -> None:
    repository = SupabaseFoodEntryRepository(FakeSupabaseClient())

    assert repository.get_entry(uuid4(), uuid4()) is None


def test_food_entry_repository_create_failure() -> None:
    repository = SupabaseFoodEntryRepository(FakeSupabaseClient())

    with pytest.raises(RuntimeError):
        repository.create_entry(
            user_id=uuid4(),
            entry_date=date(2024, 1, 16),
            name="Tea",
            description=None,
            calories=40,
            protein=1,
        )


def test_user_settings_repository_reads_and_upserts() -> None:
    client = FakeSupabaseClient()
    table = client.table("user_settings")
    table.queue(
        "select",
        [
            {
                "target_calories": 1800,
                "maintenance_calories": 2300,
                "target_protein": 140,
                "timezone": "Europe/Berlin",
            }
        ],
    )
    repository = SupabaseUserSettingsRepository(client)
    user_id = uuid4()

    goals = repository.get_goals(user_id)
    repository.upsert_goals(user_id, UserGoalSettings(target_calories=1700))

    assert goals == UserGoalSettings(
        target_calories=1800,
        maintenance_calories=2300,
        target_protein=140,
        timezone="Europe/Berlin",
    )
    assert table.last_on_conflict == "user_id"
    assert isinstance(table.last_payload, dict)
    assert table.last_payload["target_calories"] == 1700
    assert repository.get_goals(uuid4()) is None


def test_parse_goals_keeps_zero_and_fills_missing() -> None:
    goals = parse_goals({"target_calories": 0, "timezone": None})

    assert goals.target_calories == 0
    assert goals.maintenance_calories == 2000
    assert goals.target_protein == 150
    assert goals.timezone == "UTC"


def test_admin_repository_merges_profiles_and_settings() -> None:
    client = FakeSupabaseClient()
    first, second = str(uuid4()), str(uuid4())
    client.table("user_profiles").queue(
        "select",
        [
            {
                "user_id": first,
                "email": "a@example.com",
                "last_active_at": "2024-01-18T08:00:00+00:00",
            },
            {"user_id": second, "email": None, "last_active_at": None},
        ],
    )
    client.table("user_settings").queue(
        "select",
        [{"user_id": first, "target_calories": 1800, "maintenance_calories": 2200}],
    )

    users = SupabaseAdminRepository(client).list_users()

    assert [str(user.id) for user in users] == [first, second]
    assert users[0].goals.target_calories == 1800
    assert users[0].last_active_at is not None
    assert users[1].goals == UserGoalSettings()
    assert users[1].last_active_at is None


def test_admin_repository_get_user() -> None:
    client = FakeSupabaseClient()
    user_id = str(uuid4())
    client.table("user_profiles").queue(
        "select", [{"user_id": user_id, "email": "b@example.com"}]
    )
    repository = SupabaseAdminRepository(client)

    user = repository.get_user(uuid4())
    missing = repository.get_user(uuid4())

    assert user is not None
    assert user.email == "b@example.com"
    assert user.goals == UserGoalSettings()
    assert missing is None


def test_admin_repository_counts() -> None:
    client = FakeSupabaseClient()
    client.table("user_profiles").row_count = 12
    client.table("food_entries").row_count = 340
    repository = SupabaseAdminRepository(client)

    assert repository.count_users() == 12
    assert repository.count_food_entries() == 340


def test_admin_repository_entry_activity() -> None:
    client = FakeSupabaseClient()
    table = client.table("food_entries")
    user_id = uuid4()
    table.queue("select", [{"entry_date": "2024-01-16", "user_id": str(user_id)}])

    activity = SupabaseAdminRepository(client).list_entry_activity(
        date(2024, 1, 1), date(2024, 1, 30)
    )

    assert activity == [(date(2024, 1, 16), user_id)]
    assert table.last_filters == [
        ("gte", "entry_date", "2024-01-01"),
        ("lte", "entry_date", "2024-01-30"),
    ]
