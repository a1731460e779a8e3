"""Tests for the Supabase day-log store."""

from dataclasses import dataclass, field

from nutritrack.adapters.supabase_day_log_store import SupabaseDayLogStore
from nutritrack.domain.models import MealSlot, UserSettings
from tests.conftest import DEFAULT_SETTINGS, make_log


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "upsert": [], "delete": []}
    )
    last_payload: object | None = None
    last_on_conflict: str | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def upsert(self, payload, on_conflict: str = "") -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "upsert"
        self.last_payload = payload
        self.last_on_conflict = on_conflict
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
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


def test_fetch_user_data_parses_rows() -> None:
    client = FakeSupabaseClient()
    client.table("user_settings").queue("select", [{"tmb": 2100, "name": "Ana"}])
    client.table("day_logs").queue(
        "select",
        [
            {
                "date": "2024-01-02",
                "meals": {"lunch": {"calories": 650, "protein": "40"}},
                "exercise_calories": 120,
            },
            {"date": None, "meals": None},
        ],
    )
    store = SupabaseDayLogStore(client, DEFAULT_SETTINGS)

    data = store.fetch_user_data("user-1")

    assert data.settings == UserSettings(tmb=2100, name="Ana")
    assert len(data.logs) == 1
    log = data.logs[0]
    assert log.date == "2024-01-02"
    assert log.meals[MealSlot.LUNCH].protein == 40
    assert log.meals[MealSlot.DINNER].calories == 0
    assert log.exercise_calories == 120
    assert ("user_id", "user-1") in client.table("day_logs").last_filters


def test_fetch_user_data_without_settings_row() -> None:
    client = FakeSupabaseClient()
    store = SupabaseDayLogStore(client, DEFAULT_SETTINGS)

    data = store.fetch_user_data("user-1")

    assert data.settings is None
    assert data.logs == []


def test_save_day_log_upserts_by_user_and_date() -> None:
    client = FakeSupabaseClient()
    store = SupabaseDayLogStore(client, DEFAULT_SETTINGS)

    store.save_day_log("user-1", make_log("2024-01-05", {MealSlot.SNACK: 250}))

    table = client.table("day_logs")
    assert table.last_on_conflict == "user_id,date"
    assert table.last_payload["user_id"] == "user-1"
    assert table.last_payload["date"] == "2024-01-05"
    assert table.last_payload["meals"]["snack"]["calories"] == 250
    assert "updated_at" in table.last_payload


def test_save_user_settings_upserts_row() -> None:
    client = FakeSupabaseClient()
    store = SupabaseDayLogStore(client, DEFAULT_SETTINGS)

    store.save_user_settings("user-1", UserSettings(tmb=1990, name="Bia"))

    table = client.table("user_settings")
    assert table.last_on_conflict == "user_id"
    assert table.last_payload["tmb"] == 1990
    assert table.last_payload["name"] == "Bia"


def test_delete_day_log_filters_by_user_and_date() -> None:
    client = FakeSupabaseClient()
    store = SupabaseDayLogStore(client, DEFAULT_SETTINGS)

    store.delete_day_log("user-1", "2024-01-05")

    assert client.table("day_logs").last_filters == [
        ("user_id", "user-1"),
        ("date", "2024-01-05"),
    ]
