"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from nutritrack.config import Settings
from nutritrack.containers import AppContainer
from nutritrack.domain.models import DayLog, Macros, MealSlot, UserSettings
from nutritrack.services.day_logs import DayLogStore, StoreUnavailableError, UserData
from nutritrack.services.identity import IdentityService
from nutritrack.services.insight import InsightClient, InsightService
from nutritrack.services.mirror import LocalMirror
from nutritrack.services.tracker import TrackerService

DEFAULT_SETTINGS = UserSettings(tmb=2700, name="User")


def make_log(
    day: str,
    calories: dict[MealSlot, float] | None = None,
    exercise: float = 0.0,
) -> DayLog:
    """Build a log from per-slot calories; other macros are fixed fractions."""
    meals = {
        slot: Macros(
            calories=value, protein=value / 10, carbs=value / 5, fat=value / 20
        )
        for slot, value in (calories or {}).items()
    }
    return DayLog(date=day, meals=meals, exercise_calories=exercise)


@dataclass
class InMemoryDayLogStore(DayLogStore):
    """In-memory day-log store for tests."""

    settings: dict[str, UserSettings] = field(default_factory=dict)
    logs: dict[str, dict[str, DayLog]] = field(default_factory=dict)
    fail: bool = False
    calls: list[tuple[str, str]] = field(default_factory=list)

    def fetch_user_data(self, user_id: str) -> UserData:
        self._check("fetch_user_data", user_id)
        user_logs = self.logs.get(user_id, {})
        return UserData(
            settings=self.settings.get(user_id),
            logs=[user_logs[day] for day in sorted(user_logs)],
        )

    def save_user_settings(self, user_id: str, settings: UserSettings) -> None:
        self._check("save_user_settings", user_id)
        self.settings[user_id] = settings

    def save_day_log(self, user_id: str, log: DayLog) -> None:
        self._check("save_day_log", user_id)
        self.logs.setdefault(user_id, {})[log.date] = log

    def delete_day_log(self, user_id: str, day: str) -> None:
        self._check("delete_day_log", user_id)
        self.logs.get(user_id, {}).pop(day, None)

    def _check(self, action: str, user_id: str) -> None:
        self.calls.append((action, user_id))
        if self.fail:
            raise StoreUnavailableError("store is down")


@dataclass
class InMemoryMirror(LocalMirror):
    """In-memory local mirror for tests."""

    entries: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        return self.entries.get(key)

    def set(self, key: str, value: str) -> None:
        self.entries[key] = value


@dataclass
class FakeInsightClient(InsightClient):
    """Fake insight client returning fixed text and recording prompts."""

    text: str = "Great week! Keep protein high."
    error: Exception | None = None
    prompts: list[str] = field(default_factory=list)

    async def complete(
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
    ) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


@dataclass
class FakeClock:
    """Manually advanced clock."""

    now: datetime = field(default_factory=lambda: datetime(2024, 1, 1, tzinfo=UTC))

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        supabase_url=None,
        supabase_service_key=None,
        openai_api_key=None,
        mirror_path=tmp_path / "mirror.json",
    )


@pytest.fixture
def store() -> InMemoryDayLogStore:
    return InMemoryDayLogStore()


@pytest.fixture
def mirror() -> InMemoryMirror:
    return InMemoryMirror()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def tracker(
    store: InMemoryDayLogStore, mirror: InMemoryMirror, clock: FakeClock
) -> TrackerService:
    return TrackerService(
        store=store,
        mirror=mirror,
        identity=IdentityService(mirror, generate_id=lambda: "device-1"),
        default_settings=DEFAULT_SETTINGS,
        clock=clock,
    )


@pytest.fixture
def insight_client() -> FakeInsightClient:
    return FakeInsightClient()


@pytest.fixture
def container(
    settings: Settings,
    tracker: TrackerService,
    insight_client: FakeInsightClient,
) -> AppContainer:
    insight_service = InsightService(
        client=insight_client,
        model=settings.openai_model,
        reasoning_effort=settings.openai_reasoning_effort,
        store=settings.openai_store,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        tracker_service=tracker,
        insight_service=insight_service,
        close_resources=close_resources,
    )
