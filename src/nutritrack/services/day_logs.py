"""Remote day-log store interface."""

from dataclasses import dataclass, field
from typing import Protocol

from nutritrack.domain.models import DayLog, UserSettings


class StoreUnavailableError(RuntimeError):
    """Raised when the remote store cannot be reached or is not configured."""


@dataclass(frozen=True)
class UserData:
    """Everything the remote store holds for a user."""

    settings: UserSettings | None
    logs: list[DayLog] = field(default_factory=list)


class DayLogStore(Protocol):
    """Persistence interface for settings and day logs keyed by user id."""

    def fetch_user_data(self, user_id: str) -> UserData:
        """Return the user's settings (if any) and all of their day logs."""

    def save_user_settings(self, user_id: str, settings: UserSettings) -> None:
        """Overwrite the user's settings."""

    def save_day_log(self, user_id: str, log: DayLog) -> None:
        """Upsert a day log keyed by (user_id, log.date)."""

    def delete_day_log(self, user_id: str, day: str) -> None:
        """Delete the day log for a date."""


@dataclass
class UnconfiguredDayLogStore(DayLogStore):
    """Store used when no remote backend is configured; every call fails."""

    reason: str = "Remote store is not configured"

    def fetch_user_data(self, user_id: str) -> UserData:
        raise StoreUnavailableError(self.reason)

    def save_user_settings(self, user_id: str, settings: UserSettings) -> None:
        raise StoreUnavailableError(self.reason)

    def save_day_log(self, user_id: str, log: DayLog) -> None:
        raise StoreUnavailableError(self.reason)

    def delete_day_log(self, user_id: str, day: str) -> None:
        raise StoreUnavailableError(self.reason)
