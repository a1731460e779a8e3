"""Supabase repository for settings and day logs."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from nutritrack.domain.models import DayLog, UserSettings
from nutritrack.services.day_logs import DayLogStore, UserData


@dataclass
class SupabaseDayLogStore(DayLogStore):
    """Supabase implementation of the day-log store."""

    client: Client
    defaults: UserSettings

    def fetch_user_data(self, user_id: str) -> UserData:
        """Return the user's settings row and every day log."""
        settings_response = (
            self.client.table("user_settings")
            .select("tmb, name")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        settings = None
        if settings_response.data:
            settings = UserSettings.from_dict(
                settings_response.data[0], self.defaults
            )

        logs_response = (
            self.client.table("day_logs")
            .select("date, meals, exercise_calories")
            .eq("user_id", user_id)
            .order("date", desc=False)
            .execute()
        )
        logs = [DayLog.from_dict(row) for row in logs_response.data or []]
        return UserData(settings=settings, logs=[log for log in logs if log.date])

    def save_user_settings(self, user_id: str, settings: UserSettings) -> None:
        """Overwrite the user's settings row."""
        self.client.table("user_settings").upsert(
            {
                "user_id": user_id,
                **settings.to_dict(),
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id",
        ).execute()

    def save_day_log(self, user_id: str, log: DayLog) -> None:
        """Upsert the log keyed by user and date."""
        self.client.table("day_logs").upsert(
            {
                "user_id": user_id,
                **log.to_dict(),
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id,date",
        ).execute()

    def delete_day_log(self, user_id: str, day: str) -> None:
        """Delete the log for a date."""
        self.client.table("day_logs").delete().eq("user_id", user_id).eq(
            "date", day
        ).execute()
