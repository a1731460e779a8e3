"""Tracker orchestration: local-first state with best-effort remote sync."""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from nutritrack.domain.models import DateRange, DayLog, UserSettings
from nutritrack.domain.stats import AggregationResult, HistoryRow
from nutritrack.domain.sync import SyncState, SyncStatus
from nutritrack.services import aggregation
from nutritrack.services.day_logs import DayLogStore
from nutritrack.services.identity import IdentityService
from nutritrack.services.mirror import LOGS_KEY, SETTINGS_KEY, LocalMirror

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class SyncTask:
    """A remote write queued behind an optimistic local update."""

    action: str
    write: Callable[[], None]


@dataclass
class TrackerService:
    """Keeps settings and logs for one device and mirrors every change.

    Local state is the source of truth for the running session. Remote writes
    are best-effort: a failure flips the status to offline and is never
    retried or rolled back. Concurrent writers to the same date resolve by
    last write wins.
    """

    store: DayLogStore
    mirror: LocalMirror
    identity: IdentityService
    default_settings: UserSettings
    status_display: timedelta = timedelta(seconds=3)
    clock: Callable[[], datetime] = _utcnow
    settings: UserSettings = field(init=False)
    online: bool = field(init=False, default=False)
    _logs: dict[str, DayLog] = field(init=False, default_factory=dict)
    _status: SyncStatus = field(init=False, default=SyncStatus.IDLE)
    _status_until: datetime | None = field(init=False, default=None)

    def __post_init__(self) -> None:
        self.settings = self.default_settings

    @property
    def user_id(self) -> str:
        return self.identity.get_user_id()

    @property
    def logs(self) -> list[DayLog]:
        """Return all logs ordered by date."""
        return [self._logs[day] for day in sorted(self._logs)]

    def load(self) -> SyncState:
        """Load the mirror snapshot, then let remote data take precedence."""
        self._load_mirror()
        return self._fetch_remote()

    def switch_user(self, user_id: str) -> SyncState:
        """Link this device to another user id and reload its data.

        The previous user's settings and logs are dropped from memory and the
        mirror before the new user's remote data is fetched.
        """
        previous = self.user_id
        if self.identity.set_user_id(user_id) != previous:
            self.settings = self.default_settings
            self._logs = {}
            self._mirror_settings()
            self._mirror_logs()
        return self._fetch_remote()

    def save_settings(self, settings: UserSettings) -> SyncTask:
        """Apply settings locally and return the pending remote write."""
        self.settings = settings
        self._mirror_settings()
        user_id = self.user_id
        return self._begin(
            "save_settings",
            lambda: self.store.save_user_settings(user_id, settings),
        )

    def save_log(self, log: DayLog) -> SyncTask:
        """Replace the log for its date locally and return the remote write."""
        self._logs[log.date] = log
        self._mirror_logs()
        user_id = self.user_id
        return self._begin(
            "save_day_log", lambda: self.store.save_day_log(user_id, log)
        )

    def delete_log(self, day: str) -> SyncTask:
        """Drop the log for a date locally and return the remote delete."""
        self._logs.pop(day, None)
        self._mirror_logs()
        user_id = self.user_id
        return self._begin(
            "delete_day_log", lambda: self.store.delete_day_log(user_id, day)
        )

    def sync(self, task: SyncTask) -> SyncStatus:
        """Run a remote write once, recording the outcome."""
        try:
            task.write()
        except Exception:
            logger.exception("Remote write failed", extra={"action": task.action})
            self.online = False
            self._flash(SyncStatus.ERROR)
            return SyncStatus.ERROR
        self.online = True
        self._flash(SyncStatus.SAVED)
        return SyncStatus.SAVED

    def sync_state(self) -> SyncState:
        """Return the current status, reverting flashed results to idle."""
        if self._status_until is not None and self.clock() >= self._status_until:
            self._status = SyncStatus.IDLE
            self._status_until = None
        return SyncState(status=self._status, online=self.online)

    def get_log(self, day: str) -> DayLog:
        """Return the stored log for a date or an empty one."""
        return self._logs.get(day) or DayLog.empty(day)

    def dashboard(self, date_range: DateRange) -> AggregationResult:
        """Aggregate the current logs for a date range."""
        return aggregation.aggregate(self.logs, self.settings, date_range)

    def history(self, date_range: DateRange) -> list[HistoryRow]:
        """Return history rows for a date range, newest first."""
        return aggregation.history(self._logs.values(), date_range)

    def _begin(self, action: str, write: Callable[[], None]) -> SyncTask:
        self._status = SyncStatus.SYNCING
        self._status_until = None
        return SyncTask(action=action, write=write)

    def _flash(self, status: SyncStatus) -> None:
        self._status = status
        self._status_until = self.clock() + self.status_display

    def _fetch_remote(self) -> SyncState:
        user_id = self.user_id
        try:
            data = self.store.fetch_user_data(user_id)
        except Exception:
            logger.exception(
                "Remote store unavailable, continuing offline",
                extra={"user_id": user_id},
            )
            self.online = False
            return self.sync_state()

        if data.settings is not None:
            self.settings = data.settings
            self._mirror_settings()
        if data.logs:
            # Remote wins wholesale; no per-field merge.
            self._logs = {log.date: log for log in data.logs}
            self._mirror_logs()
        self.online = True
        logger.info(
            "Loaded user data",
            extra={"user_id": user_id, "log_count": len(self._logs)},
        )
        return self.sync_state()

    def _load_mirror(self) -> None:
        raw_settings = _read_json(self.mirror, SETTINGS_KEY)
        if isinstance(raw_settings, dict):
            self.settings = UserSettings.from_dict(raw_settings, self.default_settings)
        raw_logs = _read_json(self.mirror, LOGS_KEY)
        if isinstance(raw_logs, list):
            parsed = [
                DayLog.from_dict(row) for row in raw_logs if isinstance(row, dict)
            ]
            self._logs = {log.date: log for log in parsed if log.date}

    def _mirror_settings(self) -> None:
        self.mirror.set(SETTINGS_KEY, json.dumps(self.settings.to_dict()))

    def _mirror_logs(self) -> None:
        self.mirror.set(LOGS_KEY, json.dumps([log.to_dict() for log in self.logs]))


def _read_json(mirror: LocalMirror, key: str) -> object | None:
    raw = mirror.get(key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("Ignoring corrupt mirror entry", extra={"key": key})
        return None
