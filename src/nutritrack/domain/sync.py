"""Domain models for remote synchronization state."""

from dataclasses import dataclass
from enum import Enum


class SyncStatus(str, Enum):
    """Outcome of the most recent remote write."""

    IDLE = "idle"
    SYNCING = "syncing"
    SAVED = "saved"
    ERROR = "error"


@dataclass(frozen=True)
class SyncState:
    """Status indicator shown alongside the dashboard."""

    status: SyncStatus
    online: bool
