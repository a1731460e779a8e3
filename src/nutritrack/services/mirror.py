"""Local mirror abstractions."""

from typing import Protocol

SETTINGS_KEY = "nutritrack_settings"
LOGS_KEY = "nutritrack_logs"
USER_ID_KEY = "nutritrack_userid"


class MirrorCorruptError(RuntimeError):
    """Raised when the mirror's backing storage cannot be parsed."""


class LocalMirror(Protocol):
    """Synchronous key-value storage for serialized snapshots."""

    def get(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""

    def set(self, key: str, value: str) -> None:
        """Store a value under a key, replacing any previous one."""
