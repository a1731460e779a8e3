"""Device user identity."""

from collections.abc import Callable
from dataclasses import dataclass
from uuid import uuid4

from nutritrack.services.mirror import USER_ID_KEY, LocalMirror


def _random_user_id() -> str:
    return uuid4().hex


@dataclass
class IdentityService:
    """Resolves the user id this device reads and writes under."""

    mirror: LocalMirror
    generate_id: Callable[[], str] = _random_user_id

    def get_user_id(self) -> str:
        """Return the stored user id, generating and persisting one if missing."""
        existing = self.mirror.get(USER_ID_KEY)
        if existing:
            return existing
        created = self.generate_id()
        self.mirror.set(USER_ID_KEY, created)
        return created

    def set_user_id(self, user_id: str) -> str:
        """Persist a user-supplied id, e.g. one copied from another device."""
        cleaned = user_id.strip()
        if not cleaned:
            raise ValueError("User id must not be empty")
        self.mirror.set(USER_ID_KEY, cleaned)
        return cleaned
