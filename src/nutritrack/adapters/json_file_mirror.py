"""JSON file-backed local mirror."""

import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from nutritrack.services.mirror import LocalMirror, MirrorCorruptError


@dataclass
class JsonFileMirror(LocalMirror):
    """Keeps every mirror key in one JSON object on disk.

    Writes go to a temporary file in the same directory and are moved into
    place with ``os.replace``, so a crash leaves either the old or the new
    file. A file that fails to parse raises MirrorCorruptError and is left
    untouched.
    """

    path: Path

    def get(self, key: str) -> str | None:
        """Return the stored value for a key."""
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        """Store a value and rewrite the file."""
        entries = self._read()
        entries[key] = value
        self._write(entries)

    def _read(self) -> dict[str, object]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise MirrorCorruptError(
                f"Mirror file {self.path} is not valid JSON; "
                "restore or remove it to continue"
            ) from exc
        if not isinstance(data, dict):
            raise MirrorCorruptError(f"Mirror file {self.path} is not a JSON object")
        return data

    def _write(self, entries: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(entries, handle, ensure_ascii=False, indent=2)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
