"""
Key-value stores for the cookbook.

The cookbook only needs get/set/remove of string values under a key, the
same surface as browser local storage. Both stores are synchronous and
single-writer.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from chefgenie.errors import StorageWriteError

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


def _check_quota(data: dict[str, str], quota_bytes: int | None) -> None:
    if quota_bytes is None:
        return
    used = sum(len(k.encode("utf-8")) + len(v.encode("utf-8")) for k, v in data.items())
    if used > quota_bytes:
        raise StorageWriteError(f"Quota exceeded: {used} bytes used, limit is {quota_bytes}")


class MemoryStore:
    """In-process store, mainly for tests."""

    def __init__(self, quota_bytes: int | None = None):
        self.quota_bytes = quota_bytes
        self._data: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        _check_quota({**self._data, key: value}, self.quota_bytes)
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """
    Store backed by one JSON object on disk.

    Writes go to a temp file that replaces the original, so a failed
    write leaves the previous contents intact.
    """

    def __init__(self, path: Path, quota_bytes: int | None = None):
        self.path = Path(path).expanduser()
        self.quota_bytes = quota_bytes

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring {self.path}: expected a JSON object")
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _dump(self, data: dict[str, str]) -> None:
        _check_quota(data, self.quota_bytes)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp, self.path)
        except OSError as e:
            raise StorageWriteError(f"Could not write {self.path}: {e}") from e

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._dump(data)
