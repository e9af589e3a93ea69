"""
Key/value blob storage used by the session cache.

The cache never touches the filesystem itself; it is handed a storage object
exposing get/set of a string under a key. ``MemoryStorage`` backs unit tests,
``FileStorage`` keeps one file per key under the data directory.
"""

import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from pokerdot.logger import get_logger

logger = get_logger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9._-]+$")


class KeyValueStorage(ABC):
    """Abstract string-blob store addressed by key."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the blob stored under ``key`` or None when absent."""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous blob."""
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete the blob under ``key``; absent keys are ignored."""
        pass


class MemoryStorage(KeyValueStorage):
    """Process-local storage, lost on exit."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileStorage(KeyValueStorage):
    """
    Stores each key as ``<base_dir>/<key>.json``.

    Writes go to a temp file in the same directory and are moved into place,
    so readers only ever see a complete blob.
    """

    def __init__(self, base_dir: str | Path):
        self.base_dir = Path(base_dir)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.base_dir / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        self.base_dir.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=str(self.base_dir), prefix=f".{key}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug(f"Wrote {len(value)} chars to {path}")

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
