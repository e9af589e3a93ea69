"""
Local cache of joined games, so a player can resume after closing the client.

The whole record set lives as one JSON array under a single storage key. Every
operation reloads it, drops expired entries, applies its change and writes the
full set back. Expiry is only evaluated on access; there is no timer.

The cache is a convenience, not a source of truth: unreadable data is logged,
thrown away and replaced by an empty set rather than raised to the caller.
"""

import json
import time
from typing import Callable, List, Optional

from pydantic import ValidationError

from pokerdot.config import SESSION_MAX_AGE_MS, STORAGE_KEY
from pokerdot.logger import get_logger
from pokerdot.session.models import SessionRecord
from pokerdot.storage import KeyValueStorage

logger = get_logger(__name__)


class SessionStoreError(Exception):
    """The persisted record set could not be read or decoded."""


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class SessionCache:
    """
    Bounded, TTL-evicting, key-deduplicating store of SessionRecords.

    Args:
        storage: Blob storage the record set is persisted to.
        storage_key: Key the JSON array is stored under.
        max_age_ms: Retention window; older records are purged on access.
        clock: Returns the current time in epoch milliseconds.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        storage_key: str = STORAGE_KEY,
        max_age_ms: int = SESSION_MAX_AGE_MS,
        clock: Callable[[], int] = now_ms,
    ):
        self.storage = storage
        self.storage_key = storage_key
        self.max_age_ms = max_age_ms
        self._clock = clock

    # ─── Public operations ───────────────────────────────────────────

    def list(self) -> List[SessionRecord]:
        """Return all live records, most recently saved first."""
        records = self._load_live()
        logger.debug(f"Saved games: {len(records)}")
        self._try_persist(records)
        return records

    def save(self, record: SessionRecord) -> None:
        """Stamp ``record`` with the current time and store it at the front."""
        stamped = record.model_copy(update={"saved_at": self._clock()})

        # Drop any earlier save of this player / game combination
        records = [
            r
            for r in self._load_live()
            if not r.matches(stamped.session_id, stamped.participant_key)
        ]
        records.insert(0, stamped)
        self._persist(records)
        logger.info(
            f"Saved game {stamped.session_id} ({len(records)} saved game(s) total)"
        )

    def remove(self, session_id: str, participant_key: str) -> List[SessionRecord]:
        """Delete the matching record, if any, and return what remains."""
        records = self._load_live()
        remaining = [r for r in records if not r.matches(session_id, participant_key)]
        if len(remaining) != len(records):
            logger.info(f"Removed saved game {session_id}")
        self._persist(remaining)
        return remaining

    def clear(self) -> None:
        """Reinitialise the store to an empty set."""
        self._persist([])

    # ─── Internals ───────────────────────────────────────────────────

    def _decode(self, raw: Optional[str]) -> List[SessionRecord]:
        if raw is None or raw == "" or raw == "null":
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise SessionStoreError(f"Saved games are not valid JSON: {e}") from e

        if not isinstance(data, list):
            raise SessionStoreError(
                f"Saved games must be a JSON array, got {type(data).__name__}"
            )
        try:
            return [SessionRecord.from_stored(item) for item in data]
        except (ValidationError, ValueError) as e:
            raise SessionStoreError(f"Malformed saved game: {e}") from e

    def _load(self) -> List[SessionRecord]:
        try:
            return self._decode(self.storage.get_item(self.storage_key))
        except (SessionStoreError, OSError, UnicodeDecodeError) as e:
            logger.error(f"Unable to load saved games, resetting store: {e}")
            self._try_persist([])
            return []

    def _load_live(self) -> List[SessionRecord]:
        cutoff = self._clock() - self.max_age_ms
        records = [r for r in self._load() if r.saved_at > cutoff]
        # Stable: equal timestamps keep their stored (front-inserted) order
        records.sort(key=lambda r: r.saved_at, reverse=True)
        return records

    def _persist(self, records: List[SessionRecord]) -> None:
        self.storage.set_item(
            self.storage_key, json.dumps([r.to_stored() for r in records])
        )

    def _try_persist(self, records: List[SessionRecord]) -> None:
        """Persist, logging instead of raising when the store cannot be written."""
        try:
            self._persist(records)
        except OSError as e:
            logger.error(f"Unable to write saved games: {e}")
