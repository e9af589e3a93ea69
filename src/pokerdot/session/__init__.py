"""
Saved-game cache for pokerdot.

- models: SessionRecord, the persisted descriptor of a joined game
- cache:  SessionCache, dedup-on-write store with lazy 7-day expiry
"""

from pokerdot.session.cache import SessionCache, SessionStoreError, now_ms
from pokerdot.session.models import SessionRecord

__all__ = ["SessionCache", "SessionRecord", "SessionStoreError", "now_ms"]
