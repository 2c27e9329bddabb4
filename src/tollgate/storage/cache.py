"""Time-bounded cache of permission decisions."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import NamedTuple

from tollgate.models.decision import Decision

logger = logging.getLogger(__name__)

DEFAULT_TTL = 60.0
DEFAULT_MAX_ENTRIES = 1000


class CacheKey(NamedTuple):
    user_id: str
    resource_type: str
    resource_id: str
    action: str


class _Entry(NamedTuple):
    decision: Decision
    created_at: float


class DecisionCache:
    """Memo of decisions, each valid for ``ttl`` seconds after it was stored."""

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        *,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl <= 0:
            raise ValueError("Cache TTL must be positive")
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[CacheKey, _Entry] = {}
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> Decision | None:
        """Return the cached decision, or None if absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or self._expired(entry):
                return None
            return entry.decision

    def put(self, key: CacheKey, decision: Decision) -> None:
        with self._lock:
            self._entries[key] = _Entry(decision, self._clock())
            if len(self._entries) > self.max_entries:
                self._purge_expired()

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def invalidate_resource(self, resource_id: str) -> int:
        """Drop every entry for a resource. Returns the number removed."""
        with self._lock:
            stale = [key for key in self._entries if key.resource_id == resource_id]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug("Invalidated %s cached decisions for %s", len(stale), resource_id)
        return len(stale)

    def _expired(self, entry: _Entry) -> bool:
        return self._clock() - entry.created_at >= self.ttl

    def _purge_expired(self) -> None:
        # caller holds the lock
        stale = [key for key, entry in self._entries.items() if self._expired(entry)]
        for key in stale:
            del self._entries[key]
        logger.debug("Purged %s expired decisions", len(stale))
