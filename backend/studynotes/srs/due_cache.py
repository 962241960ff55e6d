"""TTL cache around due-queue selection."""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Hashable, Sequence

from cachetools import TTLCache

from studynotes.config import get_review_settings

from .due import select_due
from .state import ScheduleState
from .time import minute_bucket


CacheKey = tuple[str, tuple, datetime, int | None]


class DueQueueCache:
    """Thread-safe memo of select_due results.

    Entries are keyed by (user_id, notes snapshot, now truncated to the minute,
    limit), so any change to a schedule produces a new key. Callers still
    invalidate a user's entries after applying a review to drop stale queues early.
    """

    DEFAULT_TTL_SECONDS = 60
    MAX_ENTRIES = 1024

    def __init__(self, ttl_seconds: int = DEFAULT_TTL_SECONDS, maxsize: int = MAX_ENTRIES):
        self._cache: TTLCache[CacheKey, list] = TTLCache(maxsize=maxsize, ttl=ttl_seconds)
        self._lock = threading.Lock()

    def _make_key(
        self,
        user_id: str,
        notes: Sequence[tuple[Hashable, ScheduleState]],
        now: datetime,
        limit: int | None,
    ) -> CacheKey:
        return (user_id, tuple(notes), minute_bucket(now), limit)

    def get_due(
        self,
        user_id: str,
        notes: Sequence[tuple[Hashable, ScheduleState]],
        now: datetime,
        limit: int | None = None,
    ) -> list:
        """Return select_due(notes, now, limit), reusing a cached result when possible."""
        key = self._make_key(user_id, notes, now, limit)
        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                return list(cached)

        due = select_due(notes, now, limit)
        with self._lock:
            self._cache[key] = due
        return list(due)

    def invalidate(self, user_id: str) -> int:
        """Drop every cached queue for a user. Returns the number of entries removed."""
        with self._lock:
            stale = [key for key in self._cache.keys() if key[0] == user_id]
            for key in stale:
                self._cache.pop(key, None)
            return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)


_due_cache: DueQueueCache | None = None


def get_due_cache() -> DueQueueCache:
    """Get the singleton due-queue cache."""
    global _due_cache
    if _due_cache is None:
        settings = get_review_settings()
        _due_cache = DueQueueCache(
            ttl_seconds=settings.due_cache_ttl_seconds,
            maxsize=settings.due_cache_maxsize,
        )
    return _due_cache


def reset_due_cache() -> None:
    """Reset the due-queue cache (for testing)."""
    global _due_cache
    _due_cache = None
