"""
In-process content cache keyed by URL.

``try_get(key, compute)`` returns the cached value when present and fresh,
otherwise awaits ``compute()`` and stores its result. Concurrent lookups of
the same key share a single computation. Failed computations are not stored.
A key's lock lives only while lookups hold or await it, and expired entries
are swept whenever a new value is stored.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from app.config import settings
from app.core.logging import get_logger

logger = get_logger(module="content_cache")


class ContentCache:
    def __init__(self, *, ttl_seconds: Optional[int] = None) -> None:
        ttl = settings.FEED_CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self.ttl_seconds = max(0, int(ttl))
        # key -> (expires_at, value); expires_at None = never
        self._entries: Dict[str, Tuple[Optional[float], Any]] = {}
        # per-key lock and the number of lookups currently holding or awaiting it
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def _lookup(self, key: str) -> Tuple[bool, Any]:
        entry = self._entries.get(key)
        if entry is None:
            return False, None
        expires_at, value = entry
        if expires_at is not None and time.monotonic() >= expires_at:
            del self._entries[key]
            return False, None
        return True, value

    def _evict_expired(self, now: float) -> None:
        expired = [
            key
            for key, (expires_at, _) in self._entries.items()
            if expires_at is not None and now >= expires_at
        ]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("content_cache_evicted", count=len(expired))

    def _store(self, key: str, value: Any) -> None:
        now = time.monotonic()
        if self.ttl_seconds:
            self._evict_expired(now)
            self._entries[key] = (now + self.ttl_seconds, value)
        else:
            self._entries[key] = (None, value)

    def _acquire_lock(self, key: str) -> asyncio.Lock:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        return lock

    def _release_lock(self, key: str) -> None:
        users = self._lock_users.get(key, 0) - 1
        if users > 0:
            self._lock_users[key] = users
            return
        self._lock_users.pop(key, None)
        self._locks.pop(key, None)

    async def try_get(self, key: str, compute: Callable[[], Awaitable[Any]]) -> Any:
        hit, value = self._lookup(key)
        if hit:
            logger.debug("content_cache_hit", key=key)
            return value

        lock = self._acquire_lock(key)
        try:
            async with lock:
                # another waiter may have filled the entry while we were queued
                hit, value = self._lookup(key)
                if hit:
                    logger.debug("content_cache_hit", key=key, waited=True)
                    return value

                logger.debug("content_cache_miss", key=key)
                value = await compute()
                self._store(key, value)
                return value
        finally:
            self._release_lock(key)

    def clear(self) -> None:
        self._entries.clear()


_cache: Optional[ContentCache] = None


def get_content_cache() -> ContentCache:
    """Process-wide cache shared by all requests."""
    global _cache
    if _cache is None:
        _cache = ContentCache()
    return _cache


def reset_content_cache() -> None:
    global _cache
    _cache = None
