"""In-memory TTL cache used for TMDB responses."""
from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Hashable, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(slots=True)
class CacheEntry(Generic[V]):
    value: V
    expires_at: float


class AsyncTtlCache(Generic[K, V]):
    """Per-key single-flight cache whose entries expire after ``ttl`` seconds.

    Only successful loads are stored: when the loader raises, the exception
    propagates to every waiting caller and the next call retries.
    """

    def __init__(self, ttl: float, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[K, CacheEntry[V]] = {}
        self._locks: dict[K, asyncio.Lock] = {}
        self._waiters: dict[K, int] = {}

    @property
    def enabled(self) -> bool:
        return self._ttl > 0

    # ------------------------------------------------------------------
    # internal helpers
    # ------------------------------------------------------------------
    def _fresh(self, key: K) -> CacheEntry[V] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            self._entries.pop(key, None)
            return None
        return entry

    def _evict_expired(self) -> None:
        now = self._clock()
        for key in [key for key, entry in self._entries.items() if entry.expires_at <= now]:
            del self._entries[key]

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    async def get_or_load(self, key: K, loader: Callable[[], Awaitable[V]]) -> V:
        if not self.enabled:
            return await loader()

        entry = self._fresh(key)
        if entry is not None:
            return entry.value

        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                # another caller may have filled the entry while we waited
                entry = self._fresh(key)
                if entry is not None:
                    return entry.value

                value = await loader()
                self._evict_expired()
                self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + self._ttl)
                return value
        finally:
            self._waiters[key] -= 1
            if not self._waiters[key]:
                del self._waiters[key]
                del self._locks[key]

    def invalidate(self, key: K) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["AsyncTtlCache", "CacheEntry"]
