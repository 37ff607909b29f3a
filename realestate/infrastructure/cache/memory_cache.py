"""In-process cache store with TTL and invalidation watermarks.

One MemoryCacheStore is injected per entity facade. Entries are kept as
(value, absolute expiry) on a monotonic clock and expire lazily on get.
Every invalidation bumps a sequence number and leaves a tombstone, so a
fetch that started before the invalidation (its watermark is older) cannot
write the stale value back.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Entry:
    value: Any
    expires_at: float


class MemoryCacheStore:
    """Thread-safe TTL cache implementing CacheProtocol.

    All maps are guarded by a single lock, so operations on a key are
    linearizable whether they come from the event loop or a worker thread.
    No background thread: expired entries are dropped on get, and the
    oldest entries are evicted when max_entries is exceeded.
    """

    def __init__(
        self,
        *,
        name: str = "cache",
        tombstone_retention_seconds: float = 600,
        max_entries: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize an empty store.

        Args:
            name: Label used in log lines (usually the entity prefix).
            tombstone_retention_seconds: How long invalidations are remembered
                for in-flight fetches. Fetches older than that are refused.
            max_entries: Upper bound on live entries.
            clock: Monotonic time source in seconds (injectable for tests).
        """
        if tombstone_retention_seconds <= 0:
            raise ValueError("tombstone_retention_seconds must be positive")
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.name = name
        self._retention = tombstone_retention_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, _Entry] = {}
        # key/prefix -> (sequence, invalidated_at); insertion order == sequence order
        self._key_tombstones: OrderedDict[str, tuple[int, float]] = OrderedDict()
        self._prefix_tombstones: OrderedDict[str, tuple[int, float]] = OrderedDict()
        self._sequence = 0
        self._pruned_through = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    async def get(self, key: str) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.expires_at <= self._clock():
                del self._entries[key]
                entry = None
        if entry is None:
            logger.debug("Cache MISS [%s]: %s", self.name, key)
            return None
        logger.debug("Cache HIT [%s]: %s", self.name, key)
        return entry.value

    async def set(
        self, key: str, value: Any, ttl_seconds: float, *, since: int | None = None
    ) -> bool:
        """Store value for ttl_seconds. Refused when invalidated after since.

        Args:
            key: Cache key (use realestate.infrastructure.cache.keys builders).
            value: Value to cache; callers store immutable values (tuples, frozen DTOs).
            ttl_seconds: Time-to-live in seconds; must be positive.
            since: Watermark taken before the value was fetched.

        Returns:
            True if stored, False if the fetch was overtaken by an invalidation.
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        with self._lock:
            if since is not None and self._invalidated_since(key, since):
                stored = False
            else:
                self._entries.pop(key, None)
                self._entries[key] = _Entry(value, self._clock() + ttl_seconds)
                self._evict_overflow()
                stored = True
        if stored:
            logger.debug("Cache SET [%s]: %s (TTL: %ss)", self.name, key, ttl_seconds)
        else:
            logger.debug("Cache SET skipped [%s]: %s (invalidated during fetch)", self.name, key)
        return stored

    async def invalidate(self, *keys: str) -> int:
        if not keys:
            return 0
        with self._lock:
            now = self._clock()
            self._sequence += 1
            removed = 0
            for key in keys:
                if self._entries.pop(key, None) is not None:
                    removed += 1
                self._key_tombstones.pop(key, None)
                self._key_tombstones[key] = (self._sequence, now)
            self._prune_tombstones(now)
        logger.debug("Cache INVALIDATE [%s]: %s (%d removed)", self.name, ", ".join(keys), removed)
        return removed

    async def invalidate_prefix(self, prefix: str) -> int:
        with self._lock:
            now = self._clock()
            self._sequence += 1
            matched = [key for key in self._entries if key.startswith(prefix)]
            for key in matched:
                del self._entries[key]
            self._prefix_tombstones.pop(prefix, None)
            self._prefix_tombstones[prefix] = (self._sequence, now)
            self._prune_tombstones(now)
        logger.debug("Cache INVALIDATE prefix [%s]: %s* (%d removed)", self.name, prefix, len(matched))
        return len(matched)

    async def watermark(self) -> int:
        with self._lock:
            return self._sequence

    async def clear(self) -> None:
        """Drop every entry; in-flight fetches are refused as after any invalidation."""
        with self._lock:
            now = self._clock()
            self._sequence += 1
            self._entries.clear()
            self._prefix_tombstones.pop("", None)
            self._prefix_tombstones[""] = (self._sequence, now)
            self._prune_tombstones(now)
        logger.debug("Cache CLEAR [%s]", self.name)

    def _invalidated_since(self, key: str, since: int) -> bool:
        """Return True if key was invalidated after watermark since. Caller holds the lock."""
        if since < self._pruned_through:
            return True
        tombstone = self._key_tombstones.get(key)
        if tombstone is not None and tombstone[0] > since:
            return True
        return any(
            sequence > since and key.startswith(prefix)
            for prefix, (sequence, _) in self._prefix_tombstones.items()
        )

    def _prune_tombstones(self, now: float) -> None:
        """Forget tombstones older than the retention window. Caller holds the lock."""
        horizon = now - self._retention
        for tombstones in (self._key_tombstones, self._prefix_tombstones):
            while tombstones:
                _, (sequence, invalidated_at) = next(iter(tombstones.items()))
                if invalidated_at >= horizon:
                    break
                tombstones.popitem(last=False)
                self._pruned_through = max(self._pruned_through, sequence)

    def _evict_overflow(self) -> None:
        """Drop expired entries, then the oldest ones, above max_entries. Caller holds the lock."""
        if len(self._entries) <= self._max_entries:
            return
        now = self._clock()
        for key in [k for k, e in self._entries.items() if e.expires_at <= now]:
            del self._entries[key]
        while len(self._entries) > self._max_entries:
            del self._entries[next(iter(self._entries))]
