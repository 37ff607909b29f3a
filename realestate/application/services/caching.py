"""Read-through caching and write invalidation for one entity cache.

Reads go cache -> store -> cache. The watermark is taken before the store
fetch and handed to set(), so a value fetched before a concurrent
invalidation is never written back over it.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar

from realestate.core.constants import CACHE_KEY_SEP
from realestate.infrastructure.cache import (
    CacheProtocol,
    entity_key,
    field_prefix,
    list_prefix,
)

T = TypeVar("T")


def _is_present(value: object) -> bool:
    return value is not None


class ReadThroughCache:
    """Wraps a cache store with the entity prefix and TTL of one facade."""

    def __init__(self, cache: CacheProtocol, prefix: str, ttl_seconds: float) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.cache = cache
        self.prefix = prefix
        self.ttl_seconds = ttl_seconds

    async def get_or_fetch(
        self,
        key: str,
        fetch: Callable[[], Awaitable[T]],
        *,
        force_refresh: bool = False,
        cache_if: Callable[[T], bool] = _is_present,
    ) -> tuple[T, bool]:
        """Return (value, from_cache).

        With force_refresh the cached value is ignored and overwritten. A
        value for which cache_if is False (e.g. not found) is returned but not
        cached. Store errors raised by fetch propagate and leave the cache
        untouched.
        """
        if not force_refresh:
            cached = await self.cache.get(key)
            if cached is not None:
                return cached, True
        since = await self.cache.watermark()
        value = await fetch()
        if cache_if(value):
            await self.cache.set(key, value, self.ttl_seconds, since=since)
        return value, False

    async def invalidate_entity(
        self, entity_id: str | None = None, *, fields: Iterable[str] = ()
    ) -> None:
        """Invalidate the entity key, every list key and the given secondary lookups."""
        if entity_id is not None:
            await self.cache.invalidate(entity_key(self.prefix, entity_id))
        await self.cache.invalidate_prefix(list_prefix(self.prefix))
        for field in fields:
            await self.cache.invalidate_prefix(field_prefix(self.prefix, field))

    async def invalidate_all(self) -> None:
        """Invalidate every key of this entity (used after bulk deletes)."""
        await self.cache.invalidate_prefix(f"{self.prefix}{CACHE_KEY_SEP}")
