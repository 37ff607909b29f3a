"""Cache protocol for the cached entity services (DIP)."""

from typing import Any, Protocol


class CacheProtocol(Protocol):
    """Protocol for cache backends. Implemented by MemoryCacheStore.

    Invalidation is tracked with a monotonically increasing watermark: take
    watermark() before fetching from the store and pass it as ``since`` to
    set(); the write is refused if the key was invalidated in between.
    """

    async def get(self, key: str) -> Any:
        """Return cached value, or None if absent or expired."""
        ...

    async def set(
        self, key: str, value: Any, ttl_seconds: float, *, since: int | None = None
    ) -> bool:
        """Store value with TTL in seconds. Returns False if refused (stale fetch)."""
        ...

    async def invalidate(self, *keys: str) -> int:
        """Remove keys regardless of expiry. Returns the number of live entries removed."""
        ...

    async def invalidate_prefix(self, prefix: str) -> int:
        """Remove every key starting with prefix. Returns the number removed."""
        ...

    async def watermark(self) -> int:
        """Return the current invalidation sequence number."""
        ...

    async def clear(self) -> None:
        """Drop every entry."""
        ...
