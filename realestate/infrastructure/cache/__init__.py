"""Cache: in-process store and cache key utilities.

Used by the cached entity services. MemoryCacheStore implements
CacheProtocol; key format is in keys.py (DRY).
"""

from realestate.infrastructure.cache.cache_protocol import CacheProtocol
from realestate.infrastructure.cache.keys import (
    all_key,
    encode_component,
    entity_key,
    field_key,
    field_prefix,
    list_key,
    list_prefix,
)
from realestate.infrastructure.cache.memory_cache import MemoryCacheStore

__all__ = [
    "CacheProtocol",
    "MemoryCacheStore",
    "all_key",
    "encode_component",
    "entity_key",
    "field_key",
    "field_prefix",
    "list_key",
    "list_prefix",
]
