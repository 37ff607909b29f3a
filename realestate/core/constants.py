"""Core constants: cache key prefixes and shared literal values.

Single source of truth for cache key structure (DRY). Used by
infrastructure cache keys and the cached entity services.
"""

# Cache key prefixes, one per entity
CACHE_PREFIX_OWNER = "owner"
CACHE_PREFIX_PROPERTY = "property"
CACHE_PREFIX_PROPERTY_IMAGE = "pimage"
CACHE_PREFIX_PROPERTY_TRACE = "ptrace"
CACHE_PREFIX_USER = "user"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Serialized form of an absent (None) key component. Always percent-encoded
# inside real values, so it cannot collide with any string filter.
CACHE_KEY_NONE = "!"

# Key segments
CACHE_SEGMENT_LIST = "list"
CACHE_SEGMENT_ID = "id"

# Pagination defaults
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 6
