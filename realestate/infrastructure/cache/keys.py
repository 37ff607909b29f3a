"""Cache key builders. Single place for key format (DRY).

Formats:
    <prefix>:list:<field>=<value>:...:page=<n>:limit=<n>
    <prefix>:id:<id>
    <prefix>:<field>:<value>

Values are percent-encoded, so CACHE_KEY_SEP never appears raw inside a
component. None serializes to CACHE_KEY_NONE, which percent-encoding never
produces, so None, "" and every other string map to distinct keys. The
"all" key is the list key with every filter None and default pagination.
"""

from collections.abc import Iterable, Sequence
from typing import Any
from urllib.parse import quote

from realestate.core.constants import (
    CACHE_KEY_NONE,
    CACHE_KEY_SEP,
    CACHE_SEGMENT_ID,
    CACHE_SEGMENT_LIST,
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
)

_RESERVED_SEGMENTS = frozenset({CACHE_SEGMENT_ID, CACHE_SEGMENT_LIST})


def _validate_key_name(value: str, name: str) -> None:
    """Raise ValueError if a fixed key part (prefix, field name) is unusable.

    Args:
        value: Prefix or field name used verbatim in a cache key.
        name: Name of the component (for error message).

    Raises:
        ValueError: If value is empty or contains CACHE_KEY_SEP or '='.
    """
    if not value or CACHE_KEY_SEP in value or "=" in value:
        raise ValueError(
            f"Cache key component {name!r} must be non-empty and must not contain "
            f"{CACHE_KEY_SEP!r} or '=' (got {value!r})"
        )


def encode_component(value: Any) -> str:
    """Serialize one key component deterministically."""
    if value is None:
        return CACHE_KEY_NONE
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return quote(str(value), safe="")


def list_prefix(prefix: str) -> str:
    """Prefix shared by every list key of an entity (used for invalidation)."""
    _validate_key_name(prefix, "prefix")
    return f"{prefix}{CACHE_KEY_SEP}{CACHE_SEGMENT_LIST}{CACHE_KEY_SEP}"


def list_key(
    prefix: str,
    filters: Sequence[tuple[str, Any]],
    page: int,
    limit: int,
) -> str:
    """Cache key for a filtered, paginated list. filters keep the caller's order."""
    parts = []
    for name, value in filters:
        _validate_key_name(name, "filter")
        parts.append(f"{name}={encode_component(value)}")
    parts.append(f"page={int(page)}")
    parts.append(f"limit={int(limit)}")
    return list_prefix(prefix) + CACHE_KEY_SEP.join(parts)


def all_key(
    prefix: str,
    filter_names: Iterable[str],
    limit: int = DEFAULT_PAGE_SIZE,
) -> str:
    """Cache key for the unfiltered first page (every filter absent)."""
    return list_key(prefix, [(name, None) for name in filter_names], DEFAULT_PAGE, limit)


def entity_key(prefix: str, entity_id: str) -> str:
    """Cache key for one entity by id."""
    _validate_key_name(prefix, "prefix")
    return f"{prefix}{CACHE_KEY_SEP}{CACHE_SEGMENT_ID}{CACHE_KEY_SEP}{encode_component(entity_id)}"


def field_prefix(prefix: str, field: str) -> str:
    """Prefix shared by every secondary lookup on field (used for invalidation)."""
    _validate_key_name(prefix, "prefix")
    _validate_key_name(field, "field")
    if field in _RESERVED_SEGMENTS:
        raise ValueError(f"Cache key field {field!r} is reserved")
    return f"{prefix}{CACHE_KEY_SEP}{field}{CACHE_KEY_SEP}"


def field_key(prefix: str, field: str, value: Any) -> str:
    """Cache key for a secondary lookup (e.g. user by email, image by property)."""
    return field_prefix(prefix, field) + encode_component(value)
