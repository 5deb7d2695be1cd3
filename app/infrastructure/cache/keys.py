"""Cache key builders. Single place for key format (DRY).

Key components (query name, agency_id, ids, etc.) must not contain
CACHE_KEY_SEP to avoid ambiguous or colliding keys.
"""

from enum import Enum
from typing import Any

from app.core.constants import CACHE_KEY_SEP, CACHE_PREFIX_QUERY


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value contains the cache key separator.

    Args:
        value: String component used in a cache key.
        name: Name of the component (for error message).

    Raises:
        ValueError: If value contains CACHE_KEY_SEP.
    """
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def _component(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def query_key(name: str, *args: Any, **kwargs: Any) -> str:
    """Cache key for a named query and its arguments.

    Positional args keep their order; keyword args are sorted by name and
    rendered as name=value, so call style does not change the key.
    """
    _validate_key_component(name, "name")
    parts = [CACHE_PREFIX_QUERY, name]
    for index, arg in enumerate(args):
        value = _component(arg)
        _validate_key_component(value, f"arg{index}")
        parts.append(value)
    for key in sorted(kwargs):
        value = f"{key}={_component(kwargs[key])}"
        _validate_key_component(value, key)
        parts.append(value)
    return CACHE_KEY_SEP.join(parts)
