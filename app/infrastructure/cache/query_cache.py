"""Per-request query cache: read-through store invalidated by entity type.

One QueryCache lives for one request (created by a FastAPI dependency) and
is never shared, so there is no TTL and no locking. Each stored entry
remembers which entity types its query read; commands drop entries by type.
Entries may carry a scope (the caller's agency, user and role) ahead of the
query args; invalidating by name and args drops the entry for every scope.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable
from typing import Any

from app.domain.enums import EntityType
from app.infrastructure.cache.keys import query_key

logger = logging.getLogger(__name__)


class QueryCache:
    """In-process key -> value store with entity-type and query indexes."""

    def __init__(self) -> None:
        self._entries: dict[str, Any] = {}
        self._keys_by_entity: dict[EntityType, set[str]] = defaultdict(set)
        self._keys_by_query: dict[str, set[str]] = defaultdict(set)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def lookup(
        self,
        name: str,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        scope: tuple[Any, ...] = (),
    ) -> tuple[bool, Any]:
        """Return (hit, value) for the query; value may legitimately be None."""
        key = query_key(name, *scope, *args, **kwargs)
        if key in self._entries:
            logger.debug("Cache HIT: %s", key)
            return True, self._entries[key]
        logger.debug("Cache MISS: %s", key)
        return False, None

    def store(
        self,
        name: str,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        value: Any,
        reads: Iterable[EntityType],
        scope: tuple[Any, ...] = (),
    ) -> None:
        key = query_key(name, *scope, *args, **kwargs)
        self._entries[key] = value
        self._keys_by_query[query_key(name, *args, **kwargs)].add(key)
        for entity_type in reads:
            self._keys_by_entity[entity_type].add(key)
        logger.debug("Cache SET: %s", key)

    def invalidate(self, name: str, *args: Any, **kwargs: Any) -> bool:
        """Drop the entries for a query name and args in every scope.

        Returns True if any entry existed.
        """
        keys = self._keys_by_query.pop(query_key(name, *args, **kwargs), set())
        dropped = False
        for key in keys:
            for entity_keys in self._keys_by_entity.values():
                entity_keys.discard(key)
            if self._entries.pop(key, _MISSING) is not _MISSING:
                dropped = True
        if dropped:
            logger.debug("Cache INVALIDATE: %s (%s keys)", name, len(keys))
        return dropped

    def invalidate_entities(self, entity_types: Iterable[EntityType]) -> int:
        """Drop every entry whose query reads any of entity_types."""
        types = list(entity_types)
        dropped = 0
        for entity_type in types:
            for key in self._keys_by_entity.pop(entity_type, set()):
                if key in self._entries:
                    del self._entries[key]
                    dropped += 1
        if dropped:
            logger.debug("Cache INVALIDATE: %s (%s keys)", sorted(t.value for t in types), dropped)
        return dropped

    def clear(self) -> None:
        self._entries.clear()
        self._keys_by_entity.clear()
        self._keys_by_query.clear()


_MISSING = object()
