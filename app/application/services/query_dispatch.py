"""Query/command dispatch: declared query dependencies and the read-through decorator.

Every cached query is declared in QUERY_DEPENDENCIES with the entity types it
reads. Commands call invalidate_entities() with the types they write, which
drops every cached query reading any of them, so a query issued after a
successful command in the same request always sees the change.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from functools import wraps
from typing import TYPE_CHECKING, Any, TypeVar

from app.domain.enums import EntityType

if TYPE_CHECKING:
    from app.application.dtos.caller import CallerContext
    from app.application.interfaces.services import IQueryCache

T = TypeVar("T")

QUERY_DEPENDENCIES: dict[str, frozenset[EntityType]] = {
    "agency.current": frozenset({EntityType.AGENCY}),
    "agency.deletion_status": frozenset({EntityType.AGENCY}),
    "member.list": frozenset({EntityType.MEMBERSHIP}),
    "package.list": frozenset({EntityType.PACKAGE}),
    "package.get": frozenset({EntityType.PACKAGE}),
    "consultation.list": frozenset({EntityType.CONSULTATION}),
    "consultation.get": frozenset({EntityType.CONSULTATION}),
    "consultation.versions": frozenset({EntityType.CONSULTATION}),
    "invoice.list": frozenset({EntityType.INVOICE}),
    "invoice.get": frozenset({EntityType.INVOICE}),
    "payment.link": frozenset({EntityType.INVOICE}),
    "payment.connection_status": frozenset({EntityType.PROFILE}),
}


def cached_query(
    name: str,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator for service query methods with signature (self, caller, *args, **kwargs).

    Reads through self.cache when the service has one; without a cache the
    method is called directly, as it is when an argument cannot form a key.
    The caller's agency, user and role are part of the key.

    Raises:
        KeyError: At decoration time if name is not declared in QUERY_DEPENDENCIES.
    """
    if name not in QUERY_DEPENDENCIES:
        raise KeyError(f"Query {name!r} is not declared in QUERY_DEPENDENCIES")
    reads = QUERY_DEPENDENCIES[name]

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(self: Any, caller: CallerContext, *args: Any, **kwargs: Any) -> T:
            cache: IQueryCache | None = getattr(self, "cache", None)
            if cache is None:
                return await func(self, caller, *args, **kwargs)
            scope = (caller.agency_id, caller.user_id, caller.role)
            try:
                hit, value = cache.lookup(name, args, kwargs, scope)
            except ValueError:
                # Argument cannot form a key (contains the separator); read uncached.
                return await func(self, caller, *args, **kwargs)
            if hit:
                return value
            result = await func(self, caller, *args, **kwargs)
            cache.store(name, args, kwargs, result, reads, scope)
            return result

        return wrapper

    return decorator


def invalidate_entities(cache: IQueryCache | None, entity_types: Iterable[EntityType]) -> int:
    """Drop cached queries reading any of entity_types. No-op without a cache."""
    if cache is None:
        return 0
    return cache.invalidate_entities(entity_types)


def queries_reading(entity_type: EntityType) -> list[str]:
    """Names of declared queries that read entity_type (sorted)."""
    return sorted(name for name, reads in QUERY_DEPENDENCIES.items() if entity_type in reads)
