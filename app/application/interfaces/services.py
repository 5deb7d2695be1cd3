"""Service interfaces (ports) for the application layer.

Protocols define contracts for infrastructure services: the payment
provider and the per-request query cache.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.payment import ProviderAccount, ProviderPaymentLink
    from app.domain.enums import EntityType


class IPaymentProvider(Protocol):
    """Protocol for the external payment processor (connected accounts).

    Implementations raise ExternalProviderException on provider failures;
    the provider's own error text must not be placed in the exception.
    """

    @property
    def is_configured(self) -> bool: ...

    async def retrieve_account(self, account_id: str) -> ProviderAccount: ...

    async def create_price(
        self, account_id: str, *, amount_minor: int, currency: str, product_name: str
    ) -> str:
        """Create a one-off price on the connected account; returns the price id."""
        ...

    async def create_payment_link(
        self,
        account_id: str,
        *,
        price_id: str,
        metadata: dict[str, str],
        redirect_url: str,
    ) -> ProviderPaymentLink: ...

    async def deactivate_payment_link(self, account_id: str, link_id: str) -> None: ...


class IQueryCache(Protocol):
    """Protocol for the read-through query cache (one instance per request)."""

    def lookup(
        self,
        name: str,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        scope: tuple[Any, ...] = (),
    ) -> tuple[bool, Any]:
        """Return (hit, value). Cached values may be None, hence the flag."""
        ...

    def store(
        self,
        name: str,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        value: Any,
        reads: Iterable[EntityType],
        scope: tuple[Any, ...] = (),
    ) -> None: ...

    def invalidate(self, name: str, *args: Any, **kwargs: Any) -> bool:
        """Drop a query by name and args for every caller scope."""
        ...

    def invalidate_entities(self, entity_types: Iterable[EntityType]) -> int: ...
