"""Stripe Connect payment provider.

Uses the stripe SDK (sync) via asyncio.to_thread. Every call is made on
behalf of the agency's connected account (stripe_account=...) with the
platform secret key passed per request, so no global SDK state is touched.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import stripe

from app.application.dtos.payment import ProviderAccount, ProviderPaymentLink
from app.domain.exceptions import ExternalProviderException
from app.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)


def _field(obj: Any, name: str, default: Any = None) -> Any:
    """Read a field of a Stripe object that may be absent."""
    value = getattr(obj, name, default)
    return default if value is None else value


class StripePaymentProvider:
    """IPaymentProvider backed by Stripe Connect."""

    def __init__(self, secret_key: str | None) -> None:
        self._secret_key = secret_key or None

    @property
    def is_configured(self) -> bool:
        return self._secret_key is not None

    async def _call(self, operation: str, func: Any, *args: Any, **kwargs: Any) -> Any:
        """Run a blocking SDK call in a thread; map SDK errors to ExternalProviderException."""
        if self._secret_key is None:
            raise ExternalProviderException("Payment provider is not configured")
        try:
            return await asyncio.to_thread(func, *args, api_key=self._secret_key, **kwargs)
        except stripe.StripeError as e:
            logger.error(
                "Stripe %s failed: %s (code=%s, request_id=%s)",
                operation,
                e.user_message or str(e),
                e.code,
                e.request_id,
            )
            raise ExternalProviderException() from e

    @traced("stripe.account.retrieve")
    async def retrieve_account(self, account_id: str) -> ProviderAccount:
        account = await self._call("account.retrieve", stripe.Account.retrieve, account_id)
        requirements = _field(account, "requirements")
        return ProviderAccount(
            id=account.id,
            charges_enabled=bool(_field(account, "charges_enabled", False)),
            payouts_enabled=bool(_field(account, "payouts_enabled", False)),
            details_submitted=bool(_field(account, "details_submitted", False)),
            disabled_reason=_field(requirements, "disabled_reason"),
            currently_due=list(_field(requirements, "currently_due", [])),
        )

    @traced("stripe.price.create")
    async def create_price(
        self, account_id: str, *, amount_minor: int, currency: str, product_name: str
    ) -> str:
        price = await self._call(
            "price.create",
            stripe.Price.create,
            currency=currency,
            unit_amount=amount_minor,
            product_data={"name": product_name},
            stripe_account=account_id,
        )
        return price.id

    @traced("stripe.payment_link.create")
    async def create_payment_link(
        self,
        account_id: str,
        *,
        price_id: str,
        metadata: dict[str, str],
        redirect_url: str,
    ) -> ProviderPaymentLink:
        link = await self._call(
            "payment_link.create",
            stripe.PaymentLink.create,
            line_items=[{"price": price_id, "quantity": 1}],
            metadata=metadata,
            after_completion={"type": "redirect", "redirect": {"url": redirect_url}},
            stripe_account=account_id,
        )
        return ProviderPaymentLink(id=link.id, url=link.url)

    @traced("stripe.payment_link.deactivate")
    async def deactivate_payment_link(self, account_id: str, link_id: str) -> None:
        await self._call(
            "payment_link.deactivate",
            stripe.PaymentLink.modify,
            link_id,
            active=False,
            stripe_account=account_id,
        )
