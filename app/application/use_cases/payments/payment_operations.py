"""Payment links for invoices and the agency's connected payment account.

The provider is reached only through IPaymentProvider, which raises
ExternalProviderException with a generic message on any provider failure.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.application.dtos.payment import (
    PaymentConnectionStatus,
    PaymentLinkResult,
    map_account_status,
)
from app.application.services.activity import record_activity
from app.application.services.authorization_service import require
from app.application.services.query_dispatch import cached_query, invalidate_entities
from app.domain.enums import (
    PAYABLE_INVOICE_STATUSES,
    EntityType,
    StripeAccountStatus,
)
from app.domain.exceptions import (
    ExternalProviderException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects.money import to_minor_units
from app.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from app.application.dtos.caller import CallerContext
    from app.application.dtos.invoice import InvoiceResult
    from app.application.interfaces.repositories import (
        IActivityLogRepository,
        IAgencyProfileRepository,
        IInvoiceRepository,
    )
    from app.application.interfaces.services import IPaymentProvider, IQueryCache

logger = logging.getLogger(__name__)

NOT_CONFIGURED = "not_configured"
_CLEARED_LINK = {"stripe_payment_link_id": None, "stripe_payment_link_url": None}


class PaymentLinkService:
    """Create, read and disable the payment link of an invoice."""

    def __init__(
        self,
        invoice_repo: IInvoiceRepository,
        profile_repo: IAgencyProfileRepository,
        provider: IPaymentProvider,
        public_client_url: str,
        currency: str = "aud",
        activity_repo: IActivityLogRepository | None = None,
        cache: IQueryCache | None = None,
    ) -> None:
        self.invoice_repo = invoice_repo
        self.profile_repo = profile_repo
        self.provider = provider
        self.public_client_url = public_client_url.rstrip("/")
        self.currency = currency
        self.activity_repo = activity_repo
        self.cache = cache

    async def _get_invoice(self, invoice_id: str) -> InvoiceResult:
        invoice = await self.invoice_repo.get(invoice_id)
        if invoice is None:
            raise ResourceNotFoundException("invoice", invoice_id)
        return invoice

    def redirect_url(self, invoice: InvoiceResult) -> str:
        return f"{self.public_client_url}/i/{invoice.slug}?paid=true"

    async def create_link(self, caller: CallerContext, invoice_id: str) -> PaymentLinkResult:
        """Return the invoice's payment link, creating it on first call.

        Raises:
            ValidationException: Invoice is not payable, or no account with charges enabled.
            ExternalProviderException: Provider call failed.
        """
        require(caller.role, "invoice:create_payment_link")
        invoice = await self._get_invoice(invoice_id)
        if invoice.status not in PAYABLE_INVOICE_STATUSES:
            raise ValidationException(
                f"Cannot create payment link for invoice with status: {invoice.status.value}",
                field="status",
            )
        if invoice.stripe_payment_link_url:
            return PaymentLinkResult(
                payment_link_id=invoice.stripe_payment_link_id,
                payment_link_url=invoice.stripe_payment_link_url,
            )

        profile = await self.profile_repo.get()
        if profile is None or not profile.stripe_account_id:
            raise ValidationException("Stripe account not connected")
        if not profile.stripe_charges_enabled:
            raise ValidationException(
                "Stripe charges not enabled. Complete Stripe onboarding first."
            )
        if not self.provider.is_configured:
            raise ValidationException("Payments are not configured")

        metadata = {
            "invoice_id": invoice.id,
            "invoice_number": invoice.invoice_number,
            "agency_id": invoice.agency_id,
        }
        price_id = await self.provider.create_price(
            profile.stripe_account_id,
            amount_minor=to_minor_units(invoice.total),
            currency=self.currency,
            product_name=f"Invoice {invoice.invoice_number}",
        )
        link = await self.provider.create_payment_link(
            profile.stripe_account_id,
            price_id=price_id,
            metadata=metadata,
            redirect_url=self.redirect_url(invoice),
        )
        await self.invoice_repo.update_invoice(
            invoice.id,
            {"stripe_payment_link_id": link.id, "stripe_payment_link_url": link.url},
        )
        invalidate_entities(self.cache, {EntityType.INVOICE})
        await record_activity(
            self.activity_repo,
            caller,
            "invoice.payment_link_created",
            EntityType.INVOICE.value,
            invoice.id,
            new_values={"payment_link_id": link.id},
        )
        logger.info("Payment link %s created for invoice %s", link.id, invoice.id)
        return PaymentLinkResult(payment_link_id=link.id, payment_link_url=link.url)

    @cached_query("payment.link")
    async def get_link(self, caller: CallerContext, invoice_id: str) -> PaymentLinkResult:
        require(caller.role, "invoice:view")
        invoice = await self._get_invoice(invoice_id)
        return PaymentLinkResult(
            payment_link_id=invoice.stripe_payment_link_id,
            payment_link_url=invoice.stripe_payment_link_url,
        )

    async def disable_link(self, caller: CallerContext, invoice_id: str) -> bool:
        """Deactivate and forget the invoice's payment link.

        Provider failures (including an already inactive link) are logged and
        the stored link is cleared regardless.
        """
        require(caller.role, "invoice:cancel")
        invoice = await self._get_invoice(invoice_id)
        if not invoice.stripe_payment_link_id:
            return True
        profile = await self.profile_repo.get()
        account_id = profile.stripe_account_id if profile else None
        if account_id and self.provider.is_configured:
            try:
                await self.provider.deactivate_payment_link(
                    account_id, invoice.stripe_payment_link_id
                )
            except ExternalProviderException:
                logger.warning(
                    "Could not deactivate payment link %s for invoice %s; clearing it locally",
                    invoice.stripe_payment_link_id,
                    invoice.id,
                )
        await self.invoice_repo.update_invoice(invoice.id, dict(_CLEARED_LINK))
        invalidate_entities(self.cache, {EntityType.INVOICE})
        await record_activity(
            self.activity_repo,
            caller,
            "invoice.payment_link_disabled",
            EntityType.INVOICE.value,
            invoice.id,
            old_values={"payment_link_id": invoice.stripe_payment_link_id},
        )
        return True


class StripeConnectionService:
    """Status, refresh and disconnect of the agency's connected account."""

    def __init__(
        self,
        profile_repo: IAgencyProfileRepository,
        invoice_repo: IInvoiceRepository,
        provider: IPaymentProvider,
        activity_repo: IActivityLogRepository | None = None,
        cache: IQueryCache | None = None,
    ) -> None:
        self.profile_repo = profile_repo
        self.invoice_repo = invoice_repo
        self.provider = provider
        self.activity_repo = activity_repo
        self.cache = cache

    @cached_query("payment.connection_status")
    async def get_connection_status(self, caller: CallerContext) -> PaymentConnectionStatus:
        require(caller.role, "stripe:view_status")
        if not self.provider.is_configured:
            return PaymentConnectionStatus(status=NOT_CONFIGURED)
        profile = await self.profile_repo.get()
        if profile is None or not profile.stripe_account_id:
            return PaymentConnectionStatus(status=StripeAccountStatus.NOT_CONNECTED.value)
        return PaymentConnectionStatus(
            status=profile.stripe_account_status.value,
            account_id=profile.stripe_account_id,
            onboarding_complete=profile.stripe_onboarding_complete,
            charges_enabled=profile.stripe_charges_enabled,
            payouts_enabled=profile.stripe_payouts_enabled,
        )

    async def refresh_status(self, caller: CallerContext) -> PaymentConnectionStatus:
        """Pull capability flags from the provider and store the mapped status."""
        require(caller.role, "stripe:view_status")
        profile = await self.profile_repo.get()
        if profile is None or not profile.stripe_account_id:
            raise ValidationException("No Stripe account connected")
        if not self.provider.is_configured:
            raise ValidationException("Payments are not configured")
        try:
            account = await self.provider.retrieve_account(profile.stripe_account_id)
        except ExternalProviderException as e:
            raise ExternalProviderException("Failed to refresh account status") from e
        status = map_account_status(account)
        changes = {
            "stripe_account_status": status.value,
            "stripe_onboarding_complete": account.details_submitted,
            "stripe_charges_enabled": account.charges_enabled,
            "stripe_payouts_enabled": account.payouts_enabled,
        }
        if profile.stripe_connected_at is None and status == StripeAccountStatus.ACTIVE:
            changes["stripe_connected_at"] = utc_now()
        await self.profile_repo.update_profile(changes)
        invalidate_entities(self.cache, {EntityType.PROFILE})
        if status != profile.stripe_account_status:
            logger.info(
                "Stripe account %s for agency %s: %s -> %s",
                profile.stripe_account_id,
                caller.agency_id,
                profile.stripe_account_status.value,
                status.value,
            )
        return PaymentConnectionStatus(
            status=status.value,
            account_id=profile.stripe_account_id,
            onboarding_complete=account.details_submitted,
            charges_enabled=account.charges_enabled,
            payouts_enabled=account.payouts_enabled,
        )

    async def disconnect(self, caller: CallerContext) -> PaymentConnectionStatus:
        """Forget the connected account and every stored payment link.

        The account itself belongs to the agency and is not revoked at the provider.
        """
        require(caller.role, "stripe:disconnect")
        profile = await self.profile_repo.get()
        if profile is None or not profile.stripe_account_id:
            return PaymentConnectionStatus(status=StripeAccountStatus.NOT_CONNECTED.value)
        cleared = await self.invoice_repo.clear_payment_links()
        await self.profile_repo.update_profile(
            {
                "stripe_account_id": None,
                "stripe_account_status": StripeAccountStatus.NOT_CONNECTED.value,
                "stripe_onboarding_complete": False,
                "stripe_charges_enabled": False,
                "stripe_payouts_enabled": False,
                "stripe_connected_at": None,
            }
        )
        invalidate_entities(self.cache, {EntityType.PROFILE, EntityType.INVOICE})
        await record_activity(
            self.activity_repo,
            caller,
            "stripe.disconnected",
            EntityType.PROFILE.value,
            profile.id,
            old_values={"stripe_account_id": profile.stripe_account_id},
            metadata={"payment_links_cleared": cleared},
        )
        return PaymentConnectionStatus(status=StripeAccountStatus.NOT_CONNECTED.value)
