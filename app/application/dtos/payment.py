"""DTOs for the payment provider adapter (provider-neutral)."""

from dataclasses import dataclass, field

from app.domain.enums import StripeAccountStatus


@dataclass(frozen=True)
class ProviderAccount:
    """Capability flags of a connected payment account."""

    id: str
    charges_enabled: bool
    payouts_enabled: bool
    details_submitted: bool
    disabled_reason: str | None = None
    currently_due: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ProviderPaymentLink:
    id: str
    url: str


@dataclass(frozen=True)
class PaymentLinkResult:
    payment_link_id: str | None
    payment_link_url: str | None

    @property
    def has_payment_link(self) -> bool:
        return bool(self.payment_link_url)


@dataclass(frozen=True)
class PaymentConnectionStatus:
    """Connection status shown on the settings page.

    status is "not_configured" when no provider key is set, otherwise a
    StripeAccountStatus value.
    """

    status: str
    account_id: str | None = None
    onboarding_complete: bool = False
    charges_enabled: bool = False
    payouts_enabled: bool = False


def map_account_status(account: ProviderAccount) -> StripeAccountStatus:
    """Reduce provider capability flags to the local status.

    Starts from active and downgrades on an explicit disabled reason, then on
    any outstanding requirement. Pending is only the state before the first
    refresh.
    """
    if account.charges_enabled:
        return StripeAccountStatus.ACTIVE
    if account.disabled_reason:
        return StripeAccountStatus.DISABLED
    if account.currently_due:
        return StripeAccountStatus.RESTRICTED
    return StripeAccountStatus.ACTIVE
