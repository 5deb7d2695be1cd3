"""Payment (Stripe Connect) API schemas."""

from pydantic import BaseModel, ConfigDict


class StripeStatusResponse(BaseModel):
    """Connection status; status is not_configured, not_connected or the account status."""

    model_config = ConfigDict(from_attributes=True)

    status: str
    account_id: str | None = None
    onboarding_complete: bool = False
    charges_enabled: bool = False
    payouts_enabled: bool = False


class PaymentLinkResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    payment_link_id: str | None = None
    payment_link_url: str | None = None
    has_payment_link: bool


class PaymentLinkDisableResponse(BaseModel):
    success: bool
