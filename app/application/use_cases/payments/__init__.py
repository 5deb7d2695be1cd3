"""Payment use cases: invoice payment links and the connected account."""

from app.application.use_cases.payments.payment_operations import (
    PaymentLinkService,
    StripeConnectionService,
)

__all__ = ["PaymentLinkService", "StripeConnectionService"]
