"""Payment provider adapters. Implementations satisfy IPaymentProvider."""

from app.infrastructure.external.payments.stripe_provider import StripePaymentProvider

__all__ = ["StripePaymentProvider"]
