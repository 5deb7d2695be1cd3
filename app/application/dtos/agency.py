"""DTOs for agency, profile and deletion use cases (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from app.domain.entities.agency import AgencyEntity
from app.domain.enums import (
    AgencyStatus,
    DeletionState,
    StripeAccountStatus,
    SubscriptionTier,
)


@dataclass(frozen=True)
class AgencyResult:
    """Agency read-model."""

    id: str
    name: str
    slug: str
    status: AgencyStatus
    subscription_tier: SubscriptionTier
    email: str | None = None
    phone: str | None = None
    website: str | None = None
    logo_url: str | None = None
    primary_color: str = "#4F46E5"
    secondary_color: str = "#1E40AF"
    accent_color: str = "#F59E0B"
    deletion_scheduled_for: datetime | None = None
    deleted_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_entity(self) -> AgencyEntity:
        """Domain entity carrying the lifecycle rules."""
        return AgencyEntity(
            id=self.id,
            name=self.name,
            slug=self.slug,
            status=self.status,
            deletion_scheduled_for=self.deletion_scheduled_for,
            deleted_at=self.deleted_at,
        )


@dataclass(frozen=True)
class AgencyCreate:
    """Input for creating an agency; slug is generated from name when omitted."""

    name: str
    email: str | None = None
    phone: str | None = None
    website: str | None = None
    slug: str | None = None


@dataclass(frozen=True)
class AgencyUpdate:
    """Partial update of agency details and branding. None means unchanged."""

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    website: str | None = None
    logo_url: str | None = None
    primary_color: str | None = None
    secondary_color: str | None = None
    accent_color: str | None = None

    def changes(self) -> dict[str, object]:
        return {k: v for k, v in self.__dict__.items() if v is not None}


@dataclass(frozen=True)
class AgencyProfileResult:
    """Agency business profile (invoice numbering, GST, Stripe state)."""

    id: str
    agency_id: str
    invoice_prefix: str
    next_invoice_number: int
    default_payment_terms_days: int
    gst_registered: bool
    gst_rate: Decimal
    stripe_account_id: str | None
    stripe_account_status: StripeAccountStatus
    stripe_onboarding_complete: bool
    stripe_charges_enabled: bool
    stripe_payouts_enabled: bool
    stripe_connected_at: datetime | None = None


@dataclass(frozen=True)
class DeletionStatusResult:
    """Deletion lifecycle status for the current agency."""

    state: DeletionState
    scheduled_for: datetime | None = None
    days_remaining: int | None = None
    can_cancel: bool = False


@dataclass
class DeletionSweepResult:
    """Outcome of one sweep run over expired agencies."""

    processed: int = 0
    deleted: int = 0
    failed: int = 0
    failed_agency_ids: list[str] = field(default_factory=list)
