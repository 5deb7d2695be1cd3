"""Agency and AgencyProfile ORM models. Agency is the tenant root (no agency_id)."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    DateTime,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import AgencyStatus, StripeAccountStatus, SubscriptionTier
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    AgencyMixin,
    CuidMixin,
    TimestampMixin,
    status_check,
)


class Agency(CuidMixin, TimestampMixin, Base):
    """Root tenant entity. Table: agency.

    deletion_scheduled_for is set while a GDPR deletion is pending;
    deleted_at is set once the sweep has executed it.
    """

    __tablename__ = "agency"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)

    logo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    primary_color: Mapped[str] = mapped_column(String(7), nullable=False, default="#4F46E5")
    secondary_color: Mapped[str] = mapped_column(String(7), nullable=False, default="#1E40AF")
    accent_color: Mapped[str] = mapped_column(String(7), nullable=False, default="#F59E0B")

    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    website: Mapped[str | None] = mapped_column(String(500), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AgencyStatus.ACTIVE.value, index=True
    )
    subscription_tier: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SubscriptionTier.FREE.value
    )

    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    deletion_scheduled_for: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )

    __table_args__ = (
        status_check("status", AgencyStatus.values(), "agency_status_check"),
        status_check(
            "subscription_tier", SubscriptionTier.values(), "agency_subscription_tier_check"
        ),
    )


class AgencyProfile(CuidMixin, AgencyMixin, TimestampMixin, Base):
    """Business profile per agency: invoice numbering, GST, Stripe Connect state."""

    __tablename__ = "agency_profile"

    abn: Mapped[str | None] = mapped_column(String(20), nullable=True)
    legal_entity_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    invoice_prefix: Mapped[str] = mapped_column(String(10), nullable=False, default="INV")
    next_invoice_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    default_payment_terms_days: Mapped[int] = mapped_column(Integer, nullable=False, default=14)

    gst_registered: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true"), default=True
    )
    gst_rate: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), nullable=False, default=Decimal("10.00")
    )

    stripe_account_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    stripe_account_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=StripeAccountStatus.NOT_CONNECTED.value
    )
    stripe_onboarding_complete: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false"), default=False
    )
    stripe_payouts_enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false"), default=False
    )
    stripe_charges_enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false"), default=False
    )
    stripe_connected_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        UniqueConstraint("agency_id", name="uq_agency_profile_agency"),
        status_check(
            "stripe_account_status",
            StripeAccountStatus.values(),
            "agency_profile_stripe_status_check",
        ),
    )

