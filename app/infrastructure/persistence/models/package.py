"""AgencyPackage ORM model: service packages an agency sells."""

from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, Boolean, Integer, Numeric, String, Text, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import PricingModel
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import AgencyScopedModel, status_check


class AgencyPackage(AgencyScopedModel, Base):
    """Service package. Unique (agency_id, slug). is_active=False is a soft delete."""

    __tablename__ = "agency_package"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    pricing_model: Mapped[str] = mapped_column(String(20), nullable=False)
    setup_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    monthly_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    one_time_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    hosting_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))

    minimum_term_months: Mapped[int] = mapped_column(Integer, nullable=False, default=12)
    cancellation_fee_type: Mapped[str | None] = mapped_column(String(30), nullable=True)
    cancellation_fee_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00")
    )

    included_features: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    max_pages: Mapped[int | None] = mapped_column(Integer, nullable=True)

    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_featured: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false"), default=False
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true"), default=True
    )

    __table_args__ = (
        UniqueConstraint("agency_id", "slug", name="uq_agency_package_slug"),
        status_check("pricing_model", PricingModel.values(), "agency_package_pricing_model_check"),
    )

