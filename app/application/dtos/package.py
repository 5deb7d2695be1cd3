"""DTOs for agency packages. Money fields are two-place decimal strings."""

from dataclasses import dataclass, field
from typing import Any

from app.domain.enums import CancellationFeeType, PricingModel


@dataclass(frozen=True)
class PackageResult:
    """Package read-model."""

    id: str
    agency_id: str
    name: str
    slug: str
    pricing_model: PricingModel
    description: str | None = None
    setup_fee: str = "0.00"
    monthly_price: str = "0.00"
    one_time_price: str = "0.00"
    hosting_fee: str = "0.00"
    minimum_term_months: int = 12
    cancellation_fee_type: CancellationFeeType | None = None
    cancellation_fee_amount: str = "0.00"
    included_features: list[Any] = field(default_factory=list)
    max_pages: int | None = None
    display_order: int = 0
    is_featured: bool = False
    is_active: bool = True


@dataclass(frozen=True)
class PackageCreate:
    """Input for creating a package; slug defaults to one generated from name."""

    name: str
    pricing_model: PricingModel
    slug: str | None = None
    description: str | None = None
    setup_fee: str = "0.00"
    monthly_price: str = "0.00"
    one_time_price: str = "0.00"
    hosting_fee: str = "0.00"
    minimum_term_months: int = 12
    cancellation_fee_type: CancellationFeeType | None = CancellationFeeType.NONE
    cancellation_fee_amount: str = "0.00"
    included_features: list[Any] = field(default_factory=list)
    max_pages: int | None = None
    display_order: int | None = None
    is_featured: bool = False
    is_active: bool = True
