"""Agency package API schemas. Money is sent and returned as decimal strings."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import CancellationFeeType, PricingModel

MONEY_PATTERN = r"^\d+(\.\d{1,2})?$"
SLUG_PATTERN = r"^[a-z0-9]+(-[a-z0-9]+)*$"


class PackageCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    pricing_model: PricingModel
    slug: str | None = Field(default=None, max_length=50, pattern=SLUG_PATTERN)
    description: str | None = None
    setup_fee: str = Field(default="0.00", pattern=MONEY_PATTERN)
    monthly_price: str = Field(default="0.00", pattern=MONEY_PATTERN)
    one_time_price: str = Field(default="0.00", pattern=MONEY_PATTERN)
    hosting_fee: str = Field(default="0.00", pattern=MONEY_PATTERN)
    minimum_term_months: int = Field(default=12, ge=0, le=120)
    cancellation_fee_type: CancellationFeeType | None = CancellationFeeType.NONE
    cancellation_fee_amount: str = Field(default="0.00", pattern=MONEY_PATTERN)
    included_features: list[Any] = Field(default_factory=list)
    max_pages: int | None = Field(default=None, ge=1)
    display_order: int | None = Field(default=None, ge=0)
    is_featured: bool = False
    is_active: bool = True


class PackageUpdateRequest(BaseModel):
    """Partial update; only fields present in the body are changed."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=50, pattern=SLUG_PATTERN)
    description: str | None = None
    pricing_model: PricingModel | None = None
    setup_fee: str | None = Field(default=None, pattern=MONEY_PATTERN)
    monthly_price: str | None = Field(default=None, pattern=MONEY_PATTERN)
    one_time_price: str | None = Field(default=None, pattern=MONEY_PATTERN)
    hosting_fee: str | None = Field(default=None, pattern=MONEY_PATTERN)
    minimum_term_months: int | None = Field(default=None, ge=0, le=120)
    cancellation_fee_type: CancellationFeeType | None = None
    cancellation_fee_amount: str | None = Field(default=None, pattern=MONEY_PATTERN)
    included_features: list[Any] | None = None
    max_pages: int | None = Field(default=None, ge=1)
    display_order: int | None = Field(default=None, ge=0)
    is_featured: bool | None = None
    is_active: bool | None = None


class PackageReorderRequest(BaseModel):
    package_ids: list[str] = Field(..., min_length=1, description="Package ids in display order")


class PackageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    pricing_model: PricingModel
    description: str | None = None
    setup_fee: str
    monthly_price: str
    one_time_price: str
    hosting_fee: str
    minimum_term_months: int
    cancellation_fee_type: CancellationFeeType | None = None
    cancellation_fee_amount: str
    included_features: list[Any]
    max_pages: int | None = None
    display_order: int
    is_featured: bool
    is_active: bool
