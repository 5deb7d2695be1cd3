"""Agency API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.domain.enums import AgencyStatus, SubscriptionTier

_HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class AgencyCreateRequest(BaseModel):
    """Request body for creating an agency. The caller becomes its owner."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)
    website: str | None = Field(default=None, max_length=500)
    slug: str | None = Field(
        default=None,
        min_length=3,
        max_length=50,
        description="Optional public slug; generated from name when omitted",
    )

    @field_validator("slug", mode="before")
    @classmethod
    def normalize_slug(cls, v: str | None) -> str | None:
        return v.strip().lower() if isinstance(v, str) else v


class AgencyUpdateRequest(BaseModel):
    """Request body for updating agency details and branding (partial)."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)
    website: str | None = Field(default=None, max_length=500)
    logo_url: str | None = Field(default=None, max_length=1000)
    primary_color: str | None = Field(default=None, pattern=_HEX_COLOR)
    secondary_color: str | None = Field(default=None, pattern=_HEX_COLOR)
    accent_color: str | None = Field(default=None, pattern=_HEX_COLOR)


class AgencyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    status: AgencyStatus
    subscription_tier: SubscriptionTier
    email: str | None = None
    phone: str | None = None
    website: str | None = None
    logo_url: str | None = None
    primary_color: str
    secondary_color: str
    accent_color: str
    deletion_scheduled_for: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SlugAvailabilityResponse(BaseModel):
    slug: str
    available: bool
