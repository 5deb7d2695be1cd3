"""DTOs for users and agency memberships."""

from dataclasses import dataclass
from datetime import datetime

from app.domain.enums import MemberRole, MembershipStatus


@dataclass(frozen=True)
class UserResult:
    """User read-model."""

    id: str
    email: str
    phone: str | None = None
    avatar: str | None = None
    default_agency_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class MembershipResult:
    """Membership read-model; email is joined from the user for listings."""

    id: str
    agency_id: str
    user_id: str
    role: MemberRole
    status: MembershipStatus
    display_name: str | None = None
    email: str | None = None
    invited_at: datetime | None = None
    accepted_at: datetime | None = None
