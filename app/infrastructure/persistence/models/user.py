"""User and AgencyMembership ORM models.

Users are global (sign-in is handled by the auth service); a user joins
agencies through memberships, each carrying a role.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import MemberRole, MembershipStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    AgencyScopedModel,
    CuidMixin,
    TimestampMixin,
    status_check,
)


class User(CuidMixin, TimestampMixin, Base):
    """User profile. Table: app_user. id equals the token subject (sub)."""

    __tablename__ = "app_user"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    avatar: Mapped[str | None] = mapped_column(Text, nullable=True)
    default_agency_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("agency.id", ondelete="SET NULL"), nullable=True
    )


class AgencyMembership(AgencyScopedModel, Base):
    """Membership of a user in an agency. Unique (user_id, agency_id)."""

    __tablename__ = "agency_membership"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=MemberRole.MEMBER.value
    )
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=MembershipStatus.ACTIVE.value
    )
    invited_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    invited_by: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    accepted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", "agency_id", name="uq_membership_user_agency"),
        status_check("role", MemberRole.values(), "agency_membership_role_check"),
        status_check("status", MembershipStatus.values(), "agency_membership_status_check"),
    )
