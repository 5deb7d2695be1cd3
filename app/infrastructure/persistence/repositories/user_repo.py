"""User and membership repositories. Interface methods return application DTOs.

Users are global; memberships take agency_id explicitly because the caller
context is built from them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.member import MembershipResult, UserResult
from app.domain.enums import MemberRole, MembershipStatus
from app.domain.exceptions import ConflictException
from app.infrastructure.persistence.models.agency import Agency
from app.infrastructure.persistence.models.consultation import Consultation
from app.infrastructure.persistence.models.user import AgencyMembership, User
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc


def _user_to_result(u: User) -> UserResult:
    """Map ORM User to application UserResult."""
    return UserResult(
        id=u.id,
        email=u.email,
        phone=u.phone,
        avatar=u.avatar,
        default_agency_id=u.default_agency_id,
        created_at=ensure_utc(u.created_at),
        updated_at=ensure_utc(u.updated_at),
    )


def _membership_to_result(m: AgencyMembership, email: str | None = None) -> MembershipResult:
    return MembershipResult(
        id=m.id,
        agency_id=m.agency_id,
        user_id=m.user_id,
        role=MemberRole(m.role),
        status=MembershipStatus(m.status),
        display_name=m.display_name,
        email=email,
        invited_at=ensure_utc(m.invited_at),
        accepted_at=ensure_utc(m.accepted_at),
    )


class UserRepository(BaseRepository[User]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_by_id(self, user_id: str) -> UserResult | None:
        user = await super().get_by_id(user_id)
        return _user_to_result(user) if user else None

    async def set_default_agency_if_unset(self, user_id: str, agency_id: str) -> None:
        await self.db.execute(
            update(User)
            .where(User.id == user_id, User.default_agency_id.is_(None))
            .values(default_agency_id=agency_id)
            .execution_options(synchronize_session="fetch")
        )

    async def clear_default_agency(self, agency_id: str) -> int:
        """Null default_agency_id for every user pointing at agency_id; returns the count."""
        result = await self.db.execute(
            update(User)
            .where(User.default_agency_id == agency_id)
            .values(default_agency_id=None)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    async def list_consultation_ids(self, user_id: str) -> list[str]:
        """Ids of consultations the user owns, across agencies."""
        result = await self.db.execute(
            select(Consultation.id)
            .where(Consultation.user_id == user_id)
            .order_by(Consultation.created_at.asc())
        )
        return list(result.scalars().all())


class MembershipRepository(BaseRepository[AgencyMembership]):
    """Memberships. Every lookup by id also filters on agency_id."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, AgencyMembership)

    async def _get_row(self, membership_id: str, agency_id: str) -> AgencyMembership | None:
        result = await self.db.execute(
            select(AgencyMembership).where(
                AgencyMembership.id == membership_id,
                AgencyMembership.agency_id == agency_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_for_user(self, user_id: str, agency_id: str) -> MembershipResult | None:
        result = await self.db.execute(
            select(AgencyMembership).where(
                AgencyMembership.user_id == user_id,
                AgencyMembership.agency_id == agency_id,
            )
        )
        row = result.scalar_one_or_none()
        return _membership_to_result(row) if row else None

    async def get_by_id(self, membership_id: str, agency_id: str) -> MembershipResult | None:
        row = await self._get_row(membership_id, agency_id)
        return _membership_to_result(row) if row else None

    async def list_by_agency(self, agency_id: str) -> list[MembershipResult]:
        """Members with their email, owners first, then by join date."""
        result = await self.db.execute(
            select(AgencyMembership, User.email)
            .join(User, User.id == AgencyMembership.user_id)
            .where(AgencyMembership.agency_id == agency_id)
            .order_by(AgencyMembership.created_at.asc())
        )
        members = [_membership_to_result(m, email) for m, email in result.all()]
        members.sort(key=lambda m: m.role != MemberRole.OWNER)
        return members

    async def list_by_user(self, user_id: str) -> list[tuple[MembershipResult, str]]:
        result = await self.db.execute(
            select(AgencyMembership, Agency.name)
            .join(Agency, Agency.id == AgencyMembership.agency_id)
            .where(AgencyMembership.user_id == user_id)
            .order_by(AgencyMembership.created_at.asc())
        )
        return [(_membership_to_result(m), name) for m, name in result.all()]

    async def create_membership(
        self,
        agency_id: str,
        user_id: str,
        role: MemberRole,
        status: MembershipStatus,
        *,
        accepted_at: datetime | None = None,
        display_name: str | None = None,
    ) -> MembershipResult:
        """Insert a membership; raise ConflictException if the user already belongs to the agency."""
        membership = AgencyMembership(
            agency_id=agency_id,
            user_id=user_id,
            role=role.value,
            status=status.value,
            accepted_at=accepted_at,
            display_name=display_name,
        )
        try:
            created = await self.create(membership)
        except IntegrityError as e:
            raise ConflictException(
                "User is already a member of this agency", user_id=user_id
            ) from e
        return _membership_to_result(created)

    async def update_membership(
        self, membership_id: str, agency_id: str, changes: dict[str, Any]
    ) -> MembershipResult | None:
        row = await self._get_row(membership_id, agency_id)
        if row is None:
            return None
        self._apply(row, changes)
        updated = await self.update(row)
        return _membership_to_result(updated)

    async def suspend_all(self, agency_id: str) -> int:
        result = await self.db.execute(
            update(AgencyMembership)
            .where(
                AgencyMembership.agency_id == agency_id,
                AgencyMembership.status != MembershipStatus.SUSPENDED.value,
            )
            .values(status=MembershipStatus.SUSPENDED.value)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount
