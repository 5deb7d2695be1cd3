"""Agency and agency profile repositories. Return application DTOs.

Deletion lifecycle writes are compare-and-set UPDATEs: each returns True only
when the guarding WHERE clause matched, so concurrent requests cannot both
apply a transition.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.agency import AgencyCreate, AgencyProfileResult, AgencyResult
from app.domain.enums import AgencyStatus, StripeAccountStatus, SubscriptionTier
from app.domain.exceptions import ConflictException
from app.infrastructure.persistence.models.agency import Agency, AgencyProfile
from app.infrastructure.persistence.repositories.base import (
    AgencyScopedRepository,
    BaseRepository,
)
from app.shared.utils.datetime import ensure_utc


def _agency_to_result(a: Agency) -> AgencyResult:
    """Map ORM Agency to application AgencyResult."""
    return AgencyResult(
        id=a.id,
        name=a.name,
        slug=a.slug,
        status=AgencyStatus(a.status),
        subscription_tier=SubscriptionTier(a.subscription_tier),
        email=a.email,
        phone=a.phone,
        website=a.website,
        logo_url=a.logo_url,
        primary_color=a.primary_color,
        secondary_color=a.secondary_color,
        accent_color=a.accent_color,
        deletion_scheduled_for=ensure_utc(a.deletion_scheduled_for),
        deleted_at=ensure_utc(a.deleted_at),
        created_at=ensure_utc(a.created_at),
        updated_at=ensure_utc(a.updated_at),
    )


def _profile_to_result(p: AgencyProfile) -> AgencyProfileResult:
    return AgencyProfileResult(
        id=p.id,
        agency_id=p.agency_id,
        invoice_prefix=p.invoice_prefix,
        next_invoice_number=p.next_invoice_number,
        default_payment_terms_days=p.default_payment_terms_days,
        gst_registered=p.gst_registered,
        gst_rate=Decimal(p.gst_rate),
        stripe_account_id=p.stripe_account_id,
        stripe_account_status=StripeAccountStatus(p.stripe_account_status),
        stripe_onboarding_complete=p.stripe_onboarding_complete,
        stripe_charges_enabled=p.stripe_charges_enabled,
        stripe_payouts_enabled=p.stripe_payouts_enabled,
        stripe_connected_at=ensure_utc(p.stripe_connected_at),
    )


class AgencyRepository(BaseRepository[Agency]):
    """Agency (tenant root) repository. Not agency-scoped: the agency is the scope."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Agency)

    async def get_by_id(self, agency_id: str) -> AgencyResult | None:
        agency = await super().get_by_id(agency_id)
        return _agency_to_result(agency) if agency else None

    async def slug_exists(self, slug: str) -> bool:
        result = await self.db.execute(select(Agency.id).where(Agency.slug == slug))
        return result.first() is not None

    async def create_agency(self, data: AgencyCreate, slug: str) -> AgencyResult:
        """Insert an agency; a concurrent insert of the same slug raises ConflictException."""
        agency = Agency(
            name=data.name,
            slug=slug,
            email=data.email,
            phone=data.phone,
            website=data.website,
            status=AgencyStatus.ACTIVE.value,
            subscription_tier=SubscriptionTier.FREE.value,
        )
        try:
            created = await self.create(agency)
        except IntegrityError as e:
            raise ConflictException("Agency slug already taken", slug=slug) from e
        return _agency_to_result(created)

    async def update_agency(
        self, agency_id: str, changes: dict[str, Any]
    ) -> AgencyResult | None:
        agency = await super().get_by_id(agency_id)
        if agency is None:
            return None
        self._apply(agency, changes)
        updated = await self.update(agency)
        return _agency_to_result(updated)

    async def schedule_deletion(self, agency_id: str, scheduled_for: datetime) -> bool:
        result = await self.db.execute(
            update(Agency)
            .where(
                Agency.id == agency_id,
                Agency.deletion_scheduled_for.is_(None),
                Agency.deleted_at.is_(None),
            )
            .values(deletion_scheduled_for=scheduled_for)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount == 1

    async def cancel_deletion(self, agency_id: str, now: datetime) -> bool:
        result = await self.db.execute(
            update(Agency)
            .where(
                Agency.id == agency_id,
                Agency.deletion_scheduled_for > now,
                Agency.deleted_at.is_(None),
            )
            .values(deletion_scheduled_for=None)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount == 1

    async def mark_deleted(self, agency_id: str, now: datetime) -> bool:
        result = await self.db.execute(
            update(Agency)
            .where(
                Agency.id == agency_id,
                Agency.deletion_scheduled_for <= now,
                Agency.deleted_at.is_(None),
            )
            .values(deleted_at=now, status=AgencyStatus.CANCELLED.value)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount == 1

    async def list_expired(self, now: datetime, limit: int) -> list[AgencyResult]:
        """Agencies whose grace period has elapsed and which are not yet deleted, oldest first."""
        result = await self.db.execute(
            select(Agency)
            .where(
                Agency.deletion_scheduled_for.is_not(None),
                Agency.deletion_scheduled_for <= now,
                Agency.deleted_at.is_(None),
            )
            .order_by(Agency.deletion_scheduled_for.asc())
            .limit(limit)
        )
        return [_agency_to_result(a) for a in result.scalars().all()]


class AgencyProfileRepository(AgencyScopedRepository[AgencyProfile]):
    """The single business profile of one agency."""

    def __init__(self, db: AsyncSession, agency_id: str) -> None:
        super().__init__(db, AgencyProfile, agency_id)

    async def _get_row(self) -> AgencyProfile | None:
        result = await self.db.execute(self._scoped())
        return result.scalar_one_or_none()

    async def get(self) -> AgencyProfileResult | None:
        row = await self._get_row()
        return _profile_to_result(row) if row else None

    async def create_default(self) -> AgencyProfileResult:
        created = await self.create(AgencyProfile(agency_id=self.agency_id))
        return _profile_to_result(created)

    async def update_profile(self, changes: dict[str, Any]) -> AgencyProfileResult | None:
        row = await self._get_row()
        if row is None:
            return None
        self._apply(row, changes)
        updated = await self.update(row)
        return _profile_to_result(updated)

    async def reserve_invoice_number(self) -> tuple[str, int]:
        """Take next_invoice_number and advance it in one UPDATE ... RETURNING.

        The row lock held until commit serializes concurrent invoice creation.
        Creates the default profile first when the agency has none.
        """
        stmt = (
            update(AgencyProfile)
            .where(AgencyProfile.agency_id == self.agency_id)
            .values(next_invoice_number=AgencyProfile.next_invoice_number + 1)
            .returning(AgencyProfile.invoice_prefix, AgencyProfile.next_invoice_number)
            .execution_options(synchronize_session=False)
        )
        row = (await self.db.execute(stmt)).first()
        if row is None:
            await self.create_default()
            row = (await self.db.execute(stmt)).first()
            if row is None:
                raise ConflictException("Agency profile is missing", agency_id=self.agency_id)
        prefix, next_after = row
        return prefix, next_after - 1
