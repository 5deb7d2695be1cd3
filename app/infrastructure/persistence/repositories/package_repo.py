"""Agency package repository. Returns application DTOs. Agency-scoped."""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.package import PackageCreate, PackageResult
from app.domain.enums import CancellationFeeType, PricingModel
from app.domain.exceptions import ConflictException
from app.domain.value_objects.money import to_decimal, to_money_str
from app.infrastructure.persistence.models.package import AgencyPackage
from app.infrastructure.persistence.repositories.base import AgencyScopedRepository

_MONEY_COLUMNS = (
    "setup_fee",
    "monthly_price",
    "one_time_price",
    "hosting_fee",
    "cancellation_fee_amount",
)


def _package_to_result(p: AgencyPackage) -> PackageResult:
    """Map ORM AgencyPackage to PackageResult; money as two-place strings."""
    return PackageResult(
        id=p.id,
        agency_id=p.agency_id,
        name=p.name,
        slug=p.slug,
        pricing_model=PricingModel(p.pricing_model),
        description=p.description,
        setup_fee=to_money_str(p.setup_fee),
        monthly_price=to_money_str(p.monthly_price),
        one_time_price=to_money_str(p.one_time_price),
        hosting_fee=to_money_str(p.hosting_fee),
        minimum_term_months=p.minimum_term_months,
        cancellation_fee_type=(
            CancellationFeeType(p.cancellation_fee_type) if p.cancellation_fee_type else None
        ),
        cancellation_fee_amount=to_money_str(p.cancellation_fee_amount),
        included_features=list(p.included_features or []),
        max_pages=p.max_pages,
        display_order=p.display_order,
        is_featured=p.is_featured,
        is_active=p.is_active,
    )


def _column_values(changes: dict[str, Any]) -> dict[str, Any]:
    """Money strings to Decimal, enums to their stored value."""
    values = dict(changes)
    for name in _MONEY_COLUMNS:
        if values.get(name) is not None:
            values[name] = to_decimal(values[name])
    for name in ("pricing_model", "cancellation_fee_type"):
        if isinstance(values.get(name), (PricingModel, CancellationFeeType)):
            values[name] = values[name].value
    return values


class PackageRepository(AgencyScopedRepository[AgencyPackage]):
    """Service packages of one agency. Unique (agency_id, slug)."""

    def __init__(self, db: AsyncSession, agency_id: str) -> None:
        super().__init__(db, AgencyPackage, agency_id)

    async def list_packages(self, *, active_only: bool = False) -> list[PackageResult]:
        stmt = self._scoped()
        if active_only:
            stmt = stmt.where(AgencyPackage.is_active.is_(True))
        result = await self.db.execute(
            stmt.order_by(AgencyPackage.display_order.asc(), AgencyPackage.name.asc())
        )
        return [_package_to_result(p) for p in result.scalars().all()]

    async def get(self, package_id: str) -> PackageResult | None:
        row = await self.get_by_id(package_id)
        return _package_to_result(row) if row else None

    async def get_by_slug(self, slug: str) -> PackageResult | None:
        result = await self.db.execute(self._scoped().where(AgencyPackage.slug == slug))
        row = result.scalar_one_or_none()
        return _package_to_result(row) if row else None

    async def slug_exists(self, slug: str, *, exclude_id: str | None = None) -> bool:
        stmt = select(AgencyPackage.id).where(
            AgencyPackage.agency_id == self.agency_id, AgencyPackage.slug == slug
        )
        if exclude_id is not None:
            stmt = stmt.where(AgencyPackage.id != exclude_id)
        result = await self.db.execute(stmt)
        return result.first() is not None

    async def max_display_order(self) -> int:
        result = await self.db.execute(
            select(func.max(AgencyPackage.display_order)).where(
                AgencyPackage.agency_id == self.agency_id
            )
        )
        value = result.scalar()
        return -1 if value is None else value

    async def create_package(
        self, data: PackageCreate, slug: str, display_order: int
    ) -> PackageResult:
        values = _column_values(
            {
                "name": data.name,
                "description": data.description,
                "pricing_model": data.pricing_model,
                "setup_fee": data.setup_fee,
                "monthly_price": data.monthly_price,
                "one_time_price": data.one_time_price,
                "hosting_fee": data.hosting_fee,
                "minimum_term_months": data.minimum_term_months,
                "cancellation_fee_type": data.cancellation_fee_type,
                "cancellation_fee_amount": data.cancellation_fee_amount,
                "included_features": list(data.included_features),
                "max_pages": data.max_pages,
                "is_featured": data.is_featured,
                "is_active": data.is_active,
            }
        )
        package = AgencyPackage(
            agency_id=self.agency_id, slug=slug, display_order=display_order, **values
        )
        try:
            created = await self.create(package)
        except IntegrityError as e:
            raise ConflictException("Package slug already in use", slug=slug) from e
        return _package_to_result(created)

    async def update_package(
        self, package_id: str, changes: dict[str, Any]
    ) -> PackageResult | None:
        row = await self.get_by_id(package_id)
        if row is None:
            return None
        self._apply(row, _column_values(changes))
        try:
            updated = await self.update(row)
        except IntegrityError as e:
            raise ConflictException("Package slug already in use", slug=changes.get("slug")) from e
        return _package_to_result(updated)

    async def set_display_orders(self, ordering: list[tuple[str, int]]) -> None:
        for package_id, display_order in ordering:
            await self.db.execute(
                update(AgencyPackage)
                .where(
                    AgencyPackage.id == package_id,
                    AgencyPackage.agency_id == self.agency_id,
                )
                .values(display_order=display_order)
                .execution_options(synchronize_session="fetch")
            )
