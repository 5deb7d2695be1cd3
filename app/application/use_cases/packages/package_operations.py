"""Package operations: list, get, create, update, soft delete, reorder, duplicate."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Any

from app.application.dtos.package import PackageCreate, PackageResult
from app.application.services.activity import record_activity
from app.application.services.authorization_service import require
from app.application.services.query_dispatch import cached_query, invalidate_entities
from app.domain.enums import CancellationFeeType, EntityType, PricingModel
from app.domain.exceptions import (
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects.money import is_valid_money
from app.domain.value_objects.slug import generate_slug, is_valid_slug, unique_slug

if TYPE_CHECKING:
    from app.application.dtos.caller import CallerContext
    from app.application.interfaces.repositories import (
        IActivityLogRepository,
        IPackageRepository,
    )
    from app.application.interfaces.services import IQueryCache

FALLBACK_SLUG = "package"

MONEY_FIELDS = (
    "setup_fee",
    "monthly_price",
    "one_time_price",
    "hosting_fee",
    "cancellation_fee_amount",
)

UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "slug",
        "description",
        "pricing_model",
        *MONEY_FIELDS,
        "minimum_term_months",
        "cancellation_fee_type",
        "included_features",
        "max_pages",
        "display_order",
        "is_featured",
        "is_active",
    }
)


def _validate_money(values: dict[str, Any]) -> None:
    for name in MONEY_FIELDS:
        value = values.get(name)
        if value is not None and not is_valid_money(str(value)):
            raise ValidationException(
                f"{name} must be a non-negative amount with at most two decimals",
                field=name,
            )


def _validate_slug(slug: str) -> None:
    if not is_valid_slug(slug, allow_reserved=True):
        raise ValidationException(
            "Slug must be 3-50 lowercase letters, digits or hyphens", field="slug"
        )


class PackageService:
    """Service packages of the caller's agency. Every command invalidates PACKAGE queries."""

    def __init__(
        self,
        package_repo: IPackageRepository,
        activity_repo: IActivityLogRepository | None = None,
        cache: IQueryCache | None = None,
    ) -> None:
        self.package_repo = package_repo
        self.activity_repo = activity_repo
        self.cache = cache

    def _changed(self) -> None:
        invalidate_entities(self.cache, {EntityType.PACKAGE})

    async def _free_slug(self, base: str) -> str:
        if len(base) < 3:
            base = f"{base}-{FALLBACK_SLUG}".strip("-")
        return await unique_slug(base, self.package_repo.slug_exists)

    @cached_query("package.list")
    async def list_packages(
        self, caller: CallerContext, *, active_only: bool = False
    ) -> list[PackageResult]:
        """Packages ordered by display_order, then name."""
        require(caller.role, "packages:view")
        return await self.package_repo.list_packages(active_only=active_only)

    async def list_active_packages(self, caller: CallerContext) -> list[PackageResult]:
        return await self.list_packages(caller, active_only=True)

    @cached_query("package.get")
    async def get_package(self, caller: CallerContext, package_id: str) -> PackageResult:
        require(caller.role, "packages:view")
        package = await self.package_repo.get(package_id)
        if package is None:
            raise ResourceNotFoundException("package", package_id)
        return package

    async def _get_for_update(self, package_id: str) -> PackageResult:
        package = await self.package_repo.get(package_id)
        if package is None:
            raise ResourceNotFoundException("package", package_id)
        return package

    async def create_package(self, caller: CallerContext, data: PackageCreate) -> PackageResult:
        require(caller.role, "packages:create")
        name = data.name.strip()
        if not name:
            raise ValidationException("Package name is required", field="name")
        _validate_money(data.__dict__)
        if data.slug:
            _validate_slug(data.slug)
            slug = await self._free_slug(data.slug)
        else:
            slug = await self._free_slug(generate_slug(name))
        display_order = data.display_order
        if display_order is None:
            display_order = await self.package_repo.max_display_order() + 1
        package = await self.package_repo.create_package(
            replace(data, name=name, slug=slug), slug, display_order
        )
        self._changed()
        await record_activity(
            self.activity_repo,
            caller,
            "package.created",
            "agency_package",
            package.id,
            new_values={
                "name": package.name,
                "slug": package.slug,
                "pricing_model": package.pricing_model.value,
            },
        )
        return package

    async def update_package(
        self, caller: CallerContext, package_id: str, changes: dict[str, Any]
    ) -> PackageResult:
        """Apply a partial update. Only keys in UPDATABLE_FIELDS are accepted."""
        require(caller.role, "packages:edit")
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationException(f"Unknown package fields: {', '.join(sorted(unknown))}")
        existing = await self._get_for_update(package_id)
        _validate_money(changes)
        values = dict(changes)
        if "name" in values:
            values["name"] = str(values["name"]).strip()
            if not values["name"]:
                raise ValidationException("Package name is required", field="name")
        if values.get("slug") and values["slug"] != existing.slug:
            _validate_slug(values["slug"])
            if await self.package_repo.slug_exists(values["slug"], exclude_id=package_id):
                raise ConflictException("Slug already in use", slug=values["slug"])
        for key, enum_type in (
            ("pricing_model", PricingModel),
            ("cancellation_fee_type", CancellationFeeType),
        ):
            if values.get(key) is not None:
                try:
                    values[key] = enum_type(values[key]).value
                except ValueError as e:
                    raise ValidationException(str(e), field=key) from e
        if not values:
            return existing
        updated = await self.package_repo.update_package(package_id, values)
        if updated is None:
            raise ResourceNotFoundException("package", package_id)
        self._changed()
        await record_activity(
            self.activity_repo,
            caller,
            "package.updated",
            "agency_package",
            package_id,
            old_values={"name": existing.name},
            new_values=values,
        )
        return updated

    async def delete_package(self, caller: CallerContext, package_id: str) -> None:
        """Soft delete: the package stays referenced by past work but is no longer offered."""
        require(caller.role, "packages:delete")
        existing = await self._get_for_update(package_id)
        await self.package_repo.update_package(package_id, {"is_active": False})
        self._changed()
        await record_activity(
            self.activity_repo,
            caller,
            "package.deleted",
            "agency_package",
            package_id,
            old_values={"name": existing.name, "is_active": existing.is_active},
        )

    async def reorder_packages(self, caller: CallerContext, package_ids: list[str]) -> None:
        """Set display_order to each id's position in package_ids."""
        require(caller.role, "packages:edit")
        if len(set(package_ids)) != len(package_ids):
            raise ValidationException("Package ids must be unique", field="package_ids")
        for package_id in package_ids:
            await self._get_for_update(package_id)
        await self.package_repo.set_display_orders(
            [(package_id, index) for index, package_id in enumerate(package_ids)]
        )
        self._changed()
        await record_activity(
            self.activity_repo,
            caller,
            "packages.reordered",
            "agency_packages",
            new_values={"count": len(package_ids)},
        )

    async def duplicate_package(self, caller: CallerContext, package_id: str) -> PackageResult:
        """Copy a package as "<name> (Copy)"; the copy starts inactive and not featured."""
        require(caller.role, "packages:create")
        source = await self._get_for_update(package_id)
        name = f"{source.name} (Copy)"
        slug = await self._free_slug(generate_slug(name))
        display_order = await self.package_repo.max_display_order() + 1
        data = PackageCreate(
            name=name,
            pricing_model=source.pricing_model,
            slug=slug,
            description=source.description,
            setup_fee=source.setup_fee,
            monthly_price=source.monthly_price,
            one_time_price=source.one_time_price,
            hosting_fee=source.hosting_fee,
            minimum_term_months=source.minimum_term_months,
            cancellation_fee_type=source.cancellation_fee_type,
            cancellation_fee_amount=source.cancellation_fee_amount,
            included_features=list(source.included_features),
            max_pages=source.max_pages,
            display_order=display_order,
            is_featured=False,
            is_active=False,
        )
        package = await self.package_repo.create_package(data, slug, display_order)
        self._changed()
        await record_activity(
            self.activity_repo,
            caller,
            "package.duplicated",
            "agency_package",
            package.id,
            metadata={"source_package_id": package_id},
        )
        return package
