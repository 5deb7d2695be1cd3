"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill.
All types reference application DTOs only; no infrastructure imports.

Agency-owned repositories (profile, packages, consultations, invoices,
activity, templates) are constructed for exactly one agency and filter every
statement on it. Agency, user and membership repositories take agency_id
explicitly because they are used before a caller context exists.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Protocol

from app.domain.enums import InvoiceStatus, MemberRole, MembershipStatus

if TYPE_CHECKING:
    from app.application.dtos.activity import ActivityEntry, ActivityResult, TemplateResult
    from app.application.dtos.agency import AgencyCreate, AgencyProfileResult, AgencyResult
    from app.application.dtos.consultation import (
        ConsultationDraftResult,
        ConsultationResult,
        ConsultationVersionResult,
    )
    from app.application.dtos.invoice import InvoiceResult
    from app.application.dtos.member import MembershipResult, UserResult
    from app.application.dtos.package import PackageCreate, PackageResult


class IAgencyRepository(Protocol):
    """Protocol for the agency (tenant root) repository."""

    async def get_by_id(self, agency_id: str) -> AgencyResult | None: ...

    async def slug_exists(self, slug: str) -> bool: ...

    async def create_agency(self, data: AgencyCreate, slug: str) -> AgencyResult: ...

    async def update_agency(
        self, agency_id: str, changes: dict[str, Any]
    ) -> AgencyResult | None: ...

    async def schedule_deletion(self, agency_id: str, scheduled_for: datetime) -> bool:
        """Set the schedule only if none is set and the agency is not deleted."""
        ...

    async def cancel_deletion(self, agency_id: str, now: datetime) -> bool:
        """Clear the schedule only while it is still in the future."""
        ...

    async def mark_deleted(self, agency_id: str, now: datetime) -> bool:
        """Mark deleted and cancelled only if the schedule has expired."""
        ...

    async def list_expired(self, now: datetime, limit: int) -> list[AgencyResult]: ...


class IUserRepository(Protocol):
    """Protocol for users (global, not agency-owned)."""

    async def get_by_id(self, user_id: str) -> UserResult | None: ...

    async def set_default_agency_if_unset(self, user_id: str, agency_id: str) -> None: ...

    async def clear_default_agency(self, agency_id: str) -> int: ...

    async def list_consultation_ids(self, user_id: str) -> list[str]: ...


class IMembershipRepository(Protocol):
    """Protocol for agency memberships."""

    async def get_for_user(self, user_id: str, agency_id: str) -> MembershipResult | None: ...

    async def get_by_id(self, membership_id: str, agency_id: str) -> MembershipResult | None: ...

    async def list_by_agency(self, agency_id: str) -> list[MembershipResult]: ...

    async def list_by_user(self, user_id: str) -> list[tuple[MembershipResult, str]]:
        """Memberships of a user with the agency name, across agencies."""
        ...

    async def create_membership(
        self,
        agency_id: str,
        user_id: str,
        role: MemberRole,
        status: MembershipStatus,
        *,
        accepted_at: datetime | None = None,
        display_name: str | None = None,
    ) -> MembershipResult: ...

    async def update_membership(
        self, membership_id: str, agency_id: str, changes: dict[str, Any]
    ) -> MembershipResult | None: ...

    async def suspend_all(self, agency_id: str) -> int: ...


class IAgencyProfileRepository(Protocol):
    async def get(self) -> AgencyProfileResult | None: ...

    async def create_default(self) -> AgencyProfileResult: ...

    async def update_profile(self, changes: dict[str, Any]) -> AgencyProfileResult | None: ...

    async def reserve_invoice_number(self) -> tuple[str, int]:
        """Atomically take next_invoice_number and advance it; returns (prefix, number)."""
        ...


class IPackageRepository(Protocol):
    async def list_packages(self, *, active_only: bool = False) -> list[PackageResult]: ...

    async def get(self, package_id: str) -> PackageResult | None: ...

    async def get_by_slug(self, slug: str) -> PackageResult | None: ...

    async def slug_exists(self, slug: str, *, exclude_id: str | None = None) -> bool: ...

    async def max_display_order(self) -> int:
        """Highest display_order in use, or -1 when there are no packages."""
        ...

    async def create_package(
        self, data: PackageCreate, slug: str, display_order: int
    ) -> PackageResult: ...

    async def update_package(
        self, package_id: str, changes: dict[str, Any]
    ) -> PackageResult | None: ...

    async def set_display_orders(self, ordering: list[tuple[str, int]]) -> None: ...


class IConsultationRepository(Protocol):
    async def get(self, consultation_id: str) -> ConsultationResult | None: ...

    async def list_consultations(
        self,
        *,
        user_id: str | None = None,
        status: str | None = None,
        limit: int | None = 50,
        offset: int = 0,
    ) -> list[ConsultationResult]: ...

    async def create_consultation(
        self, user_id: str, fields: dict[str, Any]
    ) -> ConsultationResult: ...

    async def update_consultation(
        self, consultation_id: str, changes: dict[str, Any]
    ) -> ConsultationResult | None: ...

    async def delete_consultation(self, consultation_id: str) -> bool: ...

    async def get_draft(self, consultation_id: str) -> ConsultationDraftResult | None: ...

    async def upsert_draft(
        self, consultation_id: str, data: dict[str, Any]
    ) -> ConsultationDraftResult: ...

    async def delete_draft(self, consultation_id: str) -> None: ...

    async def list_drafts(self) -> list[ConsultationDraftResult]: ...

    async def create_version(
        self,
        consultation: ConsultationResult,
        *,
        created_by: str,
        change_summary: str | None,
        changed_fields: list[str],
    ) -> ConsultationVersionResult:
        """Insert a snapshot with the next version_number for the consultation."""
        ...

    async def list_versions(
        self, consultation_id: str | None = None
    ) -> list[ConsultationVersionResult]: ...


class IInvoiceRepository(Protocol):
    async def get(self, invoice_id: str) -> InvoiceResult | None: ...

    async def list_invoices(
        self, *, status: InvoiceStatus | None = None, limit: int = 50, offset: int = 0
    ) -> list[InvoiceResult]: ...

    async def create_invoice(self, values: dict[str, Any]) -> InvoiceResult: ...

    async def update_invoice(
        self, invoice_id: str, changes: dict[str, Any]
    ) -> InvoiceResult | None: ...

    async def delete_invoice(self, invoice_id: str) -> bool: ...

    async def clear_payment_links(self) -> int: ...

    async def mark_overdue(self, today: date) -> int: ...


class IActivityLogRepository(Protocol):
    async def log(
        self,
        entry: ActivityEntry,
        *,
        user_id: str | None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> None: ...

    async def list_recent(self, limit: int) -> list[ActivityResult]: ...

    async def strip_personal_data(self) -> int: ...


class ITemplateRepository(Protocol):
    async def list_templates(self) -> list[TemplateResult]: ...
