"""In-memory repositories and payment provider for service and API tests.

One FakeBackend holds every row for every agency; agency-owned repositories
are built per agency and only ever see that agency's rows, like the SQL ones.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from typing import Any

from app.application.dtos.activity import ActivityEntry, ActivityResult, TemplateResult
from app.application.dtos.agency import AgencyCreate, AgencyProfileResult, AgencyResult
from app.application.dtos.caller import CallerContext
from app.application.dtos.consultation import (
    ConsultationDraftResult,
    ConsultationResult,
    ConsultationVersionResult,
)
from app.application.dtos.invoice import InvoiceLineItem, InvoiceResult
from app.application.dtos.member import MembershipResult, UserResult
from app.application.dtos.package import PackageCreate, PackageResult
from app.application.dtos.payment import ProviderAccount, ProviderPaymentLink
from app.domain.enums import (
    AgencyStatus,
    CancellationFeeType,
    ConsultationStatus,
    InvoiceStatus,
    MemberRole,
    MembershipStatus,
    PricingModel,
    StripeAccountStatus,
    SubscriptionTier,
)
from app.domain.exceptions import ExternalProviderException
from app.domain.value_objects.money import to_money_str

AGENCY_ID = "agency-1"
OTHER_AGENCY_ID = "agency-2"
OWNER_ID = "user-owner"
ADMIN_ID = "user-admin"
MEMBER_ID = "user-member"

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def make_caller(
    role: MemberRole = MemberRole.OWNER,
    user_id: str | None = None,
    agency_id: str = AGENCY_ID,
) -> CallerContext:
    default_user = {
        MemberRole.OWNER: OWNER_ID,
        MemberRole.ADMIN: ADMIN_ID,
        MemberRole.MEMBER: MEMBER_ID,
    }[role]
    return CallerContext(
        agency_id=agency_id,
        user_id=user_id or default_user,
        role=role,
        ip_address="203.0.113.7",
        user_agent="pytest",
    )


def _money(value: Any) -> str:
    return to_money_str(Decimal(str(value)))


@dataclass
class FakeBackend:
    """Shared in-memory tables."""

    agencies: dict[str, AgencyResult] = field(default_factory=dict)
    users: dict[str, UserResult] = field(default_factory=dict)
    memberships: dict[str, MembershipResult] = field(default_factory=dict)
    profiles: dict[str, AgencyProfileResult] = field(default_factory=dict)
    packages: dict[str, PackageResult] = field(default_factory=dict)
    consultations: dict[str, ConsultationResult] = field(default_factory=dict)
    drafts: dict[str, ConsultationDraftResult] = field(default_factory=dict)
    versions: list[ConsultationVersionResult] = field(default_factory=list)
    invoices: dict[str, InvoiceResult] = field(default_factory=dict)
    activity: list[dict[str, Any]] = field(default_factory=list)
    templates: dict[str, list[TemplateResult]] = field(default_factory=dict)
    _ids: Any = field(default_factory=lambda: itertools.count(1))

    def next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    # ---- Seeding ----

    def add_agency(
        self,
        agency_id: str = AGENCY_ID,
        name: str = "Acme Studio",
        slug: str = "acme-studio",
        **kwargs: Any,
    ) -> AgencyResult:
        agency = AgencyResult(
            id=agency_id,
            name=name,
            slug=slug,
            status=kwargs.pop("status", AgencyStatus.ACTIVE),
            subscription_tier=kwargs.pop("subscription_tier", SubscriptionTier.FREE),
            created_at=NOW,
            updated_at=NOW,
            **kwargs,
        )
        self.agencies[agency_id] = agency
        return agency

    def add_user(self, user_id: str, email: str | None = None, **kwargs: Any) -> UserResult:
        user = UserResult(id=user_id, email=email or f"{user_id}@example.com", created_at=NOW, **kwargs)
        self.users[user_id] = user
        return user

    def add_member(
        self,
        user_id: str,
        role: MemberRole,
        agency_id: str = AGENCY_ID,
        status: MembershipStatus = MembershipStatus.ACTIVE,
    ) -> MembershipResult:
        if user_id not in self.users:
            self.add_user(user_id)
        membership = MembershipResult(
            id=self.next_id("membership"),
            agency_id=agency_id,
            user_id=user_id,
            role=role,
            status=status,
            email=self.users[user_id].email,
            accepted_at=NOW,
        )
        self.memberships[membership.id] = membership
        return membership

    def add_profile(self, agency_id: str = AGENCY_ID, **kwargs: Any) -> AgencyProfileResult:
        values: dict[str, Any] = {
            "id": self.next_id("profile"),
            "agency_id": agency_id,
            "invoice_prefix": "INV",
            "next_invoice_number": 1,
            "default_payment_terms_days": 14,
            "gst_registered": False,
            "gst_rate": Decimal("10.00"),
            "stripe_account_id": None,
            "stripe_account_status": StripeAccountStatus.NOT_CONNECTED,
            "stripe_onboarding_complete": False,
            "stripe_charges_enabled": False,
            "stripe_payouts_enabled": False,
        }
        values.update(kwargs)
        profile = AgencyProfileResult(**values)
        self.profiles[agency_id] = profile
        return profile

    def add_connected_profile(self, agency_id: str = AGENCY_ID, **kwargs: Any) -> AgencyProfileResult:
        values: dict[str, Any] = {
            "stripe_account_id": "acct_123",
            "stripe_account_status": StripeAccountStatus.ACTIVE,
            "stripe_onboarding_complete": True,
            "stripe_charges_enabled": True,
            "stripe_payouts_enabled": True,
            "stripe_connected_at": NOW,
        }
        values.update(kwargs)
        return self.add_profile(agency_id, **values)

    def add_package(self, agency_id: str = AGENCY_ID, **kwargs: Any) -> PackageResult:
        package_id = self.next_id("package")
        values: dict[str, Any] = {
            "id": package_id,
            "agency_id": agency_id,
            "name": f"Package {package_id}",
            "slug": package_id,
            "pricing_model": PricingModel.SUBSCRIPTION,
        }
        values.update(kwargs)
        package = PackageResult(**values)
        self.packages[package.id] = package
        return package

    def add_consultation(
        self, user_id: str, agency_id: str = AGENCY_ID, **kwargs: Any
    ) -> ConsultationResult:
        values: dict[str, Any] = {
            "id": self.next_id("consultation"),
            "agency_id": agency_id,
            "user_id": user_id,
            "status": ConsultationStatus.DRAFT,
            "created_at": NOW,
            "updated_at": NOW,
        }
        values.update(kwargs)
        consultation = ConsultationResult(**values)
        self.consultations[consultation.id] = consultation
        return consultation

    def add_invoice(
        self,
        agency_id: str = AGENCY_ID,
        status: InvoiceStatus = InvoiceStatus.SENT,
        total: str = "110.00",
        **kwargs: Any,
    ) -> InvoiceResult:
        invoice_id = self.next_id("invoice")
        values: dict[str, Any] = {
            "id": invoice_id,
            "agency_id": agency_id,
            "invoice_number": f"INV-{len(self.invoices) + 1:04d}",
            "slug": f"pub-{invoice_id}",
            "status": status,
            "client_business_name": "Client Co",
            "issue_date": date(2026, 2, 1),
            "due_date": date(2026, 2, 15),
            "subtotal": total,
            "discount_amount": "0.00",
            "gst_amount": "0.00",
            "total": total,
            "line_items": [InvoiceLineItem("Website build", "1", total, total)],
        }
        values.update(kwargs)
        invoice = InvoiceResult(**values)
        self.invoices[invoice.id] = invoice
        return invoice

    def actions(self, agency_id: str = AGENCY_ID) -> list[str]:
        return [row["action"] for row in self.activity if row["agency_id"] == agency_id]

    # ---- Repository factories ----

    def agency_repo(self) -> FakeAgencyRepository:
        return FakeAgencyRepository(self)

    def user_repo(self) -> FakeUserRepository:
        return FakeUserRepository(self)

    def membership_repo(self) -> FakeMembershipRepository:
        return FakeMembershipRepository(self)

    def profile_repo(self, agency_id: str = AGENCY_ID) -> FakeProfileRepository:
        return FakeProfileRepository(self, agency_id)

    def package_repo(self, agency_id: str = AGENCY_ID) -> FakePackageRepository:
        return FakePackageRepository(self, agency_id)

    def consultation_repo(self, agency_id: str = AGENCY_ID) -> FakeConsultationRepository:
        return FakeConsultationRepository(self, agency_id)

    def invoice_repo(self, agency_id: str = AGENCY_ID) -> FakeInvoiceRepository:
        return FakeInvoiceRepository(self, agency_id)

    def activity_repo(self, agency_id: str = AGENCY_ID) -> FakeActivityLogRepository:
        return FakeActivityLogRepository(self, agency_id)

    def template_repo(self, agency_id: str = AGENCY_ID) -> FakeTemplateRepository:
        return FakeTemplateRepository(self, agency_id)


class FakeAgencyRepository:
    def __init__(self, backend: FakeBackend) -> None:
        self.backend = backend
        self.schedule_calls = 0

    async def get_by_id(self, agency_id: str) -> AgencyResult | None:
        return self.backend.agencies.get(agency_id)

    async def slug_exists(self, slug: str) -> bool:
        return any(a.slug == slug for a in self.backend.agencies.values())

    async def create_agency(self, data: AgencyCreate, slug: str) -> AgencyResult:
        agency_id = self.backend.next_id("agency")
        return self.backend.add_agency(
            agency_id,
            name=data.name,
            slug=slug,
            email=data.email,
            phone=data.phone,
            website=data.website,
        )

    async def update_agency(self, agency_id: str, changes: dict[str, Any]) -> AgencyResult | None:
        agency = self.backend.agencies.get(agency_id)
        if agency is None:
            return None
        updated = replace(agency, **changes)
        self.backend.agencies[agency_id] = updated
        return updated

    async def schedule_deletion(self, agency_id: str, scheduled_for: datetime) -> bool:
        self.schedule_calls += 1
        agency = self.backend.agencies.get(agency_id)
        if agency is None or agency.deletion_scheduled_for or agency.deleted_at:
            return False
        self.backend.agencies[agency_id] = replace(agency, deletion_scheduled_for=scheduled_for)
        return True

    async def cancel_deletion(self, agency_id: str, now: datetime) -> bool:
        agency = self.backend.agencies.get(agency_id)
        if (
            agency is None
            or agency.deleted_at
            or agency.deletion_scheduled_for is None
            or agency.deletion_scheduled_for <= now
        ):
            return False
        self.backend.agencies[agency_id] = replace(agency, deletion_scheduled_for=None)
        return True

    async def mark_deleted(self, agency_id: str, now: datetime) -> bool:
        agency = self.backend.agencies.get(agency_id)
        if (
            agency is None
            or agency.deleted_at
            or agency.deletion_scheduled_for is None
            or agency.deletion_scheduled_for > now
        ):
            return False
        self.backend.agencies[agency_id] = replace(
            agency, deleted_at=now, status=AgencyStatus.CANCELLED
        )
        return True

    async def list_expired(self, now: datetime, limit: int) -> list[AgencyResult]:
        expired = [
            a
            for a in self.backend.agencies.values()
            if a.deletion_scheduled_for and a.deletion_scheduled_for <= now and not a.deleted_at
        ]
        return sorted(expired, key=lambda a: a.deletion_scheduled_for)[:limit]


class FakeUserRepository:
    def __init__(self, backend: FakeBackend) -> None:
        self.backend = backend
        self.consultation_ids: dict[str, list[str]] = {}

    async def get_by_id(self, user_id: str) -> UserResult | None:
        return self.backend.users.get(user_id)

    async def set_default_agency_if_unset(self, user_id: str, agency_id: str) -> None:
        user = self.backend.users.get(user_id)
        if user is not None and user.default_agency_id is None:
            self.backend.users[user_id] = replace(user, default_agency_id=agency_id)

    async def clear_default_agency(self, agency_id: str) -> int:
        cleared = 0
        for user_id, user in list(self.backend.users.items()):
            if user.default_agency_id == agency_id:
                self.backend.users[user_id] = replace(user, default_agency_id=None)
                cleared += 1
        return cleared

    async def list_consultation_ids(self, user_id: str) -> list[str]:
        return [c.id for c in self.backend.consultations.values() if c.user_id == user_id]


class FakeMembershipRepository:
    def __init__(self, backend: FakeBackend) -> None:
        self.backend = backend

    async def get_for_user(self, user_id: str, agency_id: str) -> MembershipResult | None:
        for m in self.backend.memberships.values():
            if m.user_id == user_id and m.agency_id == agency_id:
                return m
        return None

    async def get_by_id(self, membership_id: str, agency_id: str) -> MembershipResult | None:
        m = self.backend.memberships.get(membership_id)
        return m if m is not None and m.agency_id == agency_id else None

    async def list_by_agency(self, agency_id: str) -> list[MembershipResult]:
        return [m for m in self.backend.memberships.values() if m.agency_id == agency_id]

    async def list_by_user(self, user_id: str) -> list[tuple[MembershipResult, str]]:
        return [
            (m, self.backend.agencies[m.agency_id].name)
            for m in self.backend.memberships.values()
            if m.user_id == user_id and m.agency_id in self.backend.agencies
        ]

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
        membership = self.backend.add_member(user_id, role, agency_id, status)
        membership = replace(membership, accepted_at=accepted_at, display_name=display_name)
        self.backend.memberships[membership.id] = membership
        return membership

    async def update_membership(
        self, membership_id: str, agency_id: str, changes: dict[str, Any]
    ) -> MembershipResult | None:
        m = await self.get_by_id(membership_id, agency_id)
        if m is None:
            return None
        values = dict(changes)
        if "role" in values:
            values["role"] = MemberRole(values["role"])
        if "status" in values:
            values["status"] = MembershipStatus(values["status"])
        updated = replace(m, **values)
        self.backend.memberships[membership_id] = updated
        return updated

    async def suspend_all(self, agency_id: str) -> int:
        count = 0
        for m in await self.list_by_agency(agency_id):
            self.backend.memberships[m.id] = replace(m, status=MembershipStatus.SUSPENDED)
            count += 1
        return count


class FakeProfileRepository:
    def __init__(self, backend: FakeBackend, agency_id: str) -> None:
        self.backend = backend
        self.agency_id = agency_id

    async def get(self) -> AgencyProfileResult | None:
        return self.backend.profiles.get(self.agency_id)

    async def create_default(self) -> AgencyProfileResult:
        return self.backend.add_profile(self.agency_id)

    async def update_profile(self, changes: dict[str, Any]) -> AgencyProfileResult | None:
        profile = self.backend.profiles.get(self.agency_id)
        if profile is None:
            return None
        values = dict(changes)
        if "stripe_account_status" in values:
            values["stripe_account_status"] = StripeAccountStatus(values["stripe_account_status"])
        updated = replace(profile, **values)
        self.backend.profiles[self.agency_id] = updated
        return updated

    async def reserve_invoice_number(self) -> tuple[str, int]:
        profile = self.backend.profiles.get(self.agency_id) or await self.create_default()
        self.backend.profiles[self.agency_id] = replace(
            profile, next_invoice_number=profile.next_invoice_number + 1
        )
        return profile.invoice_prefix, profile.next_invoice_number


class FakePackageRepository:
    def __init__(self, backend: FakeBackend, agency_id: str) -> None:
        self.backend = backend
        self.agency_id = agency_id

    def _rows(self) -> list[PackageResult]:
        return [p for p in self.backend.packages.values() if p.agency_id == self.agency_id]

    async def list_packages(self, *, active_only: bool = False) -> list[PackageResult]:
        rows = [p for p in self._rows() if p.is_active or not active_only]
        return sorted(rows, key=lambda p: (p.display_order, p.name))

    async def get(self, package_id: str) -> PackageResult | None:
        p = self.backend.packages.get(package_id)
        return p if p is not None and p.agency_id == self.agency_id else None

    async def get_by_slug(self, slug: str) -> PackageResult | None:
        return next((p for p in self._rows() if p.slug == slug), None)

    async def slug_exists(self, slug: str, *, exclude_id: str | None = None) -> bool:
        return any(p.slug == slug and p.id != exclude_id for p in self._rows())

    async def max_display_order(self) -> int:
        return max((p.display_order for p in self._rows()), default=-1)

    async def create_package(
        self, data: PackageCreate, slug: str, display_order: int
    ) -> PackageResult:
        values = {k: v for k, v in data.__dict__.items() if k not in ("slug", "display_order")}
        return self.backend.add_package(
            self.agency_id, slug=slug, display_order=display_order, **values
        )

    async def update_package(self, package_id: str, changes: dict[str, Any]) -> PackageResult | None:
        p = await self.get(package_id)
        if p is None:
            return None
        values = dict(changes)
        if values.get("pricing_model") is not None:
            values["pricing_model"] = PricingModel(values["pricing_model"])
        if values.get("cancellation_fee_type") is not None:
            values["cancellation_fee_type"] = CancellationFeeType(values["cancellation_fee_type"])
        updated = replace(p, **values)
        self.backend.packages[package_id] = updated
        return updated

    async def set_display_orders(self, ordering: list[tuple[str, int]]) -> None:
        for package_id, order in ordering:
            await self.update_package(package_id, {"display_order": order})


class FakeConsultationRepository:
    def __init__(self, backend: FakeBackend, agency_id: str) -> None:
        self.backend = backend
        self.agency_id = agency_id

    async def get(self, consultation_id: str) -> ConsultationResult | None:
        c = self.backend.consultations.get(consultation_id)
        return c if c is not None and c.agency_id == self.agency_id else None

    async def list_consultations(
        self,
        *,
        user_id: str | None = None,
        status: str | None = None,
        limit: int | None = 50,
        offset: int = 0,
    ) -> list[ConsultationResult]:
        rows = [
            c
            for c in self.backend.consultations.values()
            if c.agency_id == self.agency_id
            and (user_id is None or c.user_id == user_id)
            and (status is None or c.status.value == status)
        ]
        rows.sort(key=lambda c: c.updated_at, reverse=True)
        end = None if limit is None else offset + limit
        return rows[offset:end]

    async def create_consultation(self, user_id: str, fields: dict[str, Any]) -> ConsultationResult:
        values = {k: v for k, v in fields.items() if v is not None}
        return self.backend.add_consultation(user_id, self.agency_id, **values)

    async def update_consultation(
        self, consultation_id: str, changes: dict[str, Any]
    ) -> ConsultationResult | None:
        c = await self.get(consultation_id)
        if c is None:
            return None
        values = dict(changes)
        if "status" in values:
            values["status"] = ConsultationStatus(values["status"])
        updated = replace(c, updated_at=c.updated_at + timedelta(minutes=1), **values)
        self.backend.consultations[consultation_id] = updated
        return updated

    async def delete_consultation(self, consultation_id: str) -> bool:
        if await self.get(consultation_id) is None:
            return False
        del self.backend.consultations[consultation_id]
        self.backend.drafts.pop(consultation_id, None)
        return True

    async def get_draft(self, consultation_id: str) -> ConsultationDraftResult | None:
        return self.backend.drafts.get(consultation_id)

    async def upsert_draft(self, consultation_id: str, data: dict[str, Any]) -> ConsultationDraftResult:
        existing = self.backend.drafts.get(consultation_id) or ConsultationDraftResult(
            id=self.backend.next_id("draft"),
            consultation_id=consultation_id,
            contact_info={},
            business_context={},
            pain_points={},
            goals_objectives={},
        )
        draft = replace(existing, **data)
        self.backend.drafts[consultation_id] = draft
        return draft

    async def delete_draft(self, consultation_id: str) -> None:
        self.backend.drafts.pop(consultation_id, None)

    async def list_drafts(self) -> list[ConsultationDraftResult]:
        return [
            d
            for cid, d in self.backend.drafts.items()
            if cid in self.backend.consultations
            and self.backend.consultations[cid].agency_id == self.agency_id
        ]

    async def create_version(
        self,
        consultation: ConsultationResult,
        *,
        created_by: str,
        change_summary: str | None,
        changed_fields: list[str],
    ) -> ConsultationVersionResult:
        number = len(await self.list_versions(consultation.id)) + 1
        version = ConsultationVersionResult(
            id=self.backend.next_id("version"),
            consultation_id=consultation.id,
            version_number=number,
            status=consultation.status,
            snapshot=consultation.snapshot(),
            change_summary=change_summary,
            changed_fields=changed_fields,
            created_at=NOW,
        )
        self.backend.versions.append(version)
        return version

    async def list_versions(
        self, consultation_id: str | None = None
    ) -> list[ConsultationVersionResult]:
        own = {c.id for c in self.backend.consultations.values() if c.agency_id == self.agency_id}
        return [
            v
            for v in self.backend.versions
            if v.consultation_id in own
            and (consultation_id is None or v.consultation_id == consultation_id)
        ]


def _invoice_values(values: dict[str, Any]) -> dict[str, Any]:
    out = dict(values)
    for key in ("subtotal", "discount_amount", "gst_amount", "total"):
        if out.get(key) is not None:
            out[key] = _money(out[key])
    if "line_items" in out:
        out["line_items"] = [
            InvoiceLineItem(**item) if isinstance(item, dict) else item
            for item in out["line_items"]
        ]
    if "status" in out:
        out["status"] = InvoiceStatus(out["status"])
    return out


class FakeInvoiceRepository:
    def __init__(self, backend: FakeBackend, agency_id: str) -> None:
        self.backend = backend
        self.agency_id = agency_id

    def _rows(self) -> list[InvoiceResult]:
        return [i for i in self.backend.invoices.values() if i.agency_id == self.agency_id]

    async def get(self, invoice_id: str) -> InvoiceResult | None:
        i = self.backend.invoices.get(invoice_id)
        return i if i is not None and i.agency_id == self.agency_id else None

    async def list_invoices(
        self, *, status: InvoiceStatus | None = None, limit: int = 50, offset: int = 0
    ) -> list[InvoiceResult]:
        rows = [i for i in self._rows() if status is None or i.status == status]
        return rows[offset : offset + limit]

    async def create_invoice(self, values: dict[str, Any]) -> InvoiceResult:
        invoice = InvoiceResult(
            id=self.backend.next_id("invoice"),
            agency_id=self.agency_id,
            **_invoice_values(values),
        )
        self.backend.invoices[invoice.id] = invoice
        return invoice

    async def update_invoice(self, invoice_id: str, changes: dict[str, Any]) -> InvoiceResult | None:
        i = await self.get(invoice_id)
        if i is None:
            return None
        updated = replace(i, **_invoice_values(changes))
        self.backend.invoices[invoice_id] = updated
        return updated

    async def delete_invoice(self, invoice_id: str) -> bool:
        if await self.get(invoice_id) is None:
            return False
        del self.backend.invoices[invoice_id]
        return True

    async def clear_payment_links(self) -> int:
        cleared = 0
        for i in self._rows():
            if i.stripe_payment_link_id or i.stripe_payment_link_url:
                await self.update_invoice(
                    i.id, {"stripe_payment_link_id": None, "stripe_payment_link_url": None}
                )
                cleared += 1
        return cleared

    async def mark_overdue(self, today: date) -> int:
        count = 0
        for i in self._rows():
            if i.status in (InvoiceStatus.SENT, InvoiceStatus.VIEWED) and i.due_date < today:
                await self.update_invoice(i.id, {"status": InvoiceStatus.OVERDUE.value})
                count += 1
        return count


class FakeActivityLogRepository:
    def __init__(self, backend: FakeBackend, agency_id: str) -> None:
        self.backend = backend
        self.agency_id = agency_id

    async def log(
        self,
        entry: ActivityEntry,
        *,
        user_id: str | None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> None:
        self.backend.activity.append(
            {
                "id": self.backend.next_id("activity"),
                "agency_id": self.agency_id,
                "action": entry.action,
                "entity_type": entry.entity_type,
                "entity_id": entry.entity_id,
                "old_values": entry.old_values,
                "new_values": entry.new_values,
                "metadata": entry.metadata,
                "user_id": user_id,
                "ip_address": ip_address,
                "user_agent": user_agent,
                "created_at": NOW,
            }
        )

    async def list_recent(self, limit: int) -> list[ActivityResult]:
        rows = [r for r in self.backend.activity if r["agency_id"] == self.agency_id]
        return [
            ActivityResult(
                id=r["id"],
                agency_id=r["agency_id"],
                action=r["action"],
                entity_type=r["entity_type"],
                created_at=r["created_at"],
                user_id=r["user_id"],
                entity_id=r["entity_id"],
            )
            for r in reversed(rows)
        ][:limit]

    async def strip_personal_data(self) -> int:
        count = 0
        for row in self.backend.activity:
            if row["agency_id"] == self.agency_id:
                row.update(user_id=None, ip_address=None, user_agent=None)
                count += 1
        return count


class FakeTemplateRepository:
    def __init__(self, backend: FakeBackend, agency_id: str) -> None:
        self.backend = backend
        self.agency_id = agency_id

    async def list_templates(self) -> list[TemplateResult]:
        return list(self.backend.templates.get(self.agency_id, []))


class FakePaymentProvider:
    """Records calls; set fail_* flags to make the next calls raise."""

    def __init__(
        self,
        configured: bool = True,
        account: ProviderAccount | None = None,
    ) -> None:
        self.configured = configured
        self.account = account or ProviderAccount(
            id="acct_123",
            charges_enabled=True,
            payouts_enabled=True,
            details_submitted=True,
        )
        self.fail_create = False
        self.fail_deactivate = False
        self.fail_retrieve = False
        self.prices: list[dict[str, Any]] = []
        self.links: list[dict[str, Any]] = []
        self.deactivated: list[str] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def retrieve_account(self, account_id: str) -> ProviderAccount:
        if self.fail_retrieve:
            raise ExternalProviderException()
        return replace(self.account, id=account_id)

    async def create_price(
        self, account_id: str, *, amount_minor: int, currency: str, product_name: str
    ) -> str:
        if self.fail_create:
            raise ExternalProviderException()
        self.prices.append(
            {
                "account_id": account_id,
                "amount_minor": amount_minor,
                "currency": currency,
                "product_name": product_name,
            }
        )
        return f"price_{len(self.prices)}"

    async def create_payment_link(
        self,
        account_id: str,
        *,
        price_id: str,
        metadata: dict[str, str],
        redirect_url: str,
    ) -> ProviderPaymentLink:
        number = len(self.links) + 1
        self.links.append(
            {
                "account_id": account_id,
                "price_id": price_id,
                "metadata": metadata,
                "redirect_url": redirect_url,
            }
        )
        return ProviderPaymentLink(id=f"plink_{number}", url=f"https://buy.stripe.com/test_{number}")

    async def deactivate_payment_link(self, account_id: str, link_id: str) -> None:
        if self.fail_deactivate:
            raise ExternalProviderException()
        self.deactivated.append(link_id)
