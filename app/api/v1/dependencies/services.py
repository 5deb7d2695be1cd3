"""Service factories (composition root).

Routes depend only on these; repositories and the payment provider are
built here from infrastructure. Read routes get services over get_db,
mutating routes over get_db_transactional (one transaction per request).
Both share the request's QueryCache.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.caller import CallerContext
from app.application.use_cases import (
    AgencyDeletionService,
    AgencyExportService,
    AgencyService,
    ConsultationService,
    InvoiceService,
    MemberService,
    PackageService,
    PaymentLinkService,
    StripeConnectionService,
    UserExportService,
)
from app.core.config import get_settings
from app.infrastructure.cache import QueryCache
from app.infrastructure.external.payments import StripePaymentProvider
from app.infrastructure.persistence.database import get_db, get_db_transactional
from app.infrastructure.persistence.repositories import (
    ActivityLogRepository,
    AgencyProfileRepository,
    AgencyRepository,
    ConsultationRepository,
    InvoiceRepository,
    MembershipRepository,
    PackageRepository,
    TemplateRepository,
    UserRepository,
)

from .caller import get_caller

ReadSession = Annotated[AsyncSession, Depends(get_db)]
WriteSession = Annotated[AsyncSession, Depends(get_db_transactional)]
Caller = Annotated[CallerContext, Depends(get_caller)]


def get_query_cache() -> QueryCache:
    """Per-request query cache (FastAPI resolves it once per request)."""
    return QueryCache()


Cache = Annotated[QueryCache, Depends(get_query_cache)]


def get_payment_provider() -> StripePaymentProvider:
    """Stripe provider; unconfigured when STRIPE_SECRET_KEY is not set."""
    secret = get_settings().stripe_secret_key
    return StripePaymentProvider(secret.get_secret_value() if secret else None)


Provider = Annotated[StripePaymentProvider, Depends(get_payment_provider)]


# ---- Agencies ----


def _agency_service(db: AsyncSession, cache: QueryCache) -> AgencyService:
    return AgencyService(
        agency_repo=AgencyRepository(db),
        membership_repo=MembershipRepository(db),
        user_repo=UserRepository(db),
        profile_repo_factory=lambda agency_id: AgencyProfileRepository(db, agency_id),
        activity_repo_factory=lambda agency_id: ActivityLogRepository(db, agency_id),
        cache=cache,
    )


def get_agency_service(db: ReadSession, cache: Cache) -> AgencyService:
    return _agency_service(db, cache)


def get_agency_service_for_write(db: WriteSession, cache: Cache) -> AgencyService:
    """Agency service for create/update (transactional)."""
    return _agency_service(db, cache)


def _deletion_service(
    db: AsyncSession, caller: CallerContext, cache: QueryCache
) -> AgencyDeletionService:
    return AgencyDeletionService(
        agency_repo=AgencyRepository(db),
        activity_repo=ActivityLogRepository(db, caller.agency_id),
        cache=cache,
        grace_period_days=get_settings().deletion_grace_period_days,
    )


def get_deletion_service(
    db: ReadSession, caller: Caller, cache: Cache
) -> AgencyDeletionService:
    return _deletion_service(db, caller, cache)


def get_deletion_service_for_write(
    db: WriteSession, caller: Caller, cache: Cache
) -> AgencyDeletionService:
    """Deletion service for schedule/cancel (transactional)."""
    return _deletion_service(db, caller, cache)


def get_agency_export_service(db: WriteSession, caller: Caller) -> AgencyExportService:
    """Export is transactional because it records a data.exported activity."""
    return AgencyExportService(
        agency_repo=AgencyRepository(db),
        membership_repo=MembershipRepository(db),
        template_repo=TemplateRepository(db, caller.agency_id),
        consultation_repo=ConsultationRepository(db, caller.agency_id),
        package_repo=PackageRepository(db, caller.agency_id),
        activity_repo=ActivityLogRepository(db, caller.agency_id),
        activity_log_limit=get_settings().export_activity_log_limit,
    )


def get_user_export_service(db: ReadSession) -> UserExportService:
    return UserExportService(user_repo=UserRepository(db), membership_repo=MembershipRepository(db))


# ---- Members ----


def _member_service(db: AsyncSession, caller: CallerContext, cache: QueryCache) -> MemberService:
    return MemberService(
        membership_repo=MembershipRepository(db),
        activity_repo=ActivityLogRepository(db, caller.agency_id),
        cache=cache,
    )


def get_member_service(db: ReadSession, caller: Caller, cache: Cache) -> MemberService:
    return _member_service(db, caller, cache)


def get_member_service_for_write(db: WriteSession, caller: Caller, cache: Cache) -> MemberService:
    return _member_service(db, caller, cache)


# ---- Packages ----


def _package_service(db: AsyncSession, caller: CallerContext, cache: QueryCache) -> PackageService:
    return PackageService(
        package_repo=PackageRepository(db, caller.agency_id),
        activity_repo=ActivityLogRepository(db, caller.agency_id),
        cache=cache,
    )


def get_package_service(db: ReadSession, caller: Caller, cache: Cache) -> PackageService:
    return _package_service(db, caller, cache)


def get_package_service_for_write(
    db: WriteSession, caller: Caller, cache: Cache
) -> PackageService:
    return _package_service(db, caller, cache)


# ---- Consultations ----


def _consultation_service(
    db: AsyncSession, caller: CallerContext, cache: QueryCache
) -> ConsultationService:
    return ConsultationService(
        consultation_repo=ConsultationRepository(db, caller.agency_id),
        activity_repo=ActivityLogRepository(db, caller.agency_id),
        cache=cache,
    )


def get_consultation_service(
    db: ReadSession, caller: Caller, cache: Cache
) -> ConsultationService:
    return _consultation_service(db, caller, cache)


def get_consultation_service_for_write(
    db: WriteSession, caller: Caller, cache: Cache
) -> ConsultationService:
    return _consultation_service(db, caller, cache)


# ---- Payments and invoices ----


def _payment_link_service(
    db: AsyncSession, caller: CallerContext, cache: QueryCache, provider: StripePaymentProvider
) -> PaymentLinkService:
    settings = get_settings()
    return PaymentLinkService(
        invoice_repo=InvoiceRepository(db, caller.agency_id),
        profile_repo=AgencyProfileRepository(db, caller.agency_id),
        provider=provider,
        public_client_url=settings.public_client_url,
        currency=settings.stripe_currency,
        activity_repo=ActivityLogRepository(db, caller.agency_id),
        cache=cache,
    )


def get_payment_link_service(
    db: ReadSession, caller: Caller, cache: Cache, provider: Provider
) -> PaymentLinkService:
    return _payment_link_service(db, caller, cache, provider)


def get_payment_link_service_for_write(
    db: WriteSession, caller: Caller, cache: Cache, provider: Provider
) -> PaymentLinkService:
    return _payment_link_service(db, caller, cache, provider)


def _invoice_service(
    db: AsyncSession, caller: CallerContext, cache: QueryCache, provider: StripePaymentProvider
) -> InvoiceService:
    return InvoiceService(
        invoice_repo=InvoiceRepository(db, caller.agency_id),
        profile_repo=AgencyProfileRepository(db, caller.agency_id),
        activity_repo=ActivityLogRepository(db, caller.agency_id),
        cache=cache,
        payment_links=_payment_link_service(db, caller, cache, provider),
    )


def get_invoice_service(
    db: ReadSession, caller: Caller, cache: Cache, provider: Provider
) -> InvoiceService:
    return _invoice_service(db, caller, cache, provider)


def get_invoice_service_for_write(
    db: WriteSession, caller: Caller, cache: Cache, provider: Provider
) -> InvoiceService:
    """Invoice service for mutations; cancel deactivates the payment link in the same transaction."""
    return _invoice_service(db, caller, cache, provider)


def _stripe_connection_service(
    db: AsyncSession, caller: CallerContext, cache: QueryCache, provider: StripePaymentProvider
) -> StripeConnectionService:
    return StripeConnectionService(
        profile_repo=AgencyProfileRepository(db, caller.agency_id),
        invoice_repo=InvoiceRepository(db, caller.agency_id),
        provider=provider,
        activity_repo=ActivityLogRepository(db, caller.agency_id),
        cache=cache,
    )


def get_stripe_connection_service(
    db: ReadSession, caller: Caller, cache: Cache, provider: Provider
) -> StripeConnectionService:
    return _stripe_connection_service(db, caller, cache, provider)


def get_stripe_connection_service_for_write(
    db: WriteSession, caller: Caller, cache: Cache, provider: Provider
) -> StripeConnectionService:
    return _stripe_connection_service(db, caller, cache, provider)
