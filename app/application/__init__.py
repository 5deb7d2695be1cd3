"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, payment provider, cache).
"""

from app.application.interfaces import (
    IActivityLogRepository,
    IAgencyProfileRepository,
    IAgencyRepository,
    IConsultationRepository,
    IInvoiceRepository,
    IMembershipRepository,
    IPackageRepository,
    IPaymentProvider,
    IQueryCache,
    ITemplateRepository,
    IUserRepository,
)
from app.application.use_cases import (
    AgencyDeletionService,
    AgencyExportService,
    AgencyService,
    ConsultationService,
    ExecuteAgencyDeletion,
    InvoiceService,
    MemberService,
    PackageService,
    PaymentLinkService,
    StripeConnectionService,
    UserExportService,
)

__all__ = [
    "AgencyDeletionService",
    "AgencyExportService",
    "AgencyService",
    "ConsultationService",
    "ExecuteAgencyDeletion",
    "IActivityLogRepository",
    "IAgencyProfileRepository",
    "IAgencyRepository",
    "IConsultationRepository",
    "IInvoiceRepository",
    "IMembershipRepository",
    "IPackageRepository",
    "IPaymentProvider",
    "IQueryCache",
    "ITemplateRepository",
    "IUserRepository",
    "InvoiceService",
    "MemberService",
    "PackageService",
    "PaymentLinkService",
    "StripeConnectionService",
    "UserExportService",
]
