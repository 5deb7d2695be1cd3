"""Application use cases: one service per aggregate of an agency."""

from app.application.use_cases.agencies import (
    AgencyDeletionService,
    AgencyExportService,
    AgencyService,
    ExecuteAgencyDeletion,
    UserExportService,
)
from app.application.use_cases.consultations import ConsultationService
from app.application.use_cases.invoices import InvoiceService
from app.application.use_cases.members import MemberService
from app.application.use_cases.packages import PackageService
from app.application.use_cases.payments import (
    PaymentLinkService,
    StripeConnectionService,
)

__all__ = [
    "AgencyDeletionService",
    "AgencyExportService",
    "AgencyService",
    "ConsultationService",
    "ExecuteAgencyDeletion",
    "InvoiceService",
    "MemberService",
    "PackageService",
    "PaymentLinkService",
    "StripeConnectionService",
    "UserExportService",
]
