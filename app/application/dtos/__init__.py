"""Application DTOs (no ORM dependency)."""

from app.application.dtos.activity import ActivityEntry, ActivityResult, TemplateResult
from app.application.dtos.agency import (
    AgencyCreate,
    AgencyProfileResult,
    AgencyResult,
    AgencyUpdate,
    DeletionStatusResult,
    DeletionSweepResult,
)
from app.application.dtos.caller import CallerContext
from app.application.dtos.consultation import (
    ConsultationDraftResult,
    ConsultationResult,
    ConsultationVersionResult,
)
from app.application.dtos.invoice import (
    InvoiceCreate,
    InvoiceLineItem,
    InvoiceResult,
    LineItemInput,
    PaymentRecord,
)
from app.application.dtos.member import MembershipResult, UserResult
from app.application.dtos.package import PackageCreate, PackageResult
from app.application.dtos.payment import (
    PaymentConnectionStatus,
    PaymentLinkResult,
    ProviderAccount,
    ProviderPaymentLink,
)

__all__ = [
    "ActivityEntry",
    "ActivityResult",
    "AgencyCreate",
    "AgencyProfileResult",
    "AgencyResult",
    "AgencyUpdate",
    "CallerContext",
    "ConsultationDraftResult",
    "ConsultationResult",
    "ConsultationVersionResult",
    "DeletionStatusResult",
    "DeletionSweepResult",
    "InvoiceCreate",
    "InvoiceLineItem",
    "InvoiceResult",
    "LineItemInput",
    "MembershipResult",
    "PackageCreate",
    "PackageResult",
    "PaymentConnectionStatus",
    "PaymentLinkResult",
    "PaymentRecord",
    "ProviderAccount",
    "ProviderPaymentLink",
    "TemplateResult",
    "UserResult",
]
