"""Pydantic request/response schemas for the API."""

from app.schemas.agency import (
    AgencyCreateRequest,
    AgencyResponse,
    AgencyUpdateRequest,
    SlugAvailabilityResponse,
)
from app.schemas.consultation import (
    ConsultationCompleteRequest,
    ConsultationDraftRequest,
    ConsultationDraftResponse,
    ConsultationFields,
    ConsultationResponse,
    ConsultationVersionResponse,
)
from app.schemas.gdpr import (
    DeletionScheduleRequest,
    DeletionStatusResponse,
    DeletionSweepResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.invoice import (
    InvoiceCancelRequest,
    InvoiceCreateRequest,
    InvoiceResponse,
    InvoiceUpdateRequest,
    PaymentRecordRequest,
)
from app.schemas.member import MemberResponse, MemberRoleUpdateRequest
from app.schemas.package import (
    PackageCreateRequest,
    PackageReorderRequest,
    PackageResponse,
    PackageUpdateRequest,
)
from app.schemas.payment import PaymentLinkResponse, StripeStatusResponse

__all__ = [
    "AgencyCreateRequest",
    "AgencyResponse",
    "AgencyUpdateRequest",
    "ConsultationCompleteRequest",
    "ConsultationDraftRequest",
    "ConsultationDraftResponse",
    "ConsultationFields",
    "ConsultationResponse",
    "ConsultationVersionResponse",
    "DeletionScheduleRequest",
    "DeletionStatusResponse",
    "DeletionSweepResponse",
    "HealthResponse",
    "InvoiceCancelRequest",
    "InvoiceCreateRequest",
    "InvoiceResponse",
    "InvoiceUpdateRequest",
    "MemberResponse",
    "MemberRoleUpdateRequest",
    "PackageCreateRequest",
    "PackageReorderRequest",
    "PackageResponse",
    "PackageUpdateRequest",
    "PaymentLinkResponse",
    "PaymentRecordRequest",
    "SlugAvailabilityResponse",
    "StripeStatusResponse",
]
