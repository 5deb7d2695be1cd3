"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations.
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import (
    IActivityLogRepository,
    IAgencyProfileRepository,
    IAgencyRepository,
    IConsultationRepository,
    IInvoiceRepository,
    IMembershipRepository,
    IPackageRepository,
    ITemplateRepository,
    IUserRepository,
)
from app.application.interfaces.services import IPaymentProvider, IQueryCache

__all__ = [
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
]
