"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.activity_log_repo import (
    ActivityLogRepository,
    TemplateRepository,
)
from app.infrastructure.persistence.repositories.agency_repo import (
    AgencyProfileRepository,
    AgencyRepository,
)
from app.infrastructure.persistence.repositories.base import (
    AgencyScopedRepository,
    BaseRepository,
)
from app.infrastructure.persistence.repositories.consultation_repo import (
    ConsultationRepository,
)
from app.infrastructure.persistence.repositories.invoice_repo import InvoiceRepository
from app.infrastructure.persistence.repositories.package_repo import PackageRepository
from app.infrastructure.persistence.repositories.user_repo import (
    MembershipRepository,
    UserRepository,
)

__all__ = [
    "ActivityLogRepository",
    "AgencyProfileRepository",
    "AgencyRepository",
    "AgencyScopedRepository",
    "BaseRepository",
    "ConsultationRepository",
    "InvoiceRepository",
    "MembershipRepository",
    "PackageRepository",
    "TemplateRepository",
    "UserRepository",
]
