"""Persistence models: ORM entities and mixins.

Importing this package registers every table on Base.metadata.
"""

from app.infrastructure.persistence.models.activity_log import AgencyActivityLog
from app.infrastructure.persistence.models.agency import Agency, AgencyProfile
from app.infrastructure.persistence.models.consultation import (
    Consultation,
    ConsultationDraft,
    ConsultationVersion,
)
from app.infrastructure.persistence.models.invoice import Invoice
from app.infrastructure.persistence.models.mixins import (
    AgencyMixin,
    AgencyScopedModel,
    CreatedByMixin,
    CuidMixin,
    TimestampMixin,
)
from app.infrastructure.persistence.models.package import AgencyPackage
from app.infrastructure.persistence.models.template import AgencyProposalTemplate
from app.infrastructure.persistence.models.user import AgencyMembership, User

__all__ = [
    "Agency",
    "AgencyActivityLog",
    "AgencyMembership",
    "AgencyMixin",
    "AgencyPackage",
    "AgencyProfile",
    "AgencyProposalTemplate",
    "AgencyScopedModel",
    "Consultation",
    "ConsultationDraft",
    "ConsultationVersion",
    "CreatedByMixin",
    "CuidMixin",
    "Invoice",
    "TimestampMixin",
    "User",
]
