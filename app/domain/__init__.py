"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.entities import AgencyEntity
from app.domain.enums import (
    AgencyStatus,
    DeletionState,
    EntityType,
    InvoiceStatus,
    MemberRole,
)
from app.domain.exceptions import (
    AgencyPlatformException,
    AuthenticationException,
    AuthorizationException,
    ConflictException,
    ExternalProviderException,
    ResourceNotFoundException,
    ValidationException,
)

__all__ = [
    "AgencyEntity",
    "AgencyPlatformException",
    "AgencyStatus",
    "AuthenticationException",
    "AuthorizationException",
    "ConflictException",
    "DeletionState",
    "EntityType",
    "ExternalProviderException",
    "InvoiceStatus",
    "MemberRole",
    "ResourceNotFoundException",
    "ValidationException",
]
