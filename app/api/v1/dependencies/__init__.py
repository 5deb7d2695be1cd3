"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the caller context and application services.
Routes depend only on these, never on infrastructure directly.
"""

from app.api.v1.dependencies.caller import (
    get_caller,
    get_current_agency,
    get_current_user_id,
    get_current_user_id_optional,
    get_tenant_id,
    get_writable_caller,
)
from app.api.v1.dependencies.internal import (
    get_deletion_sweep,
    verify_sweep_secret,
)
from app.api.v1.dependencies.services import (
    get_agency_export_service,
    get_agency_service,
    get_agency_service_for_write,
    get_consultation_service,
    get_consultation_service_for_write,
    get_deletion_service,
    get_deletion_service_for_write,
    get_invoice_service,
    get_invoice_service_for_write,
    get_member_service,
    get_member_service_for_write,
    get_package_service,
    get_package_service_for_write,
    get_payment_link_service,
    get_payment_link_service_for_write,
    get_payment_provider,
    get_query_cache,
    get_stripe_connection_service,
    get_stripe_connection_service_for_write,
    get_user_export_service,
)

__all__ = [
    "get_agency_export_service",
    "get_agency_service",
    "get_agency_service_for_write",
    "get_caller",
    "get_consultation_service",
    "get_consultation_service_for_write",
    "get_current_agency",
    "get_current_user_id",
    "get_current_user_id_optional",
    "get_deletion_service",
    "get_deletion_service_for_write",
    "get_deletion_sweep",
    "get_invoice_service",
    "get_invoice_service_for_write",
    "get_member_service",
    "get_member_service_for_write",
    "get_package_service",
    "get_package_service_for_write",
    "get_payment_link_service",
    "get_payment_link_service_for_write",
    "get_payment_provider",
    "get_query_cache",
    "get_stripe_connection_service",
    "get_stripe_connection_service_for_write",
    "get_tenant_id",
    "get_user_export_service",
    "get_writable_caller",
    "verify_sweep_secret",
]
