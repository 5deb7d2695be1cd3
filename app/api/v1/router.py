"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from app.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    agencies,
    consultations,
    gdpr,
    health,
    internal,
    invoices,
    members,
    packages,
    payments,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(agencies.router, prefix="/agencies", tags=["agencies"])
api_router.include_router(members.router, prefix="/members", tags=["members"])
api_router.include_router(packages.router, prefix="/packages", tags=["packages"])
api_router.include_router(
    consultations.router, prefix="/consultations", tags=["consultations"]
)
api_router.include_router(invoices.router, prefix="/invoices", tags=["invoices"])
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])
api_router.include_router(gdpr.router, prefix="/gdpr", tags=["gdpr"])
api_router.include_router(internal.router, prefix="/internal", tags=["internal"])
