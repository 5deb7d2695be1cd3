"""Agency use cases: create and brand, scheduled deletion, data export."""

from app.application.use_cases.agencies.agency_deletion import (
    AgencyDeletionService,
    ExecuteAgencyDeletion,
    build_deletion_status,
)
from app.application.use_cases.agencies.agency_export import (
    AgencyExportService,
    UserExportService,
)
from app.application.use_cases.agencies.agency_operations import AgencyService

__all__ = [
    "AgencyDeletionService",
    "AgencyExportService",
    "AgencyService",
    "ExecuteAgencyDeletion",
    "UserExportService",
    "build_deletion_status",
]
