"""Infrastructure services run outside a member request (deletion sweep)."""

from app.infrastructure.services.deletion_sweep import (
    execute_agency_deletion,
    find_expired_agency_ids,
    run_deletion_sweep,
)

__all__ = [
    "execute_agency_deletion",
    "find_expired_agency_ids",
    "run_deletion_sweep",
]
