"""Application services: permission gate, query dispatch cache, activity log."""

from app.application.services.activity import record_activity
from app.application.services.authorization_service import (
    PERMISSIONS,
    ROLE_HIERARCHY,
    allowed,
    can_access_resource,
    can_delete_resource,
    can_modify_resource,
    has_minimum_role,
    require,
)
from app.application.services.query_dispatch import (
    QUERY_DEPENDENCIES,
    cached_query,
    invalidate_entities,
)

__all__ = [
    "PERMISSIONS",
    "QUERY_DEPENDENCIES",
    "ROLE_HIERARCHY",
    "allowed",
    "cached_query",
    "can_access_resource",
    "can_delete_resource",
    "can_modify_resource",
    "has_minimum_role",
    "invalidate_entities",
    "record_activity",
    "require",
]
