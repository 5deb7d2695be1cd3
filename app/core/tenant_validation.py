"""Agency (tenant) ID format validation for the X-Tenant-ID header.

Rejects malformed IDs before they reach a query, so lookups only ever see
CUID-style identifiers.
"""

import re

# CUID/UUID-style: alphanumeric, hyphen, underscore; bounded length.
TENANT_ID_MAX_LENGTH = 64
_TENANT_ID_RE = re.compile(
    r"^[a-zA-Z0-9_-]{1," + str(TENANT_ID_MAX_LENGTH) + r"}$"
)


def is_valid_tenant_id_format(value: str | None) -> bool:
    """Return True if value looks like an agency ID."""
    if not value or len(value) > TENANT_ID_MAX_LENGTH:
        return False
    return bool(_TENANT_ID_RE.fullmatch(value))
