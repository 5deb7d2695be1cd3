"""DTOs for the agency activity log."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class ActivityEntry:
    """One activity to record. ip_address and user_agent come from the caller context."""

    action: str
    entity_type: str
    entity_id: str | None = None
    old_values: dict[str, Any] | None = None
    new_values: dict[str, Any] | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ActivityResult:
    id: str
    agency_id: str
    action: str
    entity_type: str
    created_at: datetime
    user_id: str | None = None
    entity_id: str | None = None


@dataclass(frozen=True)
class TemplateResult:
    """Proposal template read-model (export only)."""

    id: str
    name: str
    is_default: bool
    sections: list[Any]
    header_content: str | None
    footer_content: str | None
    settings: dict[str, Any]
    created_at: datetime | None = None
