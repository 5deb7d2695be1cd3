"""DTOs for consultations, drafts and versions."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.domain.enums import ConsultationStatus

# Fields a member may set on a consultation (create and update).
CONSULTATION_FIELDS = (
    "business_name",
    "contact_person",
    "email",
    "phone",
    "website",
    "industry",
    "business_type",
    "website_status",
    "primary_challenges",
    "urgency_level",
    "primary_goals",
    "budget_range",
    "timeline",
    "design_styles",
    "admired_websites",
    "consultation_notes",
)


@dataclass(frozen=True)
class ConsultationResult:
    """Consultation read-model."""

    id: str
    agency_id: str
    user_id: str
    status: ConsultationStatus
    business_name: str | None = None
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    website: str | None = None
    industry: str | None = None
    business_type: str | None = None
    website_status: str | None = None
    primary_challenges: list[Any] = field(default_factory=list)
    urgency_level: str | None = None
    primary_goals: list[Any] = field(default_factory=list)
    budget_range: str | None = None
    timeline: str | None = None
    design_styles: list[Any] = field(default_factory=list)
    admired_websites: list[Any] = field(default_factory=list)
    consultation_notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def snapshot(self) -> dict[str, Any]:
        """Member-editable fields, used for version snapshots and diffs."""
        return {name: getattr(self, name) for name in CONSULTATION_FIELDS}


@dataclass(frozen=True)
class ConsultationDraftResult:
    id: str
    consultation_id: str
    contact_info: dict[str, Any]
    business_context: dict[str, Any]
    pain_points: dict[str, Any]
    goals_objectives: dict[str, Any]
    draft_notes: str | None = None
    auto_saved: bool = False
    updated_at: datetime | None = None


@dataclass(frozen=True)
class ConsultationVersionResult:
    id: str
    consultation_id: str
    version_number: int
    status: ConsultationStatus
    snapshot: dict[str, Any]
    change_summary: str | None = None
    changed_fields: list[str] = field(default_factory=list)
    created_at: datetime | None = None
