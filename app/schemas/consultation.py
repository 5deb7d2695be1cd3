"""Consultation API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.domain.enums import ConsultationStatus


class ConsultationFields(BaseModel):
    """Member-editable consultation fields. Used for create and partial update."""

    business_name: str | None = Field(default=None, max_length=255)
    contact_person: str | None = Field(default=None, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)
    website: str | None = Field(default=None, max_length=500)
    industry: str | None = Field(default=None, max_length=100)
    business_type: str | None = Field(default=None, max_length=100)
    website_status: str | None = Field(default=None, max_length=50)
    primary_challenges: list[Any] | None = None
    urgency_level: str | None = Field(default=None, max_length=50)
    primary_goals: list[Any] | None = None
    budget_range: str | None = Field(default=None, max_length=50)
    timeline: str | None = Field(default=None, max_length=50)
    design_styles: list[Any] | None = None
    admired_websites: list[Any] | None = None
    consultation_notes: str | None = None


class ConsultationDraftRequest(BaseModel):
    """Auto-save payload; sections not sent keep their stored value."""

    contact_info: dict[str, Any] | None = None
    business_context: dict[str, Any] | None = None
    pain_points: dict[str, Any] | None = None
    goals_objectives: dict[str, Any] | None = None
    draft_notes: str | None = None
    auto_saved: bool = True


class ConsultationCompleteRequest(BaseModel):
    change_summary: str | None = Field(default=None, max_length=1000)


class ConsultationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
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
    primary_challenges: list[Any] = Field(default_factory=list)
    urgency_level: str | None = None
    primary_goals: list[Any] = Field(default_factory=list)
    budget_range: str | None = None
    timeline: str | None = None
    design_styles: list[Any] = Field(default_factory=list)
    admired_websites: list[Any] = Field(default_factory=list)
    consultation_notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ConsultationDraftResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    consultation_id: str
    contact_info: dict[str, Any]
    business_context: dict[str, Any]
    pain_points: dict[str, Any]
    goals_objectives: dict[str, Any]
    draft_notes: str | None = None
    auto_saved: bool
    updated_at: datetime | None = None


class ConsultationVersionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    consultation_id: str
    version_number: int
    status: ConsultationStatus
    snapshot: dict[str, Any]
    change_summary: str | None = None
    changed_fields: list[str]
    created_at: datetime | None = None
