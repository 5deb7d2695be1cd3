"""GDPR API schemas: agency deletion lifecycle and the internal sweep."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import DeletionState


class DeletionScheduleRequest(BaseModel):
    """Scheduling requires typing "delete <agency name>" (case-insensitive)."""

    confirmation_phrase: str = Field(..., min_length=1, max_length=300)


class DeletionStatusResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    state: DeletionState
    scheduled_for: datetime | None = None
    days_remaining: int | None = None
    can_cancel: bool = False


class DeletionSweepResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    processed: int
    deleted: int
    failed: int
    failed_agency_ids: list[str] = Field(default_factory=list)
