"""Agency member API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import MemberRole, MembershipStatus


class MemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    role: MemberRole
    status: MembershipStatus
    display_name: str | None = None
    email: str | None = None
    invited_at: datetime | None = None
    accepted_at: datetime | None = None


class MemberRoleUpdateRequest(BaseModel):
    """Request body for changing a member's role. Owner cannot be assigned."""

    role: MemberRole = Field(..., description="admin or member")
