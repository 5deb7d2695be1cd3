"""Agency members API: list, change role, remove."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    get_caller,
    get_member_service,
    get_member_service_for_write,
    get_writable_caller,
)
from app.application.dtos.caller import CallerContext
from app.application.use_cases import MemberService
from app.core.limiter import limit_writes
from app.schemas.member import MemberResponse, MemberRoleUpdateRequest

router = APIRouter()


@router.get("", response_model=list[MemberResponse])
async def list_members(
    caller: Annotated[CallerContext, Depends(get_caller)],
    member_svc: Annotated[MemberService, Depends(get_member_service)],
):
    """Members of the current agency, owners first."""
    members = await member_svc.list_members(caller)
    return [MemberResponse.model_validate(m) for m in members]


@router.patch("/{membership_id}/role", response_model=MemberResponse)
@limit_writes
async def change_member_role(
    request: Request,
    membership_id: str,
    body: MemberRoleUpdateRequest,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    member_svc: Annotated[MemberService, Depends(get_member_service_for_write)],
):
    updated = await member_svc.change_role(caller, membership_id, body.role)
    return MemberResponse.model_validate(updated)


@router.delete("/{membership_id}", response_model=MemberResponse)
@limit_writes
async def remove_member(
    request: Request,
    membership_id: str,
    caller: Annotated[CallerContext, Depends(get_writable_caller)],
    member_svc: Annotated[MemberService, Depends(get_member_service_for_write)],
):
    """Suspend the membership; the row is kept for history."""
    removed = await member_svc.remove_member(caller, membership_id)
    return MemberResponse.model_validate(removed)
