"""Member operations: list, change role, remove (suspend)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.application.dtos.member import MembershipResult
from app.application.services.activity import record_activity
from app.application.services.authorization_service import require
from app.application.services.query_dispatch import cached_query, invalidate_entities
from app.domain.enums import EntityType, MemberRole, MembershipStatus
from app.domain.exceptions import ResourceNotFoundException, ValidationException

if TYPE_CHECKING:
    from app.application.dtos.caller import CallerContext
    from app.application.interfaces.repositories import (
        IActivityLogRepository,
        IMembershipRepository,
    )
    from app.application.interfaces.services import IQueryCache


class MemberService:
    """Manage memberships of the caller's agency. Owners cannot be demoted or removed here."""

    def __init__(
        self,
        membership_repo: IMembershipRepository,
        activity_repo: IActivityLogRepository | None = None,
        cache: IQueryCache | None = None,
    ) -> None:
        self.membership_repo = membership_repo
        self.activity_repo = activity_repo
        self.cache = cache

    @cached_query("member.list")
    async def list_members(self, caller: CallerContext) -> list[MembershipResult]:
        require(caller.role, "member:view")
        return await self.membership_repo.list_by_agency(caller.agency_id)

    async def _get_member(self, caller: CallerContext, membership_id: str) -> MembershipResult:
        member = await self.membership_repo.get_by_id(membership_id, caller.agency_id)
        if member is None:
            raise ResourceNotFoundException("membership", membership_id)
        return member

    async def change_role(
        self, caller: CallerContext, membership_id: str, role: MemberRole
    ) -> MembershipResult:
        require(caller.role, "member:change_role")
        if role == MemberRole.OWNER:
            raise ValidationException(
                "The owner role cannot be assigned; transfer ownership instead", field="role"
            )
        member = await self._get_member(caller, membership_id)
        if member.user_id == caller.user_id:
            raise ValidationException("You cannot change your own role", field="role")
        if member.role == MemberRole.OWNER:
            raise ValidationException("The owner's role cannot be changed", field="role")
        if member.role == role:
            return member
        updated = await self.membership_repo.update_membership(
            membership_id, caller.agency_id, {"role": role.value}
        )
        if updated is None:
            raise ResourceNotFoundException("membership", membership_id)
        invalidate_entities(self.cache, {EntityType.MEMBERSHIP})
        await record_activity(
            self.activity_repo,
            caller,
            "member.role_changed",
            EntityType.MEMBERSHIP.value,
            membership_id,
            old_values={"role": member.role.value},
            new_values={"role": role.value},
        )
        return updated

    async def remove_member(self, caller: CallerContext, membership_id: str) -> MembershipResult:
        """Suspend a membership; the row is kept for history."""
        require(caller.role, "member:remove")
        member = await self._get_member(caller, membership_id)
        if member.role == MemberRole.OWNER:
            raise ValidationException("The agency owner cannot be removed")
        if member.user_id == caller.user_id:
            raise ValidationException("You cannot remove yourself")
        updated = await self.membership_repo.update_membership(
            membership_id, caller.agency_id, {"status": MembershipStatus.SUSPENDED.value}
        )
        if updated is None:
            raise ResourceNotFoundException("membership", membership_id)
        invalidate_entities(self.cache, {EntityType.MEMBERSHIP})
        await record_activity(
            self.activity_repo,
            caller,
            "member.removed",
            EntityType.MEMBERSHIP.value,
            membership_id,
            old_values={"status": member.status.value},
        )
        return updated
