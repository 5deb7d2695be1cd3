"""Agency deletion lifecycle: schedule, cancel, status, and execution after the grace period.

State rules live on AgencyEntity; the repository applies each transition with
a compare-and-set UPDATE so concurrent schedule/cancel/execute calls cannot
both succeed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from app.application.dtos.agency import AgencyResult, DeletionStatusResult
from app.application.services.activity import record_activity
from app.application.services.authorization_service import require
from app.application.services.query_dispatch import cached_query, invalidate_entities
from app.domain.entities.agency import DELETION_GRACE_PERIOD_DAYS
from app.domain.enums import DeletionState, EntityType
from app.domain.exceptions import ConflictException, ResourceNotFoundException
from app.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from app.application.dtos.caller import CallerContext
    from app.application.interfaces.repositories import (
        IActivityLogRepository,
        IAgencyRepository,
        IMembershipRepository,
        IUserRepository,
    )
    from app.application.interfaces.services import IQueryCache

logger = logging.getLogger(__name__)


def build_deletion_status(agency: AgencyResult, now: datetime) -> DeletionStatusResult:
    """Status view of the agency's deletion schedule at now."""
    entity = agency.to_entity()
    state = entity.deletion_state(now)
    days = entity.days_until_deletion(now)
    return DeletionStatusResult(
        state=state,
        scheduled_for=agency.deletion_scheduled_for,
        days_remaining=days,
        can_cancel=state == DeletionState.SCHEDULED and bool(days),
    )


class AgencyDeletionService:
    """Member-facing deletion commands (agency:delete) and status query."""

    def __init__(
        self,
        agency_repo: IAgencyRepository,
        activity_repo: IActivityLogRepository | None = None,
        cache: IQueryCache | None = None,
        grace_period_days: int = DELETION_GRACE_PERIOD_DAYS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.agency_repo = agency_repo
        self.activity_repo = activity_repo
        self.cache = cache
        self.grace_period_days = grace_period_days
        self.clock = clock

    async def _get_agency(self, agency_id: str) -> AgencyResult:
        agency = await self.agency_repo.get_by_id(agency_id)
        if agency is None:
            raise ResourceNotFoundException("agency", agency_id)
        return agency

    async def schedule(self, caller: CallerContext, confirmation_phrase: str) -> DeletionStatusResult:
        """Schedule deletion at now + grace period.

        Raises:
            AuthorizationException: Caller lacks agency:delete.
            ValidationException: Phrase is not "delete <agency name>" (case-insensitive).
            ConflictException: Already scheduled, expired or deleted, or a concurrent
                request scheduled it first.
        """
        require(caller.role, "agency:delete")
        agency = await self._get_agency(caller.agency_id)
        now = self.clock()
        scheduled_for = agency.to_entity().plan_schedule(
            confirmation_phrase, now, self.grace_period_days
        )
        if not await self.agency_repo.schedule_deletion(caller.agency_id, scheduled_for):
            raise ConflictException(
                "Agency is already scheduled for deletion", agency_id=caller.agency_id
            )
        invalidate_entities(self.cache, {EntityType.AGENCY})
        await record_activity(
            self.activity_repo,
            caller,
            "agency.deletion_scheduled",
            EntityType.AGENCY.value,
            caller.agency_id,
            new_values={
                "deletion_scheduled_for": scheduled_for.isoformat(),
                "grace_period_days": self.grace_period_days,
            },
        )
        logger.info(
            "Agency %s scheduled for deletion at %s by user %s",
            caller.agency_id,
            scheduled_for.isoformat(),
            caller.user_id,
        )
        return DeletionStatusResult(
            state=DeletionState.SCHEDULED,
            scheduled_for=scheduled_for,
            days_remaining=self.grace_period_days,
            can_cancel=True,
        )

    async def cancel(self, caller: CallerContext) -> DeletionStatusResult:
        """Clear a pending schedule while the grace period is still running."""
        require(caller.role, "agency:delete")
        agency = await self._get_agency(caller.agency_id)
        now = self.clock()
        agency.to_entity().check_cancel(now)
        if not await self.agency_repo.cancel_deletion(caller.agency_id, now):
            raise ConflictException(
                "Grace period has expired; deletion can no longer be cancelled",
                agency_id=caller.agency_id,
            )
        invalidate_entities(self.cache, {EntityType.AGENCY})
        await record_activity(
            self.activity_repo,
            caller,
            "agency.deletion_cancelled",
            EntityType.AGENCY.value,
            caller.agency_id,
            old_values={"deletion_scheduled_for": agency.deletion_scheduled_for.isoformat()}
            if agency.deletion_scheduled_for
            else None,
        )
        logger.info("Agency %s deletion cancelled by user %s", caller.agency_id, caller.user_id)
        return DeletionStatusResult(state=DeletionState.ACTIVE)

    @cached_query("agency.deletion_status")
    async def get_deletion_status(self, caller: CallerContext) -> DeletionStatusResult:
        agency = await self._get_agency(caller.agency_id)
        return build_deletion_status(agency, self.clock())


class ExecuteAgencyDeletion:
    """Perform the deletion of one agency whose grace period has elapsed.

    Never exposed to members; invoked by the sweep. All steps share the
    repositories' session and must run inside a single transaction:

    - mark the agency deleted and cancelled (guarded on expiry);
    - suspend every membership;
    - strip personal data from the activity log;
    - clear users' default_agency_id where it points at the agency.

    Re-running for an already deleted agency raises ConflictException and
    changes nothing.
    """

    def __init__(
        self,
        agency_repo: IAgencyRepository,
        membership_repo: IMembershipRepository,
        user_repo: IUserRepository,
        activity_repo_factory: Callable[[str], IActivityLogRepository],
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._agency_repo = agency_repo
        self._membership_repo = membership_repo
        self._user_repo = user_repo
        self._activity_repo_factory = activity_repo_factory
        self._clock = clock

    async def execute(self, agency_id: str) -> AgencyResult:
        agency = await self._agency_repo.get_by_id(agency_id)
        if agency is None:
            raise ResourceNotFoundException("agency", agency_id)
        now = self._clock()
        agency.to_entity().check_execute(now)

        if not await self._agency_repo.mark_deleted(agency_id, now):
            raise ConflictException("Agency deletion already executed", agency_id=agency_id)
        suspended = await self._membership_repo.suspend_all(agency_id)
        stripped = await self._activity_repo_factory(agency_id).strip_personal_data()
        cleared = await self._user_repo.clear_default_agency(agency_id)
        logger.info(
            "Agency %s deleted: %s memberships suspended, %s activity rows anonymized, "
            "%s default agency references cleared",
            agency_id,
            suspended,
            stripped,
            cleared,
        )
        deleted = await self._agency_repo.get_by_id(agency_id)
        return deleted if deleted is not None else agency
