"""Agency domain entity and deletion lifecycle rules.

Represents the business concept of an agency (tenant), independent of
persistence. Deletion lifecycle transitions are decided here; persistence
of the transition happens in the repository.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from app.domain.enums import AgencyStatus, DeletionState
from app.domain.exceptions import ConflictException, ValidationException

DELETION_GRACE_PERIOD_DAYS = 30
DELETION_PHRASE_PREFIX = "delete "


def expected_deletion_phrase(agency_name: str) -> str:
    """Return the phrase a user must type to schedule deletion of agency_name."""
    return f"{DELETION_PHRASE_PREFIX}{agency_name}"


def confirmation_phrase_matches(phrase: str, agency_name: str) -> bool:
    """Case-insensitive but otherwise exact comparison of the confirmation phrase."""
    return phrase.casefold() == expected_deletion_phrase(agency_name).casefold()


@dataclass
class AgencyEntity:
    """Domain entity for an agency.

    Only carries the fields the lifecycle rules need. Timestamps must be
    timezone-aware UTC.
    """

    id: str
    name: str
    slug: str
    status: AgencyStatus
    deletion_scheduled_for: datetime | None = None
    deleted_at: datetime | None = None

    def deletion_state(self, now: datetime) -> DeletionState:
        """Return the deletion lifecycle state at now."""
        if self.deleted_at is not None:
            return DeletionState.DELETED
        if self.deletion_scheduled_for is None:
            return DeletionState.ACTIVE
        if self.deletion_scheduled_for > now:
            return DeletionState.SCHEDULED
        return DeletionState.EXPIRED

    def is_writable(self, now: datetime) -> bool:
        """Return False once the grace period has elapsed or the agency is deleted."""
        return self.deletion_state(now) in (DeletionState.ACTIVE, DeletionState.SCHEDULED)

    def ensure_writable(self, now: datetime) -> None:
        """Raise ConflictException if the agency may no longer be mutated."""
        if not self.is_writable(now):
            raise ConflictException(
                "Agency is scheduled for deletion and no longer accepts changes",
                agency_id=self.id,
            )

    def days_until_deletion(self, now: datetime) -> int | None:
        """Whole days (rounded up) until the scheduled deletion, floored at 0."""
        if self.deletion_scheduled_for is None:
            return None
        remaining = (self.deletion_scheduled_for - now) / timedelta(days=1)
        return max(0, math.ceil(remaining))

    def plan_schedule(
        self,
        confirmation_phrase: str,
        now: datetime,
        grace_period_days: int = DELETION_GRACE_PERIOD_DAYS,
    ) -> datetime:
        """Validate a schedule request and return the deletion time.

        Raises:
            ValidationException: Confirmation phrase does not match.
            ConflictException: Agency is not in the active state.
        """
        if not confirmation_phrase_matches(confirmation_phrase, self.name):
            raise ValidationException(
                f'Please type "{expected_deletion_phrase(self.name)}" to confirm',
                field="confirmation_phrase",
            )
        state = self.deletion_state(now)
        if state != DeletionState.ACTIVE:
            raise ConflictException(
                f"Agency deletion cannot be scheduled (state: {state.value})",
                state=state.value,
            )
        return now + timedelta(days=grace_period_days)

    def check_cancel(self, now: datetime) -> None:
        """Raise ConflictException unless a scheduled deletion can still be cancelled."""
        state = self.deletion_state(now)
        if state == DeletionState.SCHEDULED:
            return
        if state == DeletionState.EXPIRED:
            message = "Grace period has expired; deletion can no longer be cancelled"
        elif state == DeletionState.DELETED:
            message = "Agency has already been deleted"
        else:
            message = "Agency is not scheduled for deletion"
        raise ConflictException(message, state=state.value)

    def check_execute(self, now: datetime) -> None:
        """Raise ConflictException unless the grace period has elapsed."""
        state = self.deletion_state(now)
        if state == DeletionState.EXPIRED:
            return
        if state == DeletionState.DELETED:
            message = "Agency has already been deleted"
        elif state == DeletionState.SCHEDULED:
            message = "Grace period has not elapsed yet"
        else:
            message = "Agency is not scheduled for deletion"
        raise ConflictException(message, state=state.value)
