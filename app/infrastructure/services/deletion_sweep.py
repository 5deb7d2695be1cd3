"""Agency deletion sweep: execute every deletion whose grace period has elapsed.

Run periodically (cron via scripts/run_agency_deletion_sweep.py, or the
internal endpoint). Each agency is deleted in its own session and
transaction; a failure rolls back that agency only, is logged and counted,
and the sweep moves on.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.application.dtos.agency import DeletionSweepResult
from app.application.use_cases.agencies.agency_deletion import ExecuteAgencyDeletion
from app.domain.exceptions import AgencyPlatformException
from app.infrastructure.persistence.repositories import (
    ActivityLogRepository,
    AgencyRepository,
    MembershipRepository,
    UserRepository,
)
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import add_span_attributes, traced
from app.shared.utils.datetime import utc_now

logger = get_logger(__name__)


async def find_expired_agency_ids(
    session_factory: async_sessionmaker[AsyncSession], now: datetime, limit: int
) -> list[str]:
    async with session_factory() as session:
        agencies = await AgencyRepository(session).list_expired(now, limit)
    return [a.id for a in agencies]


async def execute_agency_deletion(
    session_factory: async_sessionmaker[AsyncSession],
    agency_id: str,
) -> None:
    """Delete one agency atomically; raises on failure after rollback.

    Expiry is re-checked against the server clock, whatever time the sweep
    used to select candidates.
    """
    async with session_factory() as session:
        async with session.begin():
            use_case = ExecuteAgencyDeletion(
                agency_repo=AgencyRepository(session),
                membership_repo=MembershipRepository(session),
                user_repo=UserRepository(session),
                activity_repo_factory=lambda aid: ActivityLogRepository(session, aid),
            )
            await use_case.execute(agency_id)


@traced("agency.deletion_sweep")
async def run_deletion_sweep(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    now: datetime | None = None,
    batch_size: int = 100,
) -> DeletionSweepResult:
    """Execute up to batch_size expired deletions. Never raises for a single agency.

    now only selects candidates; each deletion verifies expiry itself.
    """
    sweep_time = now or utc_now()
    result = DeletionSweepResult()
    agency_ids = await find_expired_agency_ids(session_factory, sweep_time, batch_size)
    for agency_id in agency_ids:
        result.processed += 1
        try:
            await execute_agency_deletion(session_factory, agency_id)
        except AgencyPlatformException as e:
            result.failed += 1
            result.failed_agency_ids.append(agency_id)
            logger.warning("Deletion of agency %s skipped: %s", agency_id, e.message)
        except Exception:
            result.failed += 1
            result.failed_agency_ids.append(agency_id)
            logger.exception("Deletion of agency %s failed", agency_id)
        else:
            result.deleted += 1
    add_span_attributes(
        sweep_processed=result.processed,
        sweep_deleted=result.deleted,
        sweep_failed=result.failed,
    )
    logger.info(
        "Deletion sweep: processed=%s deleted=%s failed=%s",
        result.processed,
        result.deleted,
        result.failed,
    )
    return result
