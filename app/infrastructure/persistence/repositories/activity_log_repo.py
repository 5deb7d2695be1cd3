"""Agency activity log and proposal template repositories. Agency-scoped."""

from __future__ import annotations

from sqlalchemy import null, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.activity import ActivityEntry, ActivityResult, TemplateResult
from app.infrastructure.persistence.models.activity_log import AgencyActivityLog
from app.infrastructure.persistence.models.template import AgencyProposalTemplate
from app.infrastructure.persistence.repositories.base import AgencyScopedRepository
from app.shared.utils.datetime import ensure_utc


def _activity_to_result(a: AgencyActivityLog) -> ActivityResult:
    return ActivityResult(
        id=a.id,
        agency_id=a.agency_id,
        action=a.action,
        entity_type=a.entity_type,
        created_at=ensure_utc(a.created_at),
        user_id=a.user_id,
        entity_id=a.entity_id,
    )


class ActivityLogRepository(AgencyScopedRepository[AgencyActivityLog]):
    """Append-only activity log of one agency."""

    def __init__(self, db: AsyncSession, agency_id: str) -> None:
        super().__init__(db, AgencyActivityLog, agency_id)

    async def log(
        self,
        entry: ActivityEntry,
        *,
        user_id: str | None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> None:
        self.db.add(
            AgencyActivityLog(
                agency_id=self.agency_id,
                user_id=user_id,
                action=entry.action,
                entity_type=entry.entity_type,
                entity_id=entry.entity_id,
                old_values=entry.old_values,
                new_values=entry.new_values,
                ip_address=ip_address,
                user_agent=user_agent,
                metadata_=dict(entry.metadata),
            )
        )
        await self.db.flush()

    async def list_recent(self, limit: int) -> list[ActivityResult]:
        result = await self.db.execute(
            self._scoped()
            .order_by(AgencyActivityLog.created_at.desc(), AgencyActivityLog.id.desc())
            .limit(limit)
        )
        return [_activity_to_result(a) for a in result.scalars().all()]

    async def strip_personal_data(self) -> int:
        """Null who/where/what-changed columns; action, entity_type and created_at stay."""
        result = await self.db.execute(
            update(AgencyActivityLog)
            .where(AgencyActivityLog.agency_id == self.agency_id)
            .values(
                {
                    AgencyActivityLog.user_id: None,
                    AgencyActivityLog.ip_address: None,
                    AgencyActivityLog.user_agent: None,
                    AgencyActivityLog.old_values: null(),
                    AgencyActivityLog.new_values: null(),
                    AgencyActivityLog.metadata_: {},
                }
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount


class TemplateRepository(AgencyScopedRepository[AgencyProposalTemplate]):
    def __init__(self, db: AsyncSession, agency_id: str) -> None:
        super().__init__(db, AgencyProposalTemplate, agency_id)

    async def list_templates(self) -> list[TemplateResult]:
        result = await self.db.execute(
            self._scoped().order_by(
                AgencyProposalTemplate.is_default.desc(), AgencyProposalTemplate.name.asc()
            )
        )
        return [
            TemplateResult(
                id=t.id,
                name=t.name,
                is_default=t.is_default,
                sections=list(t.sections or []),
                header_content=t.header_content,
                footer_content=t.footer_content,
                settings=dict(t.settings or {}),
                created_at=ensure_utc(t.created_at),
            )
            for t in result.scalars().all()
        ]
