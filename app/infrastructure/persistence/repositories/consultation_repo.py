"""Consultation repository: consultations, their draft and versions. Agency-scoped."""

from __future__ import annotations

from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.consultation import (
    ConsultationDraftResult,
    ConsultationResult,
    ConsultationVersionResult,
)
from app.domain.enums import ConsultationStatus
from app.infrastructure.persistence.models.consultation import (
    Consultation,
    ConsultationDraft,
    ConsultationVersion,
)
from app.infrastructure.persistence.repositories.base import AgencyScopedRepository
from app.shared.utils.datetime import ensure_utc

_DRAFT_FIELDS = (
    "contact_info",
    "business_context",
    "pain_points",
    "goals_objectives",
    "draft_notes",
    "auto_saved",
)


def _consultation_to_result(c: Consultation) -> ConsultationResult:
    return ConsultationResult(
        id=c.id,
        agency_id=c.agency_id,
        user_id=c.user_id,
        status=ConsultationStatus(c.status),
        business_name=c.business_name,
        contact_person=c.contact_person,
        email=c.email,
        phone=c.phone,
        website=c.website,
        industry=c.industry,
        business_type=c.business_type,
        website_status=c.website_status,
        primary_challenges=list(c.primary_challenges or []),
        urgency_level=c.urgency_level,
        primary_goals=list(c.primary_goals or []),
        budget_range=c.budget_range,
        timeline=c.timeline,
        design_styles=list(c.design_styles or []),
        admired_websites=list(c.admired_websites or []),
        consultation_notes=c.consultation_notes,
        created_at=ensure_utc(c.created_at),
        updated_at=ensure_utc(c.updated_at),
    )


def _draft_to_result(d: ConsultationDraft) -> ConsultationDraftResult:
    return ConsultationDraftResult(
        id=d.id,
        consultation_id=d.consultation_id,
        contact_info=dict(d.contact_info or {}),
        business_context=dict(d.business_context or {}),
        pain_points=dict(d.pain_points or {}),
        goals_objectives=dict(d.goals_objectives or {}),
        draft_notes=d.draft_notes,
        auto_saved=d.auto_saved,
        updated_at=ensure_utc(d.updated_at),
    )


def _version_to_result(v: ConsultationVersion) -> ConsultationVersionResult:
    return ConsultationVersionResult(
        id=v.id,
        consultation_id=v.consultation_id,
        version_number=v.version_number,
        status=ConsultationStatus(v.status),
        snapshot=dict(v.snapshot or {}),
        change_summary=v.change_summary,
        changed_fields=list(v.changed_fields or []),
        created_at=ensure_utc(v.created_at),
    )


class ConsultationRepository(AgencyScopedRepository[Consultation]):
    """Consultations of one agency. Drafts and versions carry agency_id and are filtered on it too."""

    def __init__(self, db: AsyncSession, agency_id: str) -> None:
        super().__init__(db, Consultation, agency_id)

    async def get(self, consultation_id: str) -> ConsultationResult | None:
        row = await self.get_by_id(consultation_id)
        return _consultation_to_result(row) if row else None

    async def list_consultations(
        self,
        *,
        user_id: str | None = None,
        status: str | None = None,
        limit: int | None = 50,
        offset: int = 0,
    ) -> list[ConsultationResult]:
        """Most recently updated first. limit=None returns every row."""
        stmt = self._scoped()
        if user_id is not None:
            stmt = stmt.where(Consultation.user_id == user_id)
        if status is not None:
            stmt = stmt.where(Consultation.status == status)
        stmt = stmt.order_by(Consultation.updated_at.desc(), Consultation.id.asc()).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.db.execute(stmt)
        return [_consultation_to_result(c) for c in result.scalars().all()]

    async def create_consultation(
        self, user_id: str, fields: dict[str, Any]
    ) -> ConsultationResult:
        consultation = Consultation(
            agency_id=self.agency_id,
            user_id=user_id,
            created_by=user_id,
            status=ConsultationStatus.DRAFT.value,
            **fields,
        )
        created = await self.create(consultation)
        return _consultation_to_result(created)

    async def update_consultation(
        self, consultation_id: str, changes: dict[str, Any]
    ) -> ConsultationResult | None:
        row = await self.get_by_id(consultation_id)
        if row is None:
            return None
        self._apply(row, changes)
        updated = await self.update(row)
        return _consultation_to_result(updated)

    async def delete_consultation(self, consultation_id: str) -> bool:
        row = await self.get_by_id(consultation_id)
        if row is None:
            return False
        await self.db.execute(
            delete(ConsultationDraft).where(
                ConsultationDraft.consultation_id == consultation_id,
                ConsultationDraft.agency_id == self.agency_id,
            )
        )
        await self.db.execute(
            delete(ConsultationVersion).where(
                ConsultationVersion.consultation_id == consultation_id,
                ConsultationVersion.agency_id == self.agency_id,
            )
        )
        await self.delete(row)
        return True

    async def _get_draft_row(self, consultation_id: str) -> ConsultationDraft | None:
        result = await self.db.execute(
            select(ConsultationDraft).where(
                ConsultationDraft.consultation_id == consultation_id,
                ConsultationDraft.agency_id == self.agency_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_draft(self, consultation_id: str) -> ConsultationDraftResult | None:
        row = await self._get_draft_row(consultation_id)
        return _draft_to_result(row) if row else None

    async def upsert_draft(
        self, consultation_id: str, data: dict[str, Any]
    ) -> ConsultationDraftResult:
        """Create the draft or overwrite the given sections of the existing one."""
        values = {k: v for k, v in data.items() if k in _DRAFT_FIELDS}
        row = await self._get_draft_row(consultation_id)
        if row is None:
            row = ConsultationDraft(
                consultation_id=consultation_id, agency_id=self.agency_id, **values
            )
            self.db.add(row)
        else:
            self._apply(row, values)
        await self.db.flush()
        await self.db.refresh(row)
        return _draft_to_result(row)

    async def delete_draft(self, consultation_id: str) -> None:
        await self.db.execute(
            delete(ConsultationDraft).where(
                ConsultationDraft.consultation_id == consultation_id,
                ConsultationDraft.agency_id == self.agency_id,
            )
        )

    async def list_drafts(self) -> list[ConsultationDraftResult]:
        result = await self.db.execute(
            select(ConsultationDraft)
            .where(ConsultationDraft.agency_id == self.agency_id)
            .order_by(ConsultationDraft.updated_at.desc())
        )
        return [_draft_to_result(d) for d in result.scalars().all()]

    async def create_version(
        self,
        consultation: ConsultationResult,
        *,
        created_by: str,
        change_summary: str | None,
        changed_fields: list[str],
    ) -> ConsultationVersionResult:
        result = await self.db.execute(
            select(func.max(ConsultationVersion.version_number)).where(
                ConsultationVersion.consultation_id == consultation.id,
                ConsultationVersion.agency_id == self.agency_id,
            )
        )
        current = result.scalar()
        version = ConsultationVersion(
            consultation_id=consultation.id,
            agency_id=self.agency_id,
            version_number=(current or 0) + 1,
            snapshot=consultation.snapshot(),
            status=consultation.status.value,
            change_summary=change_summary,
            changed_fields=changed_fields,
            created_by=created_by,
        )
        self.db.add(version)
        await self.db.flush()
        await self.db.refresh(version)
        return _version_to_result(version)

    async def list_versions(
        self, consultation_id: str | None = None
    ) -> list[ConsultationVersionResult]:
        """Versions in ascending version_number; all of the agency's when consultation_id is None."""
        stmt = select(ConsultationVersion).where(
            ConsultationVersion.agency_id == self.agency_id
        )
        if consultation_id is not None:
            stmt = stmt.where(ConsultationVersion.consultation_id == consultation_id)
        result = await self.db.execute(
            stmt.order_by(
                ConsultationVersion.consultation_id.asc(),
                ConsultationVersion.version_number.asc(),
            )
        )
        return [_version_to_result(v) for v in result.scalars().all()]
