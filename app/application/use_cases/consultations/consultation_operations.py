"""Consultation operations: CRUD, auto-saved drafts, completion with versioning.

Visibility follows ownership: with consultation:view_all a member sees every
consultation of the agency, with only view_own just their own. Another
member's consultation is reported as not found.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.application.dtos.consultation import (
    CONSULTATION_FIELDS,
    ConsultationDraftResult,
    ConsultationResult,
    ConsultationVersionResult,
)
from app.application.services.activity import record_activity
from app.application.services.authorization_service import (
    allowed,
    can_access_resource,
    can_delete_resource,
    can_modify_resource,
    require,
)
from app.application.services.query_dispatch import cached_query, invalidate_entities
from app.domain.enums import ConsultationStatus, EntityType
from app.domain.exceptions import (
    AuthorizationException,
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)

if TYPE_CHECKING:
    from app.application.dtos.caller import CallerContext
    from app.application.interfaces.repositories import (
        IActivityLogRepository,
        IConsultationRepository,
    )
    from app.application.interfaces.services import IQueryCache

DRAFT_SECTIONS = ("contact_info", "business_context", "pain_points", "goals_objectives")
_CLOSED_STATUSES = frozenset({ConsultationStatus.ARCHIVED, ConsultationStatus.CONVERTED})


def _check_fields(fields: dict[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - set(CONSULTATION_FIELDS)
    if unknown:
        raise ValidationException(
            f"Unknown consultation fields: {', '.join(sorted(unknown))}"
        )
    return dict(fields)


def changed_fields(before: dict[str, Any] | None, after: dict[str, Any]) -> list[str]:
    """Field names whose value differs; with no previous snapshot, every filled field."""
    if before is None:
        return [name for name in CONSULTATION_FIELDS if after.get(name) not in (None, "", [])]
    return [name for name in CONSULTATION_FIELDS if before.get(name) != after.get(name)]


class ConsultationService:
    """Consultations of the caller's agency. Commands invalidate CONSULTATION queries."""

    def __init__(
        self,
        consultation_repo: IConsultationRepository,
        activity_repo: IActivityLogRepository | None = None,
        cache: IQueryCache | None = None,
    ) -> None:
        self.consultation_repo = consultation_repo
        self.activity_repo = activity_repo
        self.cache = cache

    def _changed(self) -> None:
        invalidate_entities(self.cache, {EntityType.CONSULTATION})

    async def _get_visible(self, caller: CallerContext, consultation_id: str) -> ConsultationResult:
        consultation = await self.consultation_repo.get(consultation_id)
        if consultation is None or not can_access_resource(
            caller.role, "consultation", consultation.user_id, caller.user_id
        ):
            raise ResourceNotFoundException("consultation", consultation_id)
        return consultation

    async def _get_modifiable(self, caller: CallerContext, consultation_id: str) -> ConsultationResult:
        consultation = await self._get_visible(caller, consultation_id)
        if not can_modify_resource(caller.role, "consultation", consultation.user_id, caller.user_id):
            raise AuthorizationException(action="consultation:edit_all")
        return consultation

    async def create_consultation(
        self, caller: CallerContext, fields: dict[str, Any]
    ) -> ConsultationResult:
        require(caller.role, "consultation:create")
        consultation = await self.consultation_repo.create_consultation(
            caller.user_id, _check_fields(fields)
        )
        self._changed()
        await record_activity(
            self.activity_repo,
            caller,
            "consultation.created",
            EntityType.CONSULTATION.value,
            consultation.id,
            new_values={"business_name": consultation.business_name},
        )
        return consultation

    @cached_query("consultation.get")
    async def get_consultation(self, caller: CallerContext, consultation_id: str) -> ConsultationResult:
        return await self._get_visible(caller, consultation_id)

    @cached_query("consultation.list")
    async def list_consultations(
        self,
        caller: CallerContext,
        *,
        status: ConsultationStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[ConsultationResult]:
        """Most recently updated first; limited to the caller's own without view_all."""
        if allowed(caller.role, "consultation:view_all"):
            owner_filter = None
        else:
            require(caller.role, "consultation:view_own")
            owner_filter = caller.user_id
        return await self.consultation_repo.list_consultations(
            user_id=owner_filter,
            status=status.value if status else None,
            limit=limit,
            offset=offset,
        )

    async def update_consultation(
        self, caller: CallerContext, consultation_id: str, changes: dict[str, Any]
    ) -> ConsultationResult:
        existing = await self._get_modifiable(caller, consultation_id)
        if existing.status in _CLOSED_STATUSES:
            raise ConflictException(
                f"Consultation is {existing.status.value} and can no longer be edited",
                consultation_id=consultation_id,
            )
        values = _check_fields(changes)
        if not values:
            return existing
        updated = await self.consultation_repo.update_consultation(consultation_id, values)
        if updated is None:
            raise ResourceNotFoundException("consultation", consultation_id)
        self._changed()
        await record_activity(
            self.activity_repo,
            caller,
            "consultation.updated",
            EntityType.CONSULTATION.value,
            consultation_id,
            new_values={"fields": sorted(values)},
        )
        return updated

    async def get_draft(
        self, caller: CallerContext, consultation_id: str
    ) -> ConsultationDraftResult | None:
        await self._get_visible(caller, consultation_id)
        return await self.consultation_repo.get_draft(consultation_id)

    async def save_draft(
        self, caller: CallerContext, consultation_id: str, data: dict[str, Any]
    ) -> ConsultationDraftResult:
        """Upsert the single auto-saved draft of a consultation."""
        await self._get_modifiable(caller, consultation_id)
        unknown = set(data) - {*DRAFT_SECTIONS, "draft_notes", "auto_saved"}
        if unknown:
            raise ValidationException(f"Unknown draft fields: {', '.join(sorted(unknown))}")
        draft = await self.consultation_repo.upsert_draft(consultation_id, data)
        self._changed()
        return draft

    async def complete_consultation(
        self,
        caller: CallerContext,
        consultation_id: str,
        change_summary: str | None = None,
    ) -> ConsultationVersionResult:
        """Mark completed, snapshot it as the next version and drop the draft."""
        existing = await self._get_modifiable(caller, consultation_id)
        if existing.status in _CLOSED_STATUSES:
            raise ConflictException(
                f"Consultation is {existing.status.value} and cannot be completed",
                consultation_id=consultation_id,
            )
        completed = await self.consultation_repo.update_consultation(
            consultation_id, {"status": ConsultationStatus.COMPLETED.value}
        )
        if completed is None:
            raise ResourceNotFoundException("consultation", consultation_id)
        versions = await self.consultation_repo.list_versions(consultation_id)
        previous = versions[-1].snapshot if versions else None
        version = await self.consultation_repo.create_version(
            completed,
            created_by=caller.user_id,
            change_summary=change_summary,
            changed_fields=changed_fields(previous, completed.snapshot()),
        )
        await self.consultation_repo.delete_draft(consultation_id)
        self._changed()
        await record_activity(
            self.activity_repo,
            caller,
            "consultation.completed",
            EntityType.CONSULTATION.value,
            consultation_id,
            new_values={"version_number": version.version_number},
        )
        return version

    @cached_query("consultation.versions")
    async def list_versions(
        self, caller: CallerContext, consultation_id: str
    ) -> list[ConsultationVersionResult]:
        await self._get_visible(caller, consultation_id)
        return await self.consultation_repo.list_versions(consultation_id)

    async def delete_consultation(self, caller: CallerContext, consultation_id: str) -> None:
        existing = await self._get_visible(caller, consultation_id)
        if not can_delete_resource(caller.role, "consultation", existing.user_id, caller.user_id):
            raise AuthorizationException(action="consultation:delete_all")
        await self.consultation_repo.delete_consultation(consultation_id)
        self._changed()
        await record_activity(
            self.activity_repo,
            caller,
            "consultation.deleted",
            EntityType.CONSULTATION.value,
            consultation_id,
            old_values={"business_name": existing.business_name},
        )
