"""Unit tests for ConsultationService (visibility, drafts, completion and versions)."""

import pytest
from fakes import ADMIN_ID, MEMBER_ID, OTHER_AGENCY_ID, FakeBackend, make_caller

from app.application.use_cases import ConsultationService
from app.application.use_cases.consultations.consultation_operations import changed_fields
from app.domain.enums import ConsultationStatus, MemberRole
from app.domain.exceptions import (
    AuthorizationException,
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from app.infrastructure.cache import QueryCache

MEMBER = make_caller(MemberRole.MEMBER)
ADMIN = make_caller(MemberRole.ADMIN)


def _service(backend: FakeBackend, cache=None) -> ConsultationService:
    return ConsultationService(backend.consultation_repo(), backend.activity_repo(), cache)


def test_changed_fields_first_version_lists_filled_fields() -> None:
    after = {"business_name": "Bakery", "email": "", "primary_goals": [], "industry": "Food"}
    assert changed_fields(None, after) == ["business_name", "industry"]


def test_changed_fields_compares_snapshots() -> None:
    before = {"business_name": "Bakery", "industry": "Food"}
    after = {"business_name": "Bakery & Co", "industry": "Food", "timeline": "Q3"}
    assert changed_fields(before, after) == ["business_name", "timeline"]


class TestCreateAndRead:
    async def test_member_creates_own_consultation(self, backend: FakeBackend) -> None:
        created = await _service(backend).create_consultation(MEMBER, {"business_name": "Bakery"})
        assert created.user_id == MEMBER_ID
        assert created.status == ConsultationStatus.DRAFT
        assert backend.actions() == ["consultation.created"]

    async def test_unknown_field_rejected(self, backend: FakeBackend) -> None:
        with pytest.raises(ValidationException):
            await _service(backend).create_consultation(MEMBER, {"user_id": "someone-else"})

    async def test_member_sees_only_own(self, backend: FakeBackend) -> None:
        own = backend.add_consultation(MEMBER_ID)
        backend.add_consultation(ADMIN_ID)
        svc = _service(backend)
        assert [c.id for c in await svc.list_consultations(MEMBER)] == [own.id]
        assert len(await svc.list_consultations(ADMIN)) == 2

    async def test_list_filters_by_status(self, backend: FakeBackend) -> None:
        backend.add_consultation(MEMBER_ID)
        done = backend.add_consultation(MEMBER_ID, status=ConsultationStatus.COMPLETED)
        result = await _service(backend).list_consultations(
            ADMIN, status=ConsultationStatus.COMPLETED
        )
        assert [c.id for c in result] == [done.id]

    async def test_other_members_consultation_is_not_found(self, backend: FakeBackend) -> None:
        theirs = backend.add_consultation(ADMIN_ID)
        with pytest.raises(ResourceNotFoundException):
            await _service(backend).get_consultation(MEMBER, theirs.id)

    async def test_other_agency_consultation_is_not_found(self, backend: FakeBackend) -> None:
        foreign = backend.add_consultation("user-x", OTHER_AGENCY_ID)
        with pytest.raises(ResourceNotFoundException):
            await _service(backend).get_consultation(ADMIN, foreign.id)


class TestUpdate:
    async def test_admin_edits_any_consultation(self, backend: FakeBackend) -> None:
        theirs = backend.add_consultation(MEMBER_ID)
        updated = await _service(backend).update_consultation(
            ADMIN, theirs.id, {"business_name": "Renamed"}
        )
        assert updated.business_name == "Renamed"

    async def test_archived_consultation_is_read_only(self, backend: FakeBackend) -> None:
        archived = backend.add_consultation(MEMBER_ID, status=ConsultationStatus.ARCHIVED)
        with pytest.raises(ConflictException):
            await _service(backend).update_consultation(MEMBER, archived.id, {"timeline": "Q4"})

    async def test_cached_get_sees_update(self, backend: FakeBackend) -> None:
        own = backend.add_consultation(MEMBER_ID, business_name="Old")
        svc = _service(backend, QueryCache())
        await svc.get_consultation(MEMBER, own.id)
        await svc.update_consultation(MEMBER, own.id, {"business_name": "New"})
        assert (await svc.get_consultation(MEMBER, own.id)).business_name == "New"


class TestDraftsAndVersions:
    async def test_save_and_read_draft(self, backend: FakeBackend) -> None:
        own = backend.add_consultation(MEMBER_ID)
        svc = _service(backend)
        await svc.save_draft(MEMBER, own.id, {"contact_info": {"name": "Sam"}, "auto_saved": True})
        draft = await svc.save_draft(MEMBER, own.id, {"draft_notes": "call back"})
        assert draft.contact_info == {"name": "Sam"}
        assert draft.draft_notes == "call back"
        assert (await svc.get_draft(MEMBER, own.id)) == draft

    async def test_draft_rejects_unknown_section(self, backend: FakeBackend) -> None:
        own = backend.add_consultation(MEMBER_ID)
        with pytest.raises(ValidationException):
            await _service(backend).save_draft(MEMBER, own.id, {"status": "completed"})

    async def test_complete_creates_numbered_versions(self, backend: FakeBackend) -> None:
        own = backend.add_consultation(MEMBER_ID, business_name="Bakery", industry="Food")
        svc = _service(backend)
        await svc.save_draft(MEMBER, own.id, {"draft_notes": "wip"})

        first = await svc.complete_consultation(MEMBER, own.id, "Initial")
        assert first.version_number == 1
        assert first.status == ConsultationStatus.COMPLETED
        assert first.changed_fields == ["business_name", "industry"]
        assert await svc.get_draft(MEMBER, own.id) is None

        await svc.update_consultation(MEMBER, own.id, {"timeline": "Q3"})
        second = await svc.complete_consultation(MEMBER, own.id)
        assert second.version_number == 2
        assert second.changed_fields == ["timeline"]
        assert [v.version_number for v in await svc.list_versions(MEMBER, own.id)] == [1, 2]

    async def test_cannot_complete_converted(self, backend: FakeBackend) -> None:
        converted = backend.add_consultation(MEMBER_ID, status=ConsultationStatus.CONVERTED)
        with pytest.raises(ConflictException):
            await _service(backend).complete_consultation(MEMBER, converted.id)


class TestDelete:
    async def test_member_deletes_own(self, backend: FakeBackend) -> None:
        own = backend.add_consultation(MEMBER_ID)
        await _service(backend).delete_consultation(MEMBER, own.id)
        assert own.id not in backend.consultations
        assert backend.actions() == ["consultation.deleted"]

    async def test_admin_deletes_any(self, backend: FakeBackend) -> None:
        theirs = backend.add_consultation(MEMBER_ID)
        await _service(backend).delete_consultation(ADMIN, theirs.id)
        assert theirs.id not in backend.consultations

    async def test_member_cannot_touch_others(self, backend: FakeBackend) -> None:
        theirs = backend.add_consultation(ADMIN_ID)
        with pytest.raises(ResourceNotFoundException):
            await _service(backend).delete_consultation(MEMBER, theirs.id)


async def test_modify_check_without_edit_permission(backend: FakeBackend, monkeypatch) -> None:
    """A caller who can view but not edit gets AuthorizationException, not NotFound."""
    from app.application.use_cases.consultations import consultation_operations

    theirs = backend.add_consultation(MEMBER_ID)
    monkeypatch.setattr(
        consultation_operations, "can_modify_resource", lambda *args: False
    )
    with pytest.raises(AuthorizationException):
        await _service(backend).update_consultation(ADMIN, theirs.id, {"timeline": "Q1"})
