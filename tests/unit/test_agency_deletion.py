"""Unit tests for the agency deletion lifecycle (schedule, cancel, status, execute)."""

from datetime import timedelta

import pytest
from fakes import AGENCY_ID, NOW, OTHER_AGENCY_ID, FakeBackend, make_caller

from app.application.dtos.activity import ActivityEntry
from app.application.use_cases import AgencyDeletionService, ExecuteAgencyDeletion
from app.application.use_cases.agencies import build_deletion_status
from app.domain.enums import AgencyStatus, DeletionState, MemberRole, MembershipStatus
from app.domain.exceptions import (
    AuthorizationException,
    ConflictException,
    ValidationException,
)
from app.infrastructure.cache import QueryCache


def _service(backend: FakeBackend, now=NOW, cache=None) -> AgencyDeletionService:
    return AgencyDeletionService(
        agency_repo=backend.agency_repo(),
        activity_repo=backend.activity_repo(),
        cache=cache,
        grace_period_days=30,
        clock=lambda: now,
    )


def _executor(backend: FakeBackend, now) -> ExecuteAgencyDeletion:
    return ExecuteAgencyDeletion(
        agency_repo=backend.agency_repo(),
        membership_repo=backend.membership_repo(),
        user_repo=backend.user_repo(),
        activity_repo_factory=backend.activity_repo,
        clock=lambda: now,
    )


class TestSchedule:
    async def test_owner_schedules_with_phrase(self, backend: FakeBackend) -> None:
        backend.add_agency(name="Acme Studio")
        status = await _service(backend).schedule(make_caller(), "DELETE acme studio")

        assert status.state == DeletionState.SCHEDULED
        assert status.scheduled_for == NOW + timedelta(days=30)
        assert status.days_remaining == 30
        assert status.can_cancel is True
        assert backend.agencies[AGENCY_ID].deletion_scheduled_for == NOW + timedelta(days=30)
        assert backend.actions() == ["agency.deletion_scheduled"]

    async def test_admin_cannot_schedule(self, backend: FakeBackend) -> None:
        backend.add_agency()
        with pytest.raises(AuthorizationException):
            await _service(backend).schedule(make_caller(MemberRole.ADMIN), "delete Acme Studio")

    async def test_wrong_phrase_changes_nothing(self, backend: FakeBackend) -> None:
        backend.add_agency()
        with pytest.raises(ValidationException):
            await _service(backend).schedule(make_caller(), "delete")
        assert backend.agencies[AGENCY_ID].deletion_scheduled_for is None
        assert backend.actions() == []

    async def test_second_schedule_is_conflict(self, backend: FakeBackend) -> None:
        backend.add_agency()
        svc = _service(backend)
        await svc.schedule(make_caller(), "delete Acme Studio")
        with pytest.raises(ConflictException):
            await svc.schedule(make_caller(), "delete Acme Studio")

    async def test_lost_race_is_conflict(self, backend: FakeBackend) -> None:
        """The repository guard refuses when another request scheduled first."""
        backend.add_agency()
        svc = _service(backend)

        async def refuse(agency_id, scheduled_for):
            return False

        svc.agency_repo.schedule_deletion = refuse
        with pytest.raises(ConflictException):
            await svc.schedule(make_caller(), "delete Acme Studio")
        assert backend.actions() == []


class TestCancel:
    async def test_cancel_within_grace_period(self, backend: FakeBackend) -> None:
        backend.add_agency(deletion_scheduled_for=NOW + timedelta(days=5))
        status = await _service(backend).cancel(make_caller())
        assert status.state == DeletionState.ACTIVE
        assert backend.agencies[AGENCY_ID].deletion_scheduled_for is None
        assert backend.actions() == ["agency.deletion_cancelled"]

    async def test_cancel_after_expiry_is_conflict(self, backend: FakeBackend) -> None:
        backend.add_agency(deletion_scheduled_for=NOW - timedelta(seconds=1))
        with pytest.raises(ConflictException, match="expired"):
            await _service(backend).cancel(make_caller())

    async def test_cancel_when_not_scheduled_is_conflict(self, backend: FakeBackend) -> None:
        backend.add_agency()
        with pytest.raises(ConflictException):
            await _service(backend).cancel(make_caller())


class TestStatus:
    def test_build_status_scheduled(self, backend: FakeBackend) -> None:
        agency = backend.add_agency(deletion_scheduled_for=NOW + timedelta(days=2, hours=3))
        status = build_deletion_status(agency, NOW)
        assert status.state == DeletionState.SCHEDULED
        assert status.days_remaining == 3
        assert status.can_cancel is True

    def test_build_status_expired_cannot_cancel(self, backend: FakeBackend) -> None:
        agency = backend.add_agency(deletion_scheduled_for=NOW - timedelta(hours=1))
        status = build_deletion_status(agency, NOW)
        assert status.state == DeletionState.EXPIRED
        assert status.days_remaining == 0
        assert status.can_cancel is False

    async def test_status_reflects_schedule_in_same_request(self, backend: FakeBackend) -> None:
        backend.add_agency()
        svc = _service(backend, cache=QueryCache())
        caller = make_caller()
        assert (await svc.get_deletion_status(caller)).state == DeletionState.ACTIVE
        await svc.schedule(caller, "delete Acme Studio")
        assert (await svc.get_deletion_status(caller)).state == DeletionState.SCHEDULED


class TestExecute:
    async def test_execute_after_grace_period(self, backend: FakeBackend) -> None:
        backend.add_agency(deletion_scheduled_for=NOW - timedelta(days=1))
        backend.add_agency(OTHER_AGENCY_ID, name="Other", slug="other")
        backend.add_user("u1", default_agency_id=AGENCY_ID)
        backend.add_user("u2", default_agency_id=OTHER_AGENCY_ID)
        backend.add_member("u1", MemberRole.OWNER)
        backend.add_member("u2", MemberRole.OWNER, agency_id=OTHER_AGENCY_ID)
        await backend.activity_repo().log(
            ActivityEntry(action="consultation.created", entity_type="consultation"),
            user_id="u1",
            ip_address="203.0.113.7",
            user_agent="agent",
        )

        deleted = await _executor(backend, NOW).execute(AGENCY_ID)

        assert deleted.deleted_at == NOW
        assert deleted.status == AgencyStatus.CANCELLED
        statuses = {m.agency_id: m.status for m in backend.memberships.values()}
        assert statuses == {
            AGENCY_ID: MembershipStatus.SUSPENDED,
            OTHER_AGENCY_ID: MembershipStatus.ACTIVE,
        }
        assert backend.activity[0]["user_id"] is None
        assert backend.activity[0]["ip_address"] is None
        assert backend.users["u1"].default_agency_id is None
        assert backend.users["u2"].default_agency_id == OTHER_AGENCY_ID

    async def test_execute_before_expiry_is_conflict(self, backend: FakeBackend) -> None:
        backend.add_agency(deletion_scheduled_for=NOW + timedelta(days=1))
        with pytest.raises(ConflictException):
            await _executor(backend, NOW).execute(AGENCY_ID)
        assert backend.agencies[AGENCY_ID].deleted_at is None

    async def test_second_execute_is_conflict(self, backend: FakeBackend) -> None:
        backend.add_agency(deletion_scheduled_for=NOW - timedelta(days=1))
        executor = _executor(backend, NOW)
        await executor.execute(AGENCY_ID)
        with pytest.raises(ConflictException):
            await executor.execute(AGENCY_ID)
