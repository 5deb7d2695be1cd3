"""Unit tests for AgencyService (create, update, slug availability) over in-memory repositories."""

import pytest
from fakes import AGENCY_ID, OWNER_ID, FakeBackend, make_caller

from app.application.dtos.agency import AgencyCreate, AgencyUpdate
from app.application.use_cases import AgencyService
from app.domain.enums import MemberRole, MembershipStatus
from app.domain.exceptions import (
    AuthorizationException,
    ConflictException,
    ValidationException,
)
from app.infrastructure.cache import QueryCache


def _service(backend: FakeBackend, cache: QueryCache | None = None) -> AgencyService:
    return AgencyService(
        agency_repo=backend.agency_repo(),
        membership_repo=backend.membership_repo(),
        user_repo=backend.user_repo(),
        profile_repo_factory=backend.profile_repo,
        activity_repo_factory=backend.activity_repo,
        cache=cache,
    )


class TestCreateAgency:
    async def test_creates_owner_membership_profile_and_default_agency(
        self, backend: FakeBackend
    ) -> None:
        backend.add_user(OWNER_ID)
        agency = await _service(backend).create_agency(
            OWNER_ID, AgencyCreate(name="  Acme Studio  "), ip_address="203.0.113.7"
        )

        assert agency.name == "Acme Studio"
        assert agency.slug == "acme-studio"
        memberships = [m for m in backend.memberships.values() if m.agency_id == agency.id]
        assert len(memberships) == 1
        assert memberships[0].user_id == OWNER_ID
        assert memberships[0].role == MemberRole.OWNER
        assert memberships[0].status == MembershipStatus.ACTIVE
        assert agency.id in backend.profiles
        assert backend.users[OWNER_ID].default_agency_id == agency.id
        assert backend.actions(agency.id) == ["agency.created"]
        assert backend.activity[0]["ip_address"] == "203.0.113.7"

    async def test_existing_default_agency_is_kept(self, backend: FakeBackend) -> None:
        backend.add_user(OWNER_ID, default_agency_id="agency-old")
        await _service(backend).create_agency(OWNER_ID, AgencyCreate(name="Second Agency"))
        assert backend.users[OWNER_ID].default_agency_id == "agency-old"

    async def test_generated_slug_is_made_unique(self, backend: FakeBackend) -> None:
        backend.add_agency("agency-x", name="Acme", slug="acme")
        agency = await _service(backend).create_agency(OWNER_ID, AgencyCreate(name="ACME"))
        assert agency.slug == "acme-1"

    async def test_reserved_generated_slug_is_skipped(self, backend: FakeBackend) -> None:
        agency = await _service(backend).create_agency(OWNER_ID, AgencyCreate(name="Dashboard"))
        assert agency.slug == "dashboard-1"

    async def test_short_name_gets_fallback_suffix(self, backend: FakeBackend) -> None:
        agency = await _service(backend).create_agency(OWNER_ID, AgencyCreate(name="Q"))
        assert agency.slug == "q-agency"

    async def test_explicit_slug_taken_is_conflict(self, backend: FakeBackend) -> None:
        backend.add_agency("agency-x", slug="taken-slug")
        with pytest.raises(ConflictException):
            await _service(backend).create_agency(
                OWNER_ID, AgencyCreate(name="Acme", slug="taken-slug")
            )

    async def test_explicit_reserved_slug_is_invalid(self, backend: FakeBackend) -> None:
        with pytest.raises(ValidationException) as exc_info:
            await _service(backend).create_agency(
                OWNER_ID, AgencyCreate(name="Acme", slug="admin")
            )
        assert exc_info.value.details == {"field": "slug"}

    async def test_blank_name_rejected(self, backend: FakeBackend) -> None:
        with pytest.raises(ValidationException):
            await _service(backend).create_agency(OWNER_ID, AgencyCreate(name="   "))


class TestUpdateAgency:
    async def test_admin_updates_branding_and_cache_is_invalidated(
        self, backend: FakeBackend
    ) -> None:
        backend.add_agency()
        cache = QueryCache()
        svc = _service(backend, cache)
        caller = make_caller(MemberRole.ADMIN)
        assert (await svc.get_current_agency(caller)).primary_color == "#4F46E5"

        await svc.update_agency(caller, AgencyUpdate(primary_color="#000000"))

        assert (await svc.get_current_agency(caller)).primary_color == "#000000"
        assert backend.actions() == ["agency.updated"]

    async def test_member_cannot_update(self, backend: FakeBackend) -> None:
        backend.add_agency()
        with pytest.raises(AuthorizationException):
            await _service(backend).update_agency(
                make_caller(MemberRole.MEMBER), AgencyUpdate(name="New")
            )

    async def test_empty_update_changes_nothing(self, backend: FakeBackend) -> None:
        backend.add_agency()
        agency = await _service(backend).update_agency(make_caller(), AgencyUpdate())
        assert agency == backend.agencies[AGENCY_ID]
        assert backend.actions() == []


class TestSlugAvailability:
    async def test_checks(self, backend: FakeBackend) -> None:
        backend.add_agency(slug="acme-studio")
        svc = _service(backend)
        assert await svc.check_slug_available("fresh-slug") is True
        assert await svc.check_slug_available("ACME-STUDIO") is False
        assert await svc.check_slug_available("api") is False
        assert await svc.check_slug_available("x") is False
