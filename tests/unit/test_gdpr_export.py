"""Unit tests for the agency and personal GDPR exports."""

import pytest
from fakes import AGENCY_ID, NOW, OTHER_AGENCY_ID, OWNER_ID, FakeBackend, make_caller

from app.application.dtos.activity import ActivityEntry, TemplateResult
from app.application.use_cases import AgencyExportService, UserExportService
from app.domain.enums import MemberRole
from app.domain.exceptions import AuthorizationException, ResourceNotFoundException


def _agency_export(backend: FakeBackend, agency_id: str = AGENCY_ID) -> AgencyExportService:
    return AgencyExportService(
        agency_repo=backend.agency_repo(),
        membership_repo=backend.membership_repo(),
        template_repo=backend.template_repo(agency_id),
        consultation_repo=backend.consultation_repo(agency_id),
        package_repo=backend.package_repo(agency_id),
        activity_repo=backend.activity_repo(agency_id),
        activity_log_limit=10,
    )


def _seed(backend: FakeBackend) -> None:
    backend.add_agency()
    backend.add_agency(OTHER_AGENCY_ID, name="Other", slug="other")
    backend.add_member(OWNER_ID, MemberRole.OWNER)
    backend.add_member("user-x", MemberRole.OWNER, agency_id=OTHER_AGENCY_ID)
    backend.add_consultation(OWNER_ID, business_name="Bakery", primary_goals=["more leads"])
    backend.add_consultation("user-x", OTHER_AGENCY_ID, business_name="Not ours")
    backend.add_package(name="Starter")
    backend.add_package(OTHER_AGENCY_ID, name="Foreign")
    backend.templates[AGENCY_ID] = [
        TemplateResult(
            id="tpl-1",
            name="Default",
            is_default=True,
            sections=[],
            header_content=None,
            footer_content=None,
            settings={},
            created_at=NOW,
        )
    ]


class TestAgencyExport:
    async def test_export_shape_and_isolation(self, backend: FakeBackend) -> None:
        _seed(backend)
        await backend.activity_repo().log(
            ActivityEntry(action="package.created", entity_type="agency_package"),
            user_id=OWNER_ID,
            ip_address="203.0.113.7",
        )

        data = await _agency_export(backend).export_agency_data(make_caller())

        assert data["exportVersion"] == "1.0"
        assert data["agency"]["slug"] == "acme-studio"
        assert data["agency"]["branding"]["primaryColor"] == "#4F46E5"
        assert data["agency"]["subscription"] == {"tier": "free", "status": "active"}
        assert [m["role"] for m in data["members"]] == ["owner"]
        assert [c["contactInfo"]["businessName"] for c in data["consultations"]] == ["Bakery"]
        assert data["consultations"][0]["goalsObjectives"]["primaryGoals"] == ["more leads"]
        assert [p["name"] for p in data["packages"]] == ["Starter"]
        assert [t["id"] for t in data["templates"]] == ["tpl-1"]
        assert data["activityLog"] == [
            {
                "action": "package.created",
                "entityType": "agency_package",
                "createdAt": NOW.isoformat(),
            }
        ]

    async def test_export_is_recorded(self, backend: FakeBackend) -> None:
        _seed(backend)
        await _agency_export(backend).export_agency_data(make_caller())
        assert backend.actions() == ["data.exported"]

    async def test_admin_cannot_export(self, backend: FakeBackend) -> None:
        _seed(backend)
        with pytest.raises(AuthorizationException):
            await _agency_export(backend).export_agency_data(make_caller(MemberRole.ADMIN))


class TestUserExport:
    async def test_personal_export_spans_agencies(self, backend: FakeBackend) -> None:
        _seed(backend)
        backend.add_member(OWNER_ID, MemberRole.MEMBER, agency_id=OTHER_AGENCY_ID)
        svc = UserExportService(backend.user_repo(), backend.membership_repo())

        data = await svc.export_user_data(OWNER_ID)

        assert data["user"]["id"] == OWNER_ID
        assert data["user"]["email"] == f"{OWNER_ID}@example.com"
        assert sorted((m["agencyName"], m["role"]) for m in data["memberships"]) == [
            ("Acme Studio", "owner"),
            ("Other", "member"),
        ]
        assert data["consultationsCreated"] == 1
        assert len(data["consultationIds"]) == 1

    async def test_unknown_user(self, backend: FakeBackend) -> None:
        svc = UserExportService(backend.user_repo(), backend.membership_repo())
        with pytest.raises(ResourceNotFoundException):
            await svc.export_user_data("nobody")
