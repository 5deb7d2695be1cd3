"""Packages API over in-memory repositories (caller and services overridden)."""

import pytest
from fakes import OTHER_AGENCY_ID, FakeBackend, make_caller
from httpx import AsyncClient

from app.api.v1.dependencies import (
    get_caller,
    get_package_service,
    get_package_service_for_write,
    get_writable_caller,
)
from app.application.use_cases import PackageService
from app.domain.enums import MemberRole
from app.main import app


@pytest.fixture
def as_role(backend: FakeBackend):
    """Wire the packages routes to the fakes for a caller with the given role."""

    def _wire(role: MemberRole = MemberRole.ADMIN) -> None:
        caller = make_caller(role)
        service = PackageService(backend.package_repo(), backend.activity_repo())
        app.dependency_overrides[get_caller] = lambda: caller
        app.dependency_overrides[get_writable_caller] = lambda: caller
        app.dependency_overrides[get_package_service] = lambda: service
        app.dependency_overrides[get_package_service_for_write] = lambda: service

    return _wire


async def test_create_and_list(client: AsyncClient, backend: FakeBackend, as_role) -> None:
    as_role()
    created = await client.post(
        "/api/v1/packages",
        json={"name": "Growth Plan", "pricing_model": "hybrid", "monthly_price": "149.00"},
    )
    assert created.status_code == 201
    body = created.json()
    assert body["slug"] == "growth-plan"
    assert body["monthly_price"] == "149.00"
    assert body["is_active"] is True

    listed = await client.get("/api/v1/packages")
    assert [p["id"] for p in listed.json()] == [body["id"]]


async def test_list_active_only(client: AsyncClient, backend: FakeBackend, as_role) -> None:
    as_role(MemberRole.MEMBER)
    backend.add_package(name="Live")
    backend.add_package(name="Retired", is_active=False)
    response = await client.get("/api/v1/packages", params={"active_only": "true"})
    assert [p["name"] for p in response.json()] == ["Live"]


async def test_invalid_money_is_422(client: AsyncClient, as_role) -> None:
    as_role()
    response = await client.post(
        "/api/v1/packages",
        json={"name": "Starter", "pricing_model": "subscription", "setup_fee": "12.345"},
    )
    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_member_cannot_create(client: AsyncClient, as_role) -> None:
    as_role(MemberRole.MEMBER)
    response = await client.post(
        "/api/v1/packages", json={"name": "Starter", "pricing_model": "subscription"}
    )
    assert response.status_code == 403
    assert response.json()["error"] == "PERMISSION_DENIED"


async def test_other_agency_package_is_404(client: AsyncClient, backend: FakeBackend, as_role) -> None:
    as_role()
    foreign = backend.add_package(OTHER_AGENCY_ID)
    for response in (
        await client.get(f"/api/v1/packages/{foreign.id}"),
        await client.patch(f"/api/v1/packages/{foreign.id}", json={"name": "Mine"}),
        await client.delete(f"/api/v1/packages/{foreign.id}"),
    ):
        assert response.status_code == 404
        assert response.json()["error"] == "RESOURCE_NOT_FOUND"
    assert backend.packages[foreign.id].name != "Mine"


async def test_patch_only_changes_sent_fields(
    client: AsyncClient, backend: FakeBackend, as_role
) -> None:
    as_role()
    package = backend.add_package(name="Starter", monthly_price="49.00")
    response = await client.patch(f"/api/v1/packages/{package.id}", json={"is_featured": True})
    assert response.status_code == 200
    assert response.json()["is_featured"] is True
    assert response.json()["monthly_price"] == "49.00"


async def test_reorder_delete_and_duplicate(
    client: AsyncClient, backend: FakeBackend, as_role
) -> None:
    as_role()
    first = backend.add_package(display_order=0)
    second = backend.add_package(display_order=1, name="Premium", slug="premium")

    reordered = await client.post(
        "/api/v1/packages/reorder", json={"package_ids": [second.id, first.id]}
    )
    assert reordered.status_code == 204
    assert backend.packages[second.id].display_order == 0

    duplicated = await client.post(f"/api/v1/packages/{second.id}/duplicate")
    assert duplicated.status_code == 201
    assert duplicated.json()["name"] == "Premium (Copy)"
    assert duplicated.json()["is_active"] is False

    deleted = await client.delete(f"/api/v1/packages/{first.id}")
    assert deleted.status_code == 204
    assert backend.packages[first.id].is_active is False


async def test_reorder_requires_ids(client: AsyncClient, as_role) -> None:
    as_role()
    response = await client.post("/api/v1/packages/reorder", json={"package_ids": []})
    assert response.status_code == 422
