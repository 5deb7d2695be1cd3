"""Caller resolution: bearer token, tenant header and the writable-agency guard."""

from datetime import timedelta

from fakes import FakeBackend, make_caller
from httpx import AsyncClient

from app.api.v1.dependencies import (
    get_caller,
    get_current_agency,
    get_package_service_for_write,
)
from app.application.use_cases import PackageService
from app.main import app
from app.shared.utils.datetime import utc_now

NEW_PACKAGE = {"name": "Starter", "pricing_model": "subscription"}


async def test_missing_token_is_401(client: AsyncClient) -> None:
    response = await client.get("/api/v1/packages", headers={"X-Tenant-ID": "agency-1"})
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
    assert response.json()["error"] == "HTTP_ERROR"


async def test_expired_token_is_401(client: AsyncClient, make_token) -> None:
    token = make_token(expires_in=timedelta(minutes=-1))
    response = await client.get(
        "/api/v1/packages",
        headers={"Authorization": f"Bearer {token}", "X-Tenant-ID": "agency-1"},
    )
    assert response.status_code == 401


async def test_missing_tenant_header_is_400(client: AsyncClient, make_token) -> None:
    response = await client.get(
        "/api/v1/packages", headers={"Authorization": f"Bearer {make_token()}"}
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Missing required header: X-Tenant-ID"


async def test_malformed_tenant_header_is_400(client: AsyncClient, make_token) -> None:
    response = await client.get(
        "/api/v1/packages",
        headers={"Authorization": f"Bearer {make_token()}", "X-Tenant-ID": "agency 1;--"},
    )
    assert response.status_code == 400


def _wire(backend: FakeBackend, **agency_fields) -> None:
    agency = backend.add_agency(**agency_fields)
    app.dependency_overrides[get_caller] = lambda: make_caller()
    app.dependency_overrides[get_current_agency] = lambda: agency
    app.dependency_overrides[get_package_service_for_write] = lambda: PackageService(
        backend.package_repo(), backend.activity_repo()
    )


async def test_write_during_grace_period_is_allowed(client: AsyncClient, backend: FakeBackend) -> None:
    _wire(backend, deletion_scheduled_for=utc_now() + timedelta(days=10))
    response = await client.post("/api/v1/packages", json=NEW_PACKAGE)
    assert response.status_code == 201


async def test_write_after_grace_period_is_409(client: AsyncClient, backend: FakeBackend) -> None:
    _wire(backend, deletion_scheduled_for=utc_now() - timedelta(hours=1))
    response = await client.post("/api/v1/packages", json=NEW_PACKAGE)
    assert response.status_code == 409
    assert response.json()["error"] == "CONFLICT"
    assert backend.packages == {}
