"""Health endpoints and the middleware headers every response carries."""

from httpx import AsyncClient

from app.api.v1.endpoints import health
from app.domain.exceptions import SqlNotConfiguredException


async def test_health_returns_ok(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": "1.0.0"}


async def test_readiness_without_database(client: AsyncClient, monkeypatch) -> None:
    def no_database():
        raise SqlNotConfiguredException()

    monkeypatch.setattr(health, "get_session_factory", no_database)
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 503
    assert response.json() == {"status": "not_ready", "message": "Database unreachable"}


async def test_security_headers(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health")
    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"
    assert response.headers["cache-control"] == "no-store"


async def test_request_id_is_echoed(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "req-abc_123"})
    assert response.headers["x-request-id"] == "req-abc_123"
    assert response.headers["x-correlation-id"] == "req-abc_123"


async def test_unsafe_request_id_is_replaced(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/health",
        headers={"X-Request-ID": "evil id;drop", "X-Correlation-ID": "corr-1"},
    )
    assert response.headers["x-request-id"] != "evil id;drop"
    assert len(response.headers["x-request-id"]) == 36
    assert response.headers["x-correlation-id"] == "corr-1"
