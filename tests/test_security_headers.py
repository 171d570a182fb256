import pytest
from httpx import AsyncClient

from tests.conftest import API


@pytest.mark.asyncio
async def test_security_headers_health_endpoint(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["database"] == "connected"

    headers = resp.headers
    assert headers["X-Frame-Options"] == "DENY"
    assert headers["X-Content-Type-Options"] == "nosniff"
    assert headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
    assert "max-age=31536000; includeSubDomains" in headers["Strict-Transport-Security"]
    assert headers["Content-Security-Policy"].startswith("default-src 'none'")
    assert "geolocation=()" in headers["Permissions-Policy"]


@pytest.mark.asyncio
async def test_docs_allow_swagger_assets(client: AsyncClient):
    resp = await client.get("/docs")
    assert "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net" in resp.headers["Content-Security-Policy"]


@pytest.mark.asyncio
async def test_request_id_is_propagated(client: AsyncClient):
    resp = await client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert resp.headers["X-Request-ID"] == "abc-123"

    generated = await client.get("/health")
    assert len(generated.headers["X-Request-ID"]) == 32


@pytest.mark.asyncio
async def test_error_body_carries_request_id(client: AsyncClient):
    resp = await client.post(
        f"{API}/auth/login",
        json={"login": "ninguem", "password": "errada"},
        headers={"X-Request-ID": "req-42"},
    )
    assert resp.status_code == 400
    assert resp.json()["request_id"] == "req-42"
    assert resp.headers["X-Frame-Options"] == "DENY"
