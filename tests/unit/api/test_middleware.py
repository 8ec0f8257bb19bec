"""Tests for API middleware and internal auth: request ID, tenant required, shared secret."""

from httpx import AsyncClient


async def test_request_id_generated(async_client: AsyncClient):
    """When X-Request-ID is not sent, response has a generated request ID."""
    r = await async_client.get("/health")
    assert r.headers["X-Request-ID"].startswith("req_")


async def test_request_id_preserved_when_passed(async_client: AsyncClient):
    r = await async_client.get("/health", headers={"X-Request-ID": "req-abc-123"})
    assert r.headers.get("X-Request-ID") == "req-abc-123"


async def test_tenant_required_outside_health(async_client: AsyncClient):
    r = await async_client.get("/contacts", headers={"X-Agent-Secret": "test-agent-secret"})
    assert r.status_code == 400
    assert r.json()["error"] == "tenant_required"


async def test_missing_agent_secret_is_401(async_client: AsyncClient, tenant_headers):
    r = await async_client.get("/contacts", headers=tenant_headers)
    assert r.status_code == 401
    assert r.json() == {"ok": False, "error": "unauthorized", "message": "X-Agent-Secret header required"}


async def test_wrong_agent_secret_is_403(async_client: AsyncClient, tenant_headers):
    r = await async_client.get("/contacts", headers={**tenant_headers, "X-Agent-Secret": "wrong"})
    assert r.status_code == 403
    assert r.json()["error"] == "forbidden"


async def test_request_id_flows_into_audit_metadata(async_client: AsyncClient, internal_headers, audit_sink):
    r = await async_client.get("/contacts", headers={**internal_headers, "X-Request-ID": "req_trace_1"})
    assert r.status_code == 200
    assert audit_sink.rows[-1].metadata_dict()["request_id"] == "req_trace_1"
