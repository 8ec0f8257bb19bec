"""Tests for GET /audit: tenant scoping, limit handling, failure response."""

from unittest.mock import AsyncMock

from httpx import AsyncClient


async def test_list_audit_events_defaults(async_client: AsyncClient, internal_headers, audit_reader):
    audit_reader.list_recent = AsyncMock(return_value=[{"action": "delete", "result": "failure"}])
    r = await async_client.get("/audit", headers=internal_headers)
    assert r.status_code == 200
    assert r.json() == {"ok": True, "data": [{"action": "delete", "result": "failure"}]}
    audit_reader.list_recent.assert_awaited_once_with("test-tenant-1", 50)


async def test_list_audit_events_passes_limit(async_client: AsyncClient, internal_headers, audit_reader):
    r = await async_client.get("/audit?limit=500", headers=internal_headers)
    assert r.status_code == 200
    audit_reader.list_recent.assert_awaited_once_with("test-tenant-1", 500)


async def test_list_audit_events_failure(async_client: AsyncClient, internal_headers, audit_reader):
    audit_reader.list_recent = AsyncMock(side_effect=ConnectionError("db down"))
    r = await async_client.get("/audit", headers=internal_headers)
    assert r.status_code == 500
    assert r.json() == {"ok": False, "error": "audit_list_failed"}


async def test_list_audit_events_requires_internal_auth(async_client: AsyncClient, tenant_headers):
    r = await async_client.get("/audit", headers=tenant_headers)
    assert r.status_code == 401
