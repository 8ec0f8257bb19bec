"""Fixtures for API unit tests: recording audit sink, mock PDP, fake repositories, AsyncClient."""

from unittest.mock import AsyncMock

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from app.config.settings import AppSettings, get_settings
from app.governance.audit_logger import AuditLogger
from app.governance.audit_models import AuditDefaults
from app.main import app
from app.security.policy_client import PolicyClient

AGENT_SECRET = "test-agent-secret"
PDP_URL = "http://opa.test/v1/data/agent/allow"


class RecordingSink:
    """In-memory audit sink; optionally fails every insert."""

    def __init__(self):
        self.rows = []
        self.fail_with: Exception | None = None

    async def insert(self, row):
        if self.fail_with is not None:
            raise self.fail_with
        self.rows.append(row)


class FakePdp:
    """Mock transport target; `result` is returned as the PDP decision, `error` simulates an outage."""

    def __init__(self):
        self.result = True
        self.error: Exception | None = None
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(200, json={"result": self.result})


@pytest.fixture
def settings():
    return AppSettings(
        environment="test",
        database_url="",
        opa_url=PDP_URL,
        agent_api_secret=AGENT_SECRET,
        schema_version="v1-minimal",
        policy_version="live",
    )


@pytest.fixture
def audit_sink():
    return RecordingSink()


@pytest.fixture
def fake_pdp():
    return FakePdp()


@pytest.fixture
def contact_repository():
    r = AsyncMock()
    r.upsert = AsyncMock()
    r.list_by_tenant = AsyncMock(return_value=[])
    r.update_versioned = AsyncMock(return_value=None)
    r.delete = AsyncMock(return_value=True)
    return r


@pytest.fixture
def audit_reader():
    r = AsyncMock()
    r.list_recent = AsyncMock(return_value=[])
    return r


@pytest.fixture
def app_with_overrides(settings, audit_sink, fake_pdp, contact_repository, audit_reader):
    """App with settings, PDP transport, audit sink and repositories overridden for testing."""
    from app.api import dependencies

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[dependencies.get_policy_client] = lambda: PolicyClient(
        opa_url=settings.opa_url,
        transport=httpx.MockTransport(fake_pdp.handler),
    )
    app.dependency_overrides[dependencies.get_audit_logger] = lambda: AuditLogger(
        sink=audit_sink,
        defaults=AuditDefaults(
            schema_version=settings.schema_version,
            policy_version=settings.policy_version,
        ),
    )
    app.dependency_overrides[dependencies.get_contact_repository] = lambda: contact_repository
    app.dependency_overrides[dependencies.get_audit_reader] = lambda: audit_reader
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app_with_overrides):
    """Async HTTP client for testing; uses overridden app."""
    transport = ASGITransport(app=app_with_overrides)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def tenant_headers():
    return {"X-Tenant-ID": "test-tenant-1"}


@pytest.fixture
def internal_headers(tenant_headers):
    return {**tenant_headers, "X-Agent-Secret": AGENT_SECRET, "X-User-Role": "admin"}
