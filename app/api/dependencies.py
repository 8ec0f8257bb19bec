"""FastAPI dependency injection: settings, compliance gateway, repositories, tenant, actor, request_id."""

from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.compliance_gateway import ComplianceGateway
from app.config.settings import AppSettings, get_settings
from app.governance.audit_logger import AuditLogger
from app.governance.audit_models import AuditDefaults
from app.infrastructure.database.audit_repository_db import DbAuditEventReader, SqlAuditSink
from app.infrastructure.database.contact_repository import DbContactRepository
from app.infrastructure.database.session import get_db, get_engine
from app.security.internal_auth import verify_agent_secret
from app.security.policy_client import PolicyClient

DEFAULT_ACTOR_ROLE = "user"


@dataclass(frozen=True)
class ActorContext:
    """Who is acting, as asserted by the upstream caller's headers."""

    role: str
    actor_id: Optional[str] = None
    email: Optional[str] = None
    ip: Optional[str] = None


def get_policy_client(settings: Annotated[AppSettings, Depends(get_settings)]) -> PolicyClient:
    return PolicyClient(opa_url=settings.opa_url)


def get_audit_logger(settings: Annotated[AppSettings, Depends(get_settings)]) -> AuditLogger:
    return AuditLogger(
        sink=SqlAuditSink(engine_provider=get_engine),
        defaults=AuditDefaults(
            schema_version=settings.schema_version,
            policy_version=settings.policy_version,
        ),
    )


def get_compliance_gateway(
    policy_client: Annotated[PolicyClient, Depends(get_policy_client)],
    audit_logger: Annotated[AuditLogger, Depends(get_audit_logger)],
) -> ComplianceGateway:
    return ComplianceGateway(policy_client=policy_client, audit_logger=audit_logger)


def get_contact_repository(db: Annotated[AsyncSession, Depends(get_db)]) -> DbContactRepository:
    return DbContactRepository(session=db)


def get_audit_reader(db: Annotated[AsyncSession, Depends(get_db)]) -> DbAuditEventReader:
    return DbAuditEventReader(session=db)


def require_internal_auth(
    settings: Annotated[AppSettings, Depends(get_settings)],
    x_agent_secret: Annotated[Optional[str], Header(alias="X-Agent-Secret")] = None,
) -> None:
    """Raises AuthenticationError / AuthorizationError; mapped to 401 / 403 in main."""
    verify_agent_secret(x_agent_secret, settings.agent_api_secret)


def get_tenant_id(request: Request) -> str:
    """Extract tenant_id from request.state (set by middleware)."""
    return request.state.tenant_id


def get_request_id(request: Request) -> str:
    """Extract request_id from request.state (set by middleware)."""
    return getattr(request.state, "request_id", "") or ""


def get_actor(
    request: Request,
    x_user_role: Annotated[Optional[str], Header(alias="X-User-Role")] = None,
    x_user_id: Annotated[Optional[str], Header(alias="X-User-Id")] = None,
    x_user_email: Annotated[Optional[str], Header(alias="X-User-Email")] = None,
) -> ActorContext:
    return ActorContext(
        role=(x_user_role or "").strip() or DEFAULT_ACTOR_ROLE,
        actor_id=x_user_id or None,
        email=x_user_email or None,
        ip=request.client.host if request.client else None,
    )
