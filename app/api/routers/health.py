# app/api/routers/health.py

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.dependencies import get_compliance_gateway
from app.application.compliance_gateway import ComplianceGateway
from app.config.settings import AppSettings, get_settings
from app.infrastructure.database.session import probe_db

router = APIRouter()


@router.get("/health")
async def health(
    settings: Annotated[AppSettings, Depends(get_settings)],
    gateway: Annotated[ComplianceGateway, Depends(get_compliance_gateway)],
):
    """Liveness plus database reachability and the active schema/policy versions."""
    can_reach_db = await probe_db()
    return {
        "agent": "online" if can_reach_db else "degraded",
        "can_reach_db": can_reach_db,
        "schema_version": settings.schema_version,
        "policy_version": settings.policy_version,
        "policy_enforced": gateway.policy_enforced,
        "version": settings.version,
    }
