"""Audit review router: GET /audit (latest events for the calling tenant)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from app.api.dependencies import get_audit_reader, get_tenant_id
from app.infrastructure.database.audit_repository_db import DbAuditEventReader

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_LIMIT = 50


@router.get("")
async def list_audit_events(
    limit: Annotated[int, Query()] = DEFAULT_LIMIT,
    tenant_id: Annotated[str, Depends(get_tenant_id)] = ...,
    reader: Annotated[DbAuditEventReader, Depends(get_audit_reader)] = ...,
):
    """Newest first; limit is clamped to 1..200. Payload columns (changes) are not returned."""
    try:
        rows = await reader.list_recent(tenant_id, limit)
    except Exception:
        logger.exception("audit_list_failed")
        return JSONResponse(status_code=500, content={"ok": False, "error": "audit_list_failed"})
    return {"ok": True, "data": rows}
