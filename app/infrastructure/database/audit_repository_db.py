"""DB-backed audit sink and reader. Writes and reads the audit_events table."""

from typing import Any, Callable, Dict, List

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from app.governance.audit_models import NormalizedAuditRow
from app.infrastructure.database.models import AuditEvent

INSERT_AUDIT_EVENT = text(
    """
    INSERT INTO audit_events
      (tenant_id, event_type, event_category, actor_id, actor_email, actor_role, actor_ip,
       target_type, target_id, target_name, action, result, changes, metadata, occurred_at)
    VALUES (:tenant_id, :event_type, :event_category, :actor_id, :actor_email, :actor_role, :actor_ip,
            :target_type, :target_id, :target_name, :action, :result,
            CAST(:changes AS JSONB), CAST(:metadata AS JSONB), NOW())
    """
)

MAX_LIST_LIMIT = 200


class SqlAuditSink:
    """
    Implements AuditSink with one parameterized insert per event.
    The engine is resolved per write so a missing database surfaces as a write failure.
    """

    def __init__(self, engine_provider: Callable[[], AsyncEngine]) -> None:
        self._engine_provider = engine_provider

    async def insert(self, row: NormalizedAuditRow) -> None:
        params = dict(zip(NormalizedAuditRow.COLUMNS, row.as_params()))
        async with self._engine_provider().begin() as conn:
            await conn.execute(INSERT_AUDIT_EVENT, params)


class DbAuditEventReader:
    """Tenant-scoped read side for audit review."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_recent(self, tenant_id: str, limit: int) -> List[Dict[str, Any]]:
        """Latest events for the tenant, newest first."""
        stmt = (
            select(AuditEvent)
            .where(AuditEvent.tenant_id == tenant_id)
            .order_by(AuditEvent.occurred_at.desc())
            .limit(max(1, min(limit, MAX_LIST_LIMIT)))
        )
        result = await self._session.execute(stmt)
        return [_to_dict(orm) for orm in result.scalars().all()]


def _to_dict(orm: AuditEvent) -> Dict[str, Any]:
    return {
        "id": str(orm.id),
        "occurred_at": orm.occurred_at.isoformat() if orm.occurred_at else None,
        "event_type": orm.event_type,
        "event_category": orm.event_category,
        "actor_id": orm.actor_id,
        "actor_role": orm.actor_role,
        "action": orm.action,
        "result": orm.result,
        "target_type": orm.target_type,
        "target_id": orm.target_id,
        "target_name": orm.target_name,
        "metadata": orm.metadata_,
    }
