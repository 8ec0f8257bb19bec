"""Audit sink protocol. Governance layer depends on this; infrastructure implements it."""

from typing import Protocol

from app.governance.audit_models import NormalizedAuditRow


class AuditSink(Protocol):
    """Append-only persistence target for normalized audit rows."""

    async def insert(self, row: NormalizedAuditRow) -> None:
        """Persist one row; the sink assigns occurred_at. Rows are never updated or deleted."""
        ...
