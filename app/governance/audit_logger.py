"""Best-effort compliance audit writer. No FastAPI."""

import logging
from typing import Optional

from app.governance.audit_models import AuditDefaults, AuditEventInput
from app.governance.audit_normalizer import normalize_audit_event
from app.governance.audit_repository import AuditSink
from app.governance.exceptions import AuditWriteError

logger = logging.getLogger(__name__)


class AuditLogger:
    """
    Normalizes audit input and appends it to the sink.

    record_audit never raises: a broken audit path must not take down the operation
    it documents. Failures are visible only on the operational log (audit_write_failed);
    there is no retry and no dead-letter queue.
    """

    def __init__(self, sink: AuditSink, defaults: Optional[AuditDefaults] = None) -> None:
        self._sink = sink
        self._defaults = defaults or AuditDefaults()

    async def record_audit(self, event: AuditEventInput) -> None:
        try:
            await self._write(event)
        except AuditWriteError as e:
            logger.error(
                "audit_write_failed",
                exc_info=e.__cause__ or e,
                extra={
                    "tenant_id": event.tenant_id,
                    "action": _text(event.action),
                    "resource": _text(event.resource),
                    "error": e.message,
                },
            )

    async def _write(self, event: AuditEventInput) -> None:
        try:
            row = normalize_audit_event(event, self._defaults)
            await self._sink.insert(row)
        except Exception as e:
            raise AuditWriteError(f"{type(e).__name__}: {e}") from e


def _text(value) -> Optional[str]:
    return getattr(value, "value", value)
