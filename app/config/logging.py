# app/config/logging.py

import json
import logging
from datetime import datetime, timezone

from app.core.context import request_id_ctx, tenant_id_ctx

# Extra fields copied into the JSON line when a caller passes them via `extra=`.
_EXTRA_FIELDS = (
    "action",
    "resource",
    "target_id",
    "reason",
    "error",
    "method",
    "path",
    "status_code",
    "duration_ms",
)


class JsonFormatter(logging.Formatter):
    def format(self, record):
        log_record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "request_id": getattr(record, "request_id", None) or request_id_ctx.get(),
            "tenant_id": getattr(record, "tenant_id", None) or tenant_id_ctx.get(),
        }
        for name in _EXTRA_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_record[name] = value
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_record, default=str)


def configure_logging(log_level: str):
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    # Idempotent: re-importing the app (tests, reloaders) must not stack handlers.
    if any(isinstance(h.formatter, JsonFormatter) for h in root_logger.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)
