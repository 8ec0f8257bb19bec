# app/core/context.py

import contextvars

request_id_ctx = contextvars.ContextVar("request_id", default=None)
tenant_id_ctx = contextvars.ContextVar("tenant_id", default=None)
