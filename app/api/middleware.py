"""API middleware: request ID, tenant context, access log."""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.core.context import request_id_ctx, tenant_id_ctx

logger = logging.getLogger(__name__)

TENANT_HEADER = "X-Tenant-ID"
REQUEST_ID_HEADER = "X-Request-ID"

# Paths reachable without a tenant (liveness probe, API docs).
TENANT_EXEMPT_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Generate or preserve request ID; attach to request.state, response header, and logging context."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or f"req_{uuid.uuid4().hex}"
        request.state.request_id = request_id
        request_id_ctx.set(request_id)

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class TenantContextMiddleware(BaseHTTPMiddleware):
    """Extract X-Tenant-ID; return 400 if missing; attach to request.state and request-scoped context."""

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in TENANT_EXEMPT_PATHS:
            request.state.tenant_id = None
            return await call_next(request)
        tenant_id = request.headers.get(TENANT_HEADER)
        if not tenant_id or not tenant_id.strip():
            return JSONResponse(
                status_code=400,
                content={"ok": False, "error": "tenant_required", "message": "X-Tenant-ID header is required"},
            )
        request.state.tenant_id = tenant_id.strip()
        tenant_id_ctx.set(request.state.tenant_id)
        return await call_next(request)


class AccessLogMiddleware(BaseHTTPMiddleware):
    """After response: one structured operational log line (method, path, status_code, duration)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "request_completed",
            extra={
                "request_id": getattr(request.state, "request_id", None),
                "tenant_id": getattr(request.state, "tenant_id", None),
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return response
