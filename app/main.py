# app/main.py

import logging

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from app.api.dependencies import require_internal_auth
from app.api.middleware import (
    AccessLogMiddleware,
    RequestIdMiddleware,
    TenantContextMiddleware,
)
from app.api.routers import audit, contacts, health
from app.config.logging import configure_logging
from app.config.settings import get_settings
from app.infrastructure.database.session import DatabaseNotConfiguredError
from app.security.exceptions import AuthenticationError, AuthorizationError

logger = logging.getLogger(__name__)

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    debug=settings.debug,
)

# Middleware order: last added runs first (outermost). Request flow: RequestId -> TenantContext -> AccessLog.
app.add_middleware(AccessLogMiddleware)
app.add_middleware(TenantContextMiddleware)
app.add_middleware(RequestIdMiddleware)


@app.exception_handler(AuthenticationError)
async def authentication_error_handler(request, exc: AuthenticationError):
    return JSONResponse(
        status_code=401,
        content={"ok": False, "error": "unauthorized", "message": exc.message},
    )


@app.exception_handler(AuthorizationError)
async def authorization_error_handler(request, exc: AuthorizationError):
    return JSONResponse(
        status_code=403,
        content={"ok": False, "error": "forbidden", "message": exc.message},
    )


@app.exception_handler(DatabaseNotConfiguredError)
async def database_not_configured_handler(request, exc: DatabaseNotConfiguredError):
    return JSONResponse(status_code=503, content={"ok": False, "error": "database_unavailable"})


@app.exception_handler(Exception)
async def unexpected_error_handler(request, exc: Exception):
    logger.error("unhandled_error", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"ok": False, "error": "internal_error"},
    )


# Routers: /health (open), /audit and /contacts (internal auth)
internal = [Depends(require_internal_auth)]

app.include_router(health.router)
app.include_router(audit.router, prefix="/audit", dependencies=internal)
app.include_router(contacts.router, prefix="/contacts", dependencies=internal)
