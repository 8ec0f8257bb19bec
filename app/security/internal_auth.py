"""Shared-secret gate for internal service calls. No FastAPI."""

import hmac
from typing import Optional

from app.security.exceptions import AuthenticationError, AuthorizationError


def verify_agent_secret(provided: Optional[str], expected: str) -> None:
    """
    Raise AuthenticationError when no secret was sent, AuthorizationError when it
    does not match. An unconfigured expected secret rejects every caller.
    """
    if not provided:
        raise AuthenticationError("X-Agent-Secret header required")
    if not expected or not hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        raise AuthorizationError("Invalid secret")
