"""Security: policy enforcement client, internal-service auth. No FastAPI."""

from app.security.internal_auth import verify_agent_secret
from app.security.policy_client import PolicyClient
from app.security.policy_models import (
    PolicyEvaluation,
    PolicyOutcome,
    PolicyQuery,
    PolicyReason,
)

__all__ = [
    "PolicyClient",
    "PolicyEvaluation",
    "PolicyOutcome",
    "PolicyQuery",
    "PolicyReason",
    "verify_agent_secret",
]
