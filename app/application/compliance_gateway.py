"""Enforcement + audit facade used by routes. Delegation only; no HTTP, no FastAPI."""

from app.governance.audit_logger import AuditLogger
from app.governance.audit_models import AuditEventInput
from app.security.policy_client import PolicyClient
from app.security.policy_models import PolicyEvaluation, PolicyQuery


class ComplianceGateway:
    """
    Routes call check_policy before a sensitive mutation and record_audit afterwards
    on every branch taken: success, denial, validation failure or error.
    """

    def __init__(self, policy_client: PolicyClient, audit_logger: AuditLogger) -> None:
        self._policy_client = policy_client
        self._audit_logger = audit_logger

    @property
    def policy_enforced(self) -> bool:
        return self._policy_client.enforced

    async def check_policy(self, query: PolicyQuery) -> bool:
        return await self._policy_client.check_policy(query)

    async def evaluate_policy(self, query: PolicyQuery) -> PolicyEvaluation:
        return await self._policy_client.evaluate(query)

    async def record_audit(self, event: AuditEventInput) -> None:
        """Fire-and-forget; never raises."""
        await self._audit_logger.record_audit(event)
