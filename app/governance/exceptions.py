"""Governance-layer exceptions. Typed, no HTTP."""


class GovernanceError(Exception):
    """Base for all governance-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuditValidationError(GovernanceError):
    """Raised when an audit event cannot be attributed (e.g. empty tenant_id or actor_role)."""


class AuditWriteError(GovernanceError):
    """Raised inside the audit pipeline when normalization or the sink fails. Never leaves AuditLogger."""
