"""Governance: compliance audit trail (normalization and best-effort persistence). No FastAPI."""

from app.governance.audit_logger import AuditLogger
from app.governance.audit_models import (
    AuditAction,
    AuditDefaults,
    AuditEventInput,
    AuditOutcome,
    AuditResource,
    AuditResult,
    EventCategory,
    NormalizedAuditRow,
    PolicyDecisionTag,
)
from app.governance.audit_normalizer import normalize_audit_event, normalize_outcome

__all__ = [
    "AuditAction",
    "AuditDefaults",
    "AuditEventInput",
    "AuditLogger",
    "AuditOutcome",
    "AuditResource",
    "AuditResult",
    "EventCategory",
    "NormalizedAuditRow",
    "PolicyDecisionTag",
    "normalize_audit_event",
    "normalize_outcome",
]
