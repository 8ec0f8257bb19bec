"""Audit event input and storage-ready row. Domain-level immutability."""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple


class AuditAction(str, Enum):
    CREATE = "create"
    LIST = "list"
    UPDATE = "update"
    DELETE = "delete"
    GET = "get"


class AuditResource(str, Enum):
    CONTACTS = "contacts"
    EMPLOYEES = "employees"
    AGENT_USERS = "agent_users"
    POLICIES = "policies"
    VENDORS = "vendors"
    DOCUMENTS = "documents"


class EventCategory(str, Enum):
    AUTH = "auth"
    DATA = "data"
    SYSTEM = "system"
    COMPLIANCE = "compliance"
    SECURITY = "security"


class AuditOutcome(str, Enum):
    """Outcome vocabulary accepted from callers."""

    SUCCESS = "success"
    FAILURE = "failure"
    PARTIAL = "partial"
    CONFLICT = "conflict"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"


class AuditResult(str, Enum):
    """Coarser persisted result column."""

    SUCCESS = "success"
    FAILURE = "failure"
    PARTIAL = "partial"


class PolicyDecisionTag(str, Enum):
    ALLOW = "allow"
    DENY = "deny"
    NOT_APPLICABLE = "n/a"


@dataclass(frozen=True)
class AuditEventInput:
    """
    One action attempt, as reported by the caller.

    Target fields carry identifiers and labels only. `changes` is stored as given;
    callers must keep raw personal data out of it.
    """

    tenant_id: str
    actor_role: str
    action: str
    resource: str
    outcome: str
    actor_id: Optional[str] = None
    actor_email: Optional[str] = None
    actor_ip: Optional[str] = None
    event_category: Optional[str] = None
    target_id: Optional[str] = None
    target_type: Optional[str] = None
    target_name: Optional[str] = None
    decision: Optional[str] = None
    reason: Optional[str] = None
    changes: Any = None
    request_id: Optional[str] = None
    idempotency_key: Optional[str] = None
    schema_version: Optional[str] = None
    policy_version: Optional[str] = None


@dataclass(frozen=True)
class AuditDefaults:
    """Process-wide version tags applied when the caller omits them."""

    schema_version: Optional[str] = None
    policy_version: Optional[str] = None


@dataclass(frozen=True)
class NormalizedAuditRow:
    """Storage-ready audit row. JSON columns are already serialized; occurred_at is set by the sink."""

    tenant_id: str
    event_type: str
    event_category: str
    actor_id: Optional[str]
    actor_email: Optional[str]
    actor_role: str
    actor_ip: Optional[str]
    target_type: str
    target_id: Optional[str]
    target_name: Optional[str]
    action: str
    result: str
    changes: Optional[str]
    metadata: Optional[str]

    COLUMNS = (
        "tenant_id",
        "event_type",
        "event_category",
        "actor_id",
        "actor_email",
        "actor_role",
        "actor_ip",
        "target_type",
        "target_id",
        "target_name",
        "action",
        "result",
        "changes",
        "metadata",
    )

    def as_params(self) -> Tuple[Any, ...]:
        """Column values in insert order."""
        return tuple(getattr(self, name) for name in self.COLUMNS)

    def metadata_dict(self) -> Optional[dict]:
        return json.loads(self.metadata) if self.metadata is not None else None
