"""Maps caller-supplied audit input onto the fixed audit_events row. Pure functions, no I/O."""

import json
from enum import Enum
from typing import Any, Dict, Optional

from app.governance.audit_models import (
    AuditDefaults,
    AuditEventInput,
    AuditResult,
    EventCategory,
    NormalizedAuditRow,
)
from app.governance.exceptions import AuditValidationError

# Input outcome -> persisted result. Richer semantics survive in metadata.reason.
OUTCOME_TO_RESULT: Dict[str, AuditResult] = {
    "success": AuditResult.SUCCESS,
    "failure": AuditResult.FAILURE,
    "partial": AuditResult.PARTIAL,
    "conflict": AuditResult.FAILURE,
    "forbidden": AuditResult.FAILURE,
    "not_found": AuditResult.FAILURE,
}

DEFAULT_EVENT_CATEGORY = EventCategory.DATA


def normalize_outcome(outcome: Any) -> AuditResult:
    """Unknown outcomes, including non-string ones, are recorded as failures."""
    key = _plain(outcome)
    if not isinstance(key, str):
        return AuditResult.FAILURE
    return OUTCOME_TO_RESULT.get(key, AuditResult.FAILURE)


class AuditMetadataBuilder:
    """Collects optional trace fields; build() returns None when nothing was set."""

    def __init__(self) -> None:
        self._fields: Dict[str, Any] = {}

    def set(self, key: str, value: Any) -> "AuditMetadataBuilder":
        if value:
            self._fields[key] = _plain(value)
        return self

    @property
    def is_empty(self) -> bool:
        return not self._fields

    def build(self) -> Optional[Dict[str, Any]]:
        if self.is_empty:
            return None
        return dict(self._fields)


def build_metadata(event: AuditEventInput, defaults: AuditDefaults) -> Optional[Dict[str, Any]]:
    return (
        AuditMetadataBuilder()
        .set("request_id", event.request_id)
        .set("idempotency_key", event.idempotency_key)
        .set("decision", event.decision)
        .set("reason", event.reason)
        .set("schema_version", event.schema_version or defaults.schema_version)
        .set("policy_version", event.policy_version or defaults.policy_version)
        .build()
    )


def validate_audit_event(event: AuditEventInput) -> None:
    """Every event must name exactly one tenant and an actor role."""
    if not event.tenant_id or not str(event.tenant_id).strip():
        raise AuditValidationError("tenant_id must not be empty")
    if not event.actor_role or not str(event.actor_role).strip():
        raise AuditValidationError("actor_role must not be empty")


def normalize_audit_event(event: AuditEventInput, defaults: AuditDefaults) -> NormalizedAuditRow:
    """
    Build the storage row. Raises AuditValidationError for unattributable events and
    TypeError/ValueError when changes cannot be serialized.
    """
    validate_audit_event(event)
    resource = _plain(event.resource)
    metadata = build_metadata(event, defaults)
    return NormalizedAuditRow(
        tenant_id=str(event.tenant_id),
        event_type=resource,
        event_category=_plain(event.event_category or DEFAULT_EVENT_CATEGORY),
        actor_id=event.actor_id,
        actor_email=event.actor_email,
        actor_role=_plain(event.actor_role),
        actor_ip=event.actor_ip,
        target_type=_plain(event.target_type) if event.target_type is not None else resource,
        target_id=event.target_id,
        target_name=event.target_name,
        action=_plain(event.action),
        result=normalize_outcome(event.outcome).value,
        changes=json.dumps(event.changes) if event.changes is not None else None,
        metadata=json.dumps(metadata) if metadata is not None else None,
    )


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value
