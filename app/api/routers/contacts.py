"""Contacts API router: create, list, versioned update, policy-gated delete. Every branch is audited."""

import logging
import uuid
from typing import Annotated, Any, Optional, Type, TypeVar

from fastapi import APIRouter, Body, Depends, Header
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from app.api.dependencies import (
    ActorContext,
    get_actor,
    get_compliance_gateway,
    get_contact_repository,
    get_request_id,
    get_tenant_id,
)
from app.application.compliance_gateway import ComplianceGateway
from app.domain.schemas.contact import ContactCreateRequest, ContactResponse, ContactUpdateRequest
from app.governance.audit_models import (
    AuditAction,
    AuditEventInput,
    AuditOutcome,
    AuditResource,
    PolicyDecisionTag,
)
from app.infrastructure.database.contact_repository import DbContactRepository
from app.security.policy_models import PolicyQuery, PolicyReason

logger = logging.getLogger(__name__)

router = APIRouter()

T = TypeVar("T", bound=BaseModel)


class _Auditor:
    """Binds the request-level audit fields so each branch only states what differs."""

    def __init__(self, gateway: ComplianceGateway, tenant_id: str, actor: ActorContext, request_id: str) -> None:
        self._gateway = gateway
        self._tenant_id = tenant_id
        self._actor = actor
        self._request_id = request_id

    async def record(
        self,
        action: AuditAction,
        outcome: AuditOutcome,
        *,
        decision: PolicyDecisionTag = PolicyDecisionTag.NOT_APPLICABLE,
        target_id: Optional[str] = None,
        reason: Optional[str] = None,
        changes: Any = None,
        idempotency_key: Optional[str] = None,
    ) -> None:
        await self._gateway.record_audit(
            AuditEventInput(
                tenant_id=self._tenant_id,
                actor_id=self._actor.actor_id,
                actor_email=self._actor.email,
                actor_role=self._actor.role,
                actor_ip=self._actor.ip,
                action=action,
                resource=AuditResource.CONTACTS,
                target_id=target_id,
                outcome=outcome,
                decision=decision,
                reason=reason,
                changes=changes,
                request_id=self._request_id,
                idempotency_key=idempotency_key,
            )
        )


def get_auditor(
    gateway: Annotated[ComplianceGateway, Depends(get_compliance_gateway)],
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    actor: Annotated[ActorContext, Depends(get_actor)],
    request_id: Annotated[str, Depends(get_request_id)],
) -> _Auditor:
    return _Auditor(gateway, tenant_id, actor, request_id)


def _parse_id(raw: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(raw.strip())
    except ValueError:
        return None


def _error(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "error": error})


def _parse_body(schema: Type[T], raw: Any) -> Optional[T]:
    """Body is validated here, not by FastAPI, so malformed requests still reach the audited 400 branch."""
    if not isinstance(raw, dict):
        return None
    try:
        return schema.model_validate(raw)
    except ValidationError:
        return None


def _denial_reason(reason: PolicyReason) -> str:
    """An explicit PDP denial is policy_denied; transport and parse failures keep their own reason."""
    if reason is PolicyReason.PDP_DENIED:
        return "policy_denied"
    return reason.value


@router.post("")
async def create_contact(
    raw_body: Annotated[Optional[Any], Body()] = None,
    idempotency_key: Annotated[Optional[str], Header(alias="Idempotency-Key")] = None,
    tenant_id: Annotated[str, Depends(get_tenant_id)] = ...,
    auditor: Annotated[_Auditor, Depends(get_auditor)] = ...,
    repository: Annotated[DbContactRepository, Depends(get_contact_repository)] = ...,
):
    """Create or update by (tenant, email)."""
    idem_key = (idempotency_key or "").strip() or None
    try:
        body = _parse_body(ContactCreateRequest, raw_body)
        if body is None or not body.email or not body.name:
            await auditor.record(AuditAction.CREATE, AuditOutcome.FAILURE, reason="validation_error")
            return _error(400, "email and name are required")

        contact = await repository.upsert(tenant_id, body.email, body.name, body.phone)
        await auditor.record(
            AuditAction.CREATE,
            AuditOutcome.SUCCESS,
            target_id=str(contact.id),
            idempotency_key=idem_key,
        )
        return JSONResponse(
            status_code=201,
            content={"ok": True, "data": {"id": str(contact.id), "email": contact.email}},
        )
    except Exception:
        logger.exception("contact_create_failed")
        await auditor.record(AuditAction.CREATE, AuditOutcome.FAILURE, reason="create_failed")
        return _error(500, "create_failed")


@router.get("")
async def list_contacts(
    tenant_id: Annotated[str, Depends(get_tenant_id)] = ...,
    auditor: Annotated[_Auditor, Depends(get_auditor)] = ...,
    repository: Annotated[DbContactRepository, Depends(get_contact_repository)] = ...,
):
    """Latest 50 contacts for the tenant."""
    try:
        contacts = await repository.list_by_tenant(tenant_id)
    except Exception:
        logger.exception("contact_list_failed")
        await auditor.record(AuditAction.LIST, AuditOutcome.FAILURE, reason="list_failed")
        return _error(500, "list_failed")

    await auditor.record(AuditAction.LIST, AuditOutcome.SUCCESS)
    data = [ContactResponse.model_validate(c).model_dump(mode="json") for c in contacts]
    return {"ok": True, "data": data}


@router.put("/{contact_id}")
async def update_contact(
    contact_id: str,
    raw_body: Annotated[Optional[Any], Body()] = None,
    tenant_id: Annotated[str, Depends(get_tenant_id)] = ...,
    auditor: Annotated[_Auditor, Depends(get_auditor)] = ...,
    repository: Annotated[DbContactRepository, Depends(get_contact_repository)] = ...,
):
    """Optimistic concurrency: the caller's version must match the stored one."""
    cid = _parse_id(contact_id)
    try:
        body = _parse_body(ContactUpdateRequest, raw_body)
        if cid is None or body is None or body.version is None:
            await auditor.record(
                AuditAction.UPDATE,
                AuditOutcome.FAILURE,
                target_id=str(cid) if cid else None,
                reason="validation_error",
            )
            return _error(400, "id and version are required")

        fields = {}
        if body.name is not None:
            fields["name"] = body.name
        if "phone" in body.model_fields_set:
            fields["phone"] = body.phone
        # Field names only; values may be personal data.
        changes = {"fields": sorted(fields)}

        contact = await repository.update_versioned(tenant_id, cid, body.version, fields)
        if contact is None:
            await auditor.record(
                AuditAction.UPDATE,
                AuditOutcome.CONFLICT,
                target_id=str(cid),
                reason="version_conflict",
                changes=changes,
            )
            return _error(409, "version_conflict")

        await auditor.record(AuditAction.UPDATE, AuditOutcome.SUCCESS, target_id=str(cid), changes=changes)
        return {"ok": True, "data": {"id": str(contact.id), "email": contact.email, "version": contact.version}}
    except Exception:
        logger.exception("contact_update_failed")
        await auditor.record(
            AuditAction.UPDATE,
            AuditOutcome.FAILURE,
            target_id=str(cid) if cid else None,
            reason="update_failed",
        )
        return _error(500, "update_failed")


@router.delete("/{contact_id}")
async def delete_contact(
    contact_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)] = ...,
    actor: Annotated[ActorContext, Depends(get_actor)] = ...,
    gateway: Annotated[ComplianceGateway, Depends(get_compliance_gateway)] = ...,
    auditor: Annotated[_Auditor, Depends(get_auditor)] = ...,
    repository: Annotated[DbContactRepository, Depends(get_contact_repository)] = ...,
):
    """Policy-gated: the PDP must allow delete on contacts for the caller's role."""
    cid = _parse_id(contact_id)
    decision = PolicyDecisionTag.NOT_APPLICABLE
    try:
        if cid is None:
            await auditor.record(
                AuditAction.DELETE,
                AuditOutcome.FAILURE,
                decision=PolicyDecisionTag.DENY,
                reason="invalid_id",
            )
            return _error(400, "id_required")

        evaluation = await gateway.evaluate_policy(
            PolicyQuery(action="delete", resource="contacts", user={"role": actor.role})
        )
        if not evaluation.allowed:
            await auditor.record(
                AuditAction.DELETE,
                AuditOutcome.FORBIDDEN,
                decision=PolicyDecisionTag.DENY,
                target_id=str(cid),
                reason=_denial_reason(evaluation.reason),
            )
            return _error(403, "forbidden")
        decision = PolicyDecisionTag.ALLOW

        deleted = await repository.delete(tenant_id, cid)
        if not deleted:
            await auditor.record(AuditAction.DELETE, AuditOutcome.NOT_FOUND, decision=decision, target_id=str(cid))
            return _error(404, "not_found")

        await auditor.record(AuditAction.DELETE, AuditOutcome.SUCCESS, decision=decision, target_id=str(cid))
        return {"ok": True}
    except Exception:
        logger.exception("contact_delete_failed")
        await auditor.record(
            AuditAction.DELETE,
            AuditOutcome.FAILURE,
            decision=decision,
            target_id=str(cid) if cid else None,
            reason="delete_failed",
        )
        return _error(500, "delete_failed")
