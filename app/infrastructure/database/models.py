# app/infrastructure/database/models.py

import uuid

from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.sql import func

from app.infrastructure.database.session import Base


class AuditEvent(Base):
    """Append-only compliance audit trail. Rows are inserted by SqlAuditSink and never updated."""

    __tablename__ = "audit_events"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(String, nullable=False, index=True)

    event_type = Column(String, nullable=False, index=True)
    event_category = Column(String, nullable=False, index=True)

    actor_id = Column(String, nullable=True, index=True)
    actor_email = Column(String, nullable=True)
    actor_role = Column(String, nullable=True)
    actor_ip = Column(String, nullable=True)

    target_type = Column(String, nullable=True)
    target_id = Column(String, nullable=True)
    target_name = Column(String, nullable=True)

    action = Column(String, nullable=False)
    result = Column(String, nullable=False)
    changes = Column(JSONB, nullable=True)
    metadata_ = Column("metadata", JSONB, nullable=True)

    occurred_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)


class Contact(Base):
    """Tenant-scoped contact record with optimistic-concurrency version."""

    __tablename__ = "contacts"
    __table_args__ = (UniqueConstraint("tenant_id", "email", name="uq_contacts_tenant_email"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(String, nullable=False, index=True)

    email = Column(String, nullable=False)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    version = Column(Integer, nullable=False, default=1, server_default="1")

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
