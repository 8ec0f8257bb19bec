"""DB-backed contact repository. All queries are tenant-scoped."""

import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.database.models import Contact

LIST_LIMIT = 50


class DbContactRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def upsert(self, tenant_id: str, email: str, name: str, phone: Optional[str]) -> Contact:
        """Insert, or update name/phone and bump version when (tenant, email) exists."""
        stmt = insert(Contact).values(tenant_id=tenant_id, email=email, name=name, phone=phone)
        stmt = stmt.on_conflict_do_update(
            index_elements=["tenant_id", "email"],
            set_={
                "name": stmt.excluded.name,
                "phone": stmt.excluded.phone,
                "version": Contact.version + 1,
                "updated_at": func.now(),
            },
        ).returning(Contact)
        result = await self._session.execute(stmt)
        await self._session.commit()
        return result.scalar_one()

    async def list_by_tenant(self, tenant_id: str) -> List[Contact]:
        stmt = (
            select(Contact)
            .where(Contact.tenant_id == tenant_id)
            .order_by(Contact.created_at.desc())
            .limit(LIST_LIMIT)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def update_versioned(
        self,
        tenant_id: str,
        contact_id: uuid.UUID,
        expected_version: int,
        fields: Dict[str, Any],
    ) -> Optional[Contact]:
        """
        Apply `fields` (name and/or phone) only if the stored version matches.
        None means a version conflict or a missing row.
        """
        values: Dict[str, Any] = {**fields, "version": Contact.version + 1, "updated_at": func.now()}
        stmt = (
            update(Contact)
            .where(
                Contact.tenant_id == tenant_id,
                Contact.id == contact_id,
                Contact.version == expected_version,
            )
            .values(**values)
            .returning(Contact)
        )
        result = await self._session.execute(stmt)
        await self._session.commit()
        return result.scalar_one_or_none()

    async def delete(self, tenant_id: str, contact_id: uuid.UUID) -> bool:
        """True when a row was removed."""
        stmt = delete(Contact).where(Contact.tenant_id == tenant_id, Contact.id == contact_id)
        result = await self._session.execute(stmt)
        await self._session.commit()
        return result.rowcount > 0
