"""Pydantic schemas for the contacts API. Required fields are checked in the route so rejections are audited."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ContactCreateRequest(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None


class ContactUpdateRequest(BaseModel):
    """Omitted phone leaves it unchanged; explicit null clears it."""

    name: Optional[str] = None
    phone: Optional[str] = None
    version: Optional[int] = Field(None, description="Version the caller last read")


class ContactResponse(BaseModel):
    id: uuid.UUID
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    version: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
