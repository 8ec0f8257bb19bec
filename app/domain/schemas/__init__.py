"""Domain schemas. Request/response and validation."""

from app.domain.schemas.contact import (
    ContactCreateRequest,
    ContactResponse,
    ContactUpdateRequest,
)

__all__ = [
    "ContactCreateRequest",
    "ContactResponse",
    "ContactUpdateRequest",
]
