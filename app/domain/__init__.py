"""Domain layer: request/response schemas for record-management resources."""

from app.domain.schemas import (
    ContactCreateRequest,
    ContactResponse,
    ContactUpdateRequest,
)

__all__ = [
    "ContactCreateRequest",
    "ContactResponse",
    "ContactUpdateRequest",
]
