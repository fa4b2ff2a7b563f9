"""Keyset pagination.

A cursor names the last row of the previous page as ``<iso timestamp>|<uuid>``
wrapped in url-safe base64. Callers treat it as an opaque token.
"""

import base64
import binascii
from datetime import datetime
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, Field

T = TypeVar("T")

_SEPARATOR = "|"


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of results, newest first."""

    items: list[T]
    next_cursor: str | None = Field(default=None, description="Pass back to fetch the next page.")
    has_more: bool = False


def encode_cursor(created_at: datetime, row_id: UUID) -> str:
    raw = f"{created_at.isoformat()}{_SEPARATOR}{row_id}"
    return base64.urlsafe_b64encode(raw.encode()).decode()


def decode_cursor(cursor: str) -> tuple[datetime, UUID]:
    """Split a cursor back into its (created_at, id) position.

    Raises:
        ValueError: If the cursor was not produced by ``encode_cursor``
    """
    try:
        raw = base64.urlsafe_b64decode(cursor.encode()).decode()
        created_at, row_id = raw.split(_SEPARATOR)
        return datetime.fromisoformat(created_at), UUID(row_id)
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise ValueError("Invalid cursor") from e
