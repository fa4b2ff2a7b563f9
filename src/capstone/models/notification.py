"""Notification model."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.capstone.models.base import utc_now


class Notification(SQLModel, table=True):
    """Write-once notification; only the read flag changes afterwards."""

    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_recipient_read_created", "recipient_id", "is_read", "created_at"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    recipient_id: UUID = Field(foreign_key="users.id")
    type: str = Field(max_length=50)  # NotificationType value
    title: str = Field(max_length=120)
    body: str | None = Field(default=None, max_length=1000)
    payload: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSON().with_variant(JSONB, "postgresql"), nullable=True),
    )
    is_read: bool = Field(default=False)
    read_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
