"""Project activity log model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from src.capstone.models.base import utc_now


class ActivityLog(SQLModel, table=True):
    """System activity recorded against a project (e.g. professor assignment)."""

    __tablename__ = "activity_logs"
    __table_args__ = (Index("ix_activity_logs_project_created", "project_id", "created_at"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id")
    actor_id: UUID | None = Field(default=None, foreign_key="users.id")
    message: str = Field(max_length=500)
    created_at: datetime = Field(default_factory=utc_now)
