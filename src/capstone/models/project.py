"""Project, assignment and review-history models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Index
from sqlmodel import Field, SQLModel

from src.capstone.models.base import enum_check, utc_now
from src.capstone.models.enums import AssignmentStatus, ProjectStatus, ReviewDecision


class Project(SQLModel, table=True):
    """Capstone project owned by a team and supervised by a professor."""

    __tablename__ = "projects"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str = Field(max_length=200, index=True)
    team_id: UUID | None = Field(default=None, foreign_key="teams.id", index=True)
    professor_id: UUID | None = Field(default=None, foreign_key="users.id", index=True)
    status: str = Field(default=ProjectStatus.ACTIVE.value, max_length=20)
    archived: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Assignment(SQLModel, table=True):
    """Gradable unit of work belonging to a project."""

    __tablename__ = "assignments"
    __table_args__ = (
        CheckConstraint(enum_check("status", AssignmentStatus), name="ck_assignments_status"),
        Index("ix_assignments_project_due", "project_id", "due_date"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id")
    title: str = Field(default="", max_length=200)
    due_date: datetime | None = Field(default=None)
    status: str = Field(default=AssignmentStatus.PENDING.value, max_length=20)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def status_enum(self) -> AssignmentStatus:
        return AssignmentStatus(self.status)


class AssignmentReview(SQLModel, table=True):
    """One entry in an assignment's review history (decision or note)."""

    __tablename__ = "assignment_reviews"
    __table_args__ = (
        Index("ix_assignment_reviews_assignment_created", "assignment_id", "created_at"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    assignment_id: UUID = Field(foreign_key="assignments.id")
    decision: str = Field(default=ReviewDecision.NOTE.value, max_length=16)
    comment: str | None = Field(default=None)
    reviewer_id: UUID | None = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(default_factory=utc_now)
