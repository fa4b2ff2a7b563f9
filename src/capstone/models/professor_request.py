"""Professor assignment request model.

A request either precedes its project ("pre-request": the team proposes a
title and the project is created on approval) or targets an existing
project ("post-request"). Both live in one table; ``target`` exposes which
shape a row has.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Index, func, text
from sqlmodel import Field, SQLModel

from src.capstone.models.base import enum_check, utc_now
from src.capstone.models.enums import RequestStatus


@dataclass(frozen=True)
class PreRequestTarget:
    """Request made before a project exists."""

    team_id: UUID
    title: str


@dataclass(frozen=True)
class PostRequestTarget:
    """Request bound to an existing project."""

    project_id: UUID


RequestTarget = PreRequestTarget | PostRequestTarget


class ProfessorAssignmentRequest(SQLModel, table=True):
    """Request for a professor to supervise a team's project."""

    __tablename__ = "professor_assignment_requests"
    __table_args__ = (
        CheckConstraint(
            enum_check("status", RequestStatus), name="ck_professor_requests_status"
        ),
        Index(
            "uq_professor_requests_pending_project",
            "project_id",
            unique=True,
            sqlite_where=text("status = 'PENDING' AND project_id IS NOT NULL"),
            postgresql_where=text("status = 'PENDING' AND project_id IS NOT NULL"),
        ),
        Index("ix_professor_requests_team_status", "team_id", "status"),
        Index("ix_professor_requests_target_status", "target_professor_id", "status"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID | None = Field(default=None, foreign_key="projects.id")
    team_id: UUID = Field(foreign_key="teams.id")
    requested_by_id: UUID = Field(foreign_key="users.id")
    target_professor_id: UUID = Field(foreign_key="users.id")
    status: str = Field(default=RequestStatus.PENDING.value, max_length=20)
    message: str | None = Field(default=None)
    title: str = Field(max_length=200)
    decided_by_id: UUID | None = Field(default=None, foreign_key="users.id")
    decided_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def target(self) -> RequestTarget:
        """Discriminate pre- vs post-request."""
        if self.project_id is None:
            return PreRequestTarget(team_id=self.team_id, title=self.title)
        return PostRequestTarget(project_id=self.project_id)

    @property
    def status_enum(self) -> RequestStatus:
        return RequestStatus(self.status)

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING.value


# One pending pre-request per team and title, compared case-insensitively
_requests = ProfessorAssignmentRequest.__table__  # type: ignore[attr-defined]
Index(
    "uq_professor_requests_pending_title",
    _requests.c.team_id,
    func.lower(_requests.c.title),
    unique=True,
    sqlite_where=text("status = 'PENDING' AND project_id IS NULL"),
    postgresql_where=text("status = 'PENDING' AND project_id IS NULL"),
)
