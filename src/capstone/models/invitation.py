"""Team invitation model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Index, text
from sqlmodel import Field, SQLModel

from src.capstone.models.base import enum_check, utc_now
from src.capstone.models.enums import InvitationStatus


class TeamInvitation(SQLModel, table=True):
    """Offer for a student to join a team.

    PENDING -> ACCEPTED | DECLINED. Rows are never deleted; decided
    invitations stay as history.
    """

    __tablename__ = "team_invitations"
    __table_args__ = (
        CheckConstraint(enum_check("status", InvitationStatus), name="ck_team_invitations_status"),
        Index(
            "uq_team_invitations_pending_pair",
            "team_id",
            "invitee_id",
            unique=True,
            sqlite_where=text("status = 'PENDING'"),
            postgresql_where=text("status = 'PENDING'"),
        ),
        Index("ix_team_invitations_invitee_status", "invitee_id", "status"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    team_id: UUID = Field(foreign_key="teams.id")
    inviter_id: UUID = Field(foreign_key="users.id")
    invitee_id: UUID = Field(foreign_key="users.id")
    status: str = Field(default=InvitationStatus.PENDING.value, max_length=20)
    message: str | None = Field(default=None, max_length=1000)
    created_at: datetime = Field(default_factory=utc_now)
    decided_at: datetime | None = Field(default=None)

    @property
    def status_enum(self) -> InvitationStatus:
        return InvitationStatus(self.status)

    @property
    def is_pending(self) -> bool:
        return self.status == InvitationStatus.PENDING.value
