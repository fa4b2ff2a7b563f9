"""Team and team membership models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Index, text
from sqlmodel import Field, SQLModel

from src.capstone.models.base import enum_check, utc_now
from src.capstone.models.enums import TeamRole


class Team(SQLModel, table=True):
    """A group of collaborating users, at most one of whom is LEADER."""

    __tablename__ = "teams"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100, unique=True, index=True)
    description: str | None = Field(default=None, max_length=1000)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class TeamMembership(SQLModel, table=True):
    """Junction table for team membership.

    The partial unique index keeps at most one LEADER row per team even
    when two leader changes race.
    """

    __tablename__ = "team_memberships"
    __table_args__ = (
        CheckConstraint(enum_check("role", TeamRole), name="ck_team_memberships_role"),
        Index(
            "uq_team_memberships_single_leader",
            "team_id",
            unique=True,
            sqlite_where=text("role = 'LEADER'"),
            postgresql_where=text("role = 'LEADER'"),
        ),
    )

    team_id: UUID = Field(foreign_key="teams.id", primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", primary_key=True, index=True)
    role: str = Field(default=TeamRole.MEMBER.value, max_length=20)
    joined_at: datetime = Field(default_factory=utc_now)

    @property
    def role_enum(self) -> TeamRole:
        return TeamRole(self.role)

    @property
    def is_leader(self) -> bool:
        return self.role == TeamRole.LEADER.value
