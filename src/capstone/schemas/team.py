"""Team schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.capstone.models.enums import TeamRole


class TeamCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Team name must not be blank")
        return v


class TeamMemberRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    full_name: str
    email: str
    role: TeamRole
    joined_at: datetime


class TeamRead(BaseModel):
    """Team view returned to callers."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None
    created_at: datetime
    leader_id: UUID | None = None
    project_title: str | None = None
    members: list[TeamMemberRead] = []
