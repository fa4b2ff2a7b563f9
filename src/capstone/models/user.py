"""User model - identity owned by the surrounding application."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint
from sqlmodel import Field, SQLModel

from src.capstone.models.base import enum_check, utc_now
from src.capstone.models.enums import Role


class User(SQLModel, table=True):
    """User account with a single platform role."""

    __tablename__ = "users"
    __table_args__ = (CheckConstraint(enum_check("role", Role), name="ck_users_role"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True)
    full_name: str = Field(max_length=100)
    role: str = Field(default=Role.STUDENT.value, max_length=20)
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def role_enum(self) -> Role:
        """Get role as Role enum."""
        return Role(self.role)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    @property
    def is_professor(self) -> bool:
        return self.role == Role.PROFESSOR.value
