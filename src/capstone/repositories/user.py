"""Repository for User entity."""

from uuid import UUID

from sqlmodel import select

from src.capstone.models import Role, TeamMembership, User
from src.capstone.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def list_invitable_for_team(self, team_id: UUID) -> list[User]:
        """Students who are not yet members of the team."""
        members = select(TeamMembership.user_id).where(TeamMembership.team_id == team_id)
        result = await self.session.execute(
            select(User)
            .where(
                User.role == Role.STUDENT.value,
                User.id.not_in(members),  # type: ignore[union-attr]
            )
            .order_by(User.full_name)
        )
        return list(result.scalars().all())
