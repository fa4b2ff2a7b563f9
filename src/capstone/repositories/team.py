"""Repository for Team entity."""

from uuid import UUID

from sqlalchemy import func
from sqlmodel import select

from src.capstone.models import Team, TeamMembership
from src.capstone.repositories.base import BaseRepository


class TeamRepository(BaseRepository[Team]):
    model = Team

    async def get_by_name(self, name: str) -> Team | None:
        result = await self.session.execute(select(Team).where(Team.name == name))
        return result.scalar_one_or_none()

    async def exists_by_name(self, name: str, exclude_id: UUID | None = None) -> bool:
        query = select(func.count()).select_from(Team).where(Team.name == name)
        if exclude_id is not None:
            query = query.where(Team.id != exclude_id)
        result = await self.session.execute(query)
        return result.scalar_one() > 0

    async def list_by_member(self, user_id: UUID) -> list[Team]:
        """List teams the user belongs to, oldest first."""
        result = await self.session.execute(
            select(Team)
            .join(TeamMembership, TeamMembership.team_id == Team.id)  # type: ignore[arg-type]
            .where(TeamMembership.user_id == user_id)
            .order_by(Team.created_at)
        )
        return list(result.scalars().all())
