"""Repository for TeamMembership entity."""

from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select

from src.capstone.models import TeamMembership, TeamRole, User
from src.capstone.repositories.base import BaseRepository


class MembershipRepository(BaseRepository[TeamMembership]):
    """Repository for team memberships.

    Role values are coerced through ``TeamRole`` on every write, so an
    unknown role raises ``ValueError`` before it reaches the database.
    """

    model = TeamMembership

    async def get_membership(self, team_id: UUID, user_id: UUID) -> TeamMembership | None:
        result = await self.session.execute(
            select(TeamMembership).where(
                TeamMembership.team_id == team_id,
                TeamMembership.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def is_member(self, team_id: UUID, user_id: UUID) -> bool:
        return await self.get_membership(team_id, user_id) is not None

    async def list_by_team(self, team_id: UUID) -> list[TeamMembership]:
        result = await self.session.execute(
            select(TeamMembership)
            .where(TeamMembership.team_id == team_id)
            .order_by(TeamMembership.joined_at)
        )
        return list(result.scalars().all())

    async def list_with_users(self, team_id: UUID) -> list[tuple[TeamMembership, User]]:
        result = await self.session.execute(
            select(TeamMembership, User)
            .join(User, User.id == TeamMembership.user_id)  # type: ignore[arg-type]
            .where(TeamMembership.team_id == team_id)
            .order_by(TeamMembership.joined_at)
        )
        return [(membership, user) for membership, user in result.all()]

    async def list_leaders(self, team_id: UUID) -> list[TeamMembership]:
        """All rows marked LEADER; more than one means the invariant was broken."""
        result = await self.session.execute(
            select(TeamMembership).where(
                TeamMembership.team_id == team_id,
                TeamMembership.role == TeamRole.LEADER.value,
            )
        )
        return list(result.scalars().all())

    def create_membership(
        self,
        team_id: UUID,
        user_id: UUID,
        role: TeamRole | str = TeamRole.MEMBER,
    ) -> TeamMembership:
        """Create a new membership (add to session, no commit)."""
        membership = TeamMembership(
            team_id=team_id,
            user_id=user_id,
            role=TeamRole(role).value,
        )
        self.session.add(membership)
        return membership

    def set_role(self, membership: TeamMembership, role: TeamRole | str) -> None:
        membership.role = TeamRole(role).value
        self.session.add(membership)

    async def delete_by_team(self, team_id: UUID) -> None:
        await self.session.execute(
            delete(TeamMembership).where(TeamMembership.team_id == team_id)  # type: ignore[arg-type]
        )
