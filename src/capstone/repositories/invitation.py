"""Repository for TeamInvitation entity."""

from uuid import UUID

from sqlalchemy import delete, func
from sqlmodel import select

from src.capstone.models import InvitationStatus, TeamInvitation
from src.capstone.models.base import utc_now
from src.capstone.repositories.base import BaseRepository


class TeamInvitationRepository(BaseRepository[TeamInvitation]):
    model = TeamInvitation

    async def get_for_invitee(self, invitation_id: UUID, invitee_id: UUID) -> TeamInvitation | None:
        """Get an invitation only if it is addressed to the given user."""
        result = await self.session.execute(
            select(TeamInvitation).where(
                TeamInvitation.id == invitation_id,
                TeamInvitation.invitee_id == invitee_id,
            )
        )
        return result.scalar_one_or_none()

    async def exists_pending(self, team_id: UUID, invitee_id: UUID) -> bool:
        result = await self.session.execute(
            select(func.count())
            .select_from(TeamInvitation)
            .where(
                TeamInvitation.team_id == team_id,
                TeamInvitation.invitee_id == invitee_id,
                TeamInvitation.status == InvitationStatus.PENDING.value,
            )
        )
        return result.scalar_one() > 0

    async def list_by_invitee(
        self, invitee_id: UUID, status: InvitationStatus | None = None
    ) -> list[TeamInvitation]:
        query = select(TeamInvitation).where(TeamInvitation.invitee_id == invitee_id)
        if status is not None:
            query = query.where(TeamInvitation.status == status.value)
        result = await self.session.execute(
            query.order_by(TeamInvitation.created_at.desc())  # type: ignore[attr-defined]
        )
        return list(result.scalars().all())

    async def list_by_team(self, team_id: UUID) -> list[TeamInvitation]:
        result = await self.session.execute(
            select(TeamInvitation)
            .where(TeamInvitation.team_id == team_id)
            .order_by(TeamInvitation.created_at.desc())  # type: ignore[attr-defined]
        )
        return list(result.scalars().all())

    async def mark_decided(
        self, invitation: TeamInvitation, status: InvitationStatus
    ) -> TeamInvitation:
        """Move a pending invitation to a terminal state."""
        invitation.status = status.value
        invitation.decided_at = utc_now()
        self.session.add(invitation)
        await self.session.flush()
        return invitation

    async def delete_by_team(self, team_id: UUID) -> None:
        await self.session.execute(
            delete(TeamInvitation).where(TeamInvitation.team_id == team_id)  # type: ignore[arg-type]
        )
