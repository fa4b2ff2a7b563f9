"""Team invitation workflow."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.capstone.core.exceptions import (
    AlreadyDecidedError,
    AlreadyMemberError,
    DuplicatePendingError,
    ForbiddenError,
    InvalidInviteeError,
    NotFoundError,
    WorkflowError,
)
from src.capstone.core.logging import get_logger
from src.capstone.models import (
    InvitationStatus,
    NotificationType,
    Role,
    TeamInvitation,
    TeamRole,
)
from src.capstone.repositories import MembershipRepository, TeamInvitationRepository
from src.capstone.services.directory_service import DirectoryService
from src.capstone.services.notification_service import NotificationService

logger = get_logger(__name__)


class InvitationService:
    """PENDING -> ACCEPTED | DECLINED for a single (team, invitee) pair."""

    def __init__(
        self,
        invitation_repo: TeamInvitationRepository,
        membership_repo: MembershipRepository,
        directory: DirectoryService,
        notifier: NotificationService,
        session: AsyncSession,
    ):
        self.invitation_repo = invitation_repo
        self.membership_repo = membership_repo
        self.directory = directory
        self.notifier = notifier
        self.session = session

    async def invite(
        self,
        team_id: UUID,
        invitee_id: UUID,
        requester_id: UUID,
        message: str | None = None,
    ) -> TeamInvitation:
        """Invite a student to the team.

        Validates:
        1. Requester is an admin or a member of the team
        2. Invitee is not already a member
        3. Invitee is a student
        4. No pending invitation exists for the same pair

        Raises:
            ForbiddenError, AlreadyMemberError, InvalidInviteeError, DuplicatePendingError
        """
        try:
            team = await self.directory.get_team(team_id)
            invitee = await self.directory.get_user(invitee_id)
            requester = await self.directory.get_user(requester_id)

            if not requester.is_admin and not await self.directory.is_member(team_id, requester_id):
                raise ForbiddenError("Only team members can invite")
            if await self.membership_repo.is_member(team_id, invitee_id):
                raise AlreadyMemberError("User already belongs to this team")
            if invitee.role_enum != Role.STUDENT:
                raise InvalidInviteeError("Only students can be invited to a team")
            if await self.invitation_repo.exists_pending(team_id, invitee_id):
                raise DuplicatePendingError("A pending invitation already exists")

            invitation = TeamInvitation(
                team_id=team_id,
                inviter_id=requester_id,
                invitee_id=invitee_id,
                message=message,
            )
            self.invitation_repo.add(invitation)
            await self.session.commit()

        except IntegrityError as e:
            # Partial unique index on pending (team, invitee) catches races
            await self.session.rollback()
            raise DuplicatePendingError("A pending invitation already exists") from e
        except WorkflowError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to create invitation", error=str(e))
            raise

        logger.info(
            "Invitation created",
            invitation_id=str(invitation.id),
            team_id=str(team_id),
            invitee_id=str(invitee_id),
            inviter_id=str(requester_id),
        )
        await self.notifier.push(
            invitee_id,
            NotificationType.TEAM_INVITATION,
            "Team invitation",
            f"{requester.full_name} invited you to join team '{team.name}'.",
            {"invitation_id": invitation.id, "team_id": team.id, "team_name": team.name},
        )
        return invitation

    async def accept(self, invitation_id: UUID, user_id: UUID) -> TeamInvitation:
        """Accept an invitation and join the team as MEMBER.

        Raises:
            NotFoundError: If no invitation with this id is addressed to the user
            AlreadyDecidedError: If the invitation is no longer pending
        """
        try:
            invitation = await self._load_pending(invitation_id, user_id)
            team = await self.directory.get_team(invitation.team_id)
            invitee = await self.directory.get_user(invitation.invitee_id)

            # Membership may already exist if the user was added directly meanwhile
            if not await self.membership_repo.is_member(invitation.team_id, invitation.invitee_id):
                self.membership_repo.create_membership(
                    invitation.team_id, invitation.invitee_id, TeamRole.MEMBER
                )

            await self.invitation_repo.mark_decided(invitation, InvitationStatus.ACCEPTED)
            await self.session.commit()

        except WorkflowError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to accept invitation", invitation_id=str(invitation_id), error=str(e))
            raise

        logger.info("Invitation accepted", invitation_id=str(invitation_id), user_id=str(user_id))
        await self.notifier.push(
            invitation.inviter_id,
            NotificationType.INVITATION_ACCEPTED,
            "Invitation accepted",
            f"{invitee.full_name} accepted the invitation to team '{team.name}'.",
            {"team_id": team.id, "invitee_id": invitee.id},
        )
        return invitation

    async def decline(self, invitation_id: UUID, user_id: UUID) -> TeamInvitation:
        """Decline an invitation. No membership side effect."""
        try:
            invitation = await self._load_pending(invitation_id, user_id)
            team = await self.directory.get_team(invitation.team_id)
            invitee = await self.directory.get_user(invitation.invitee_id)

            await self.invitation_repo.mark_decided(invitation, InvitationStatus.DECLINED)
            await self.session.commit()

        except WorkflowError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to decline invitation", invitation_id=str(invitation_id), error=str(e))
            raise

        logger.info("Invitation declined", invitation_id=str(invitation_id), user_id=str(user_id))
        await self.notifier.push(
            invitation.inviter_id,
            NotificationType.INVITATION_DECLINED,
            "Invitation declined",
            f"{invitee.full_name} declined the invitation to team '{team.name}'.",
            {"team_id": team.id, "invitee_id": invitee.id},
        )
        return invitation

    async def list_received(
        self, user_id: UUID, status: InvitationStatus | None = None
    ) -> list[TeamInvitation]:
        """Invitations addressed to the user, newest first."""
        return await self.invitation_repo.list_by_invitee(user_id, status)

    async def list_for_team(self, team_id: UUID, requester_id: UUID) -> list[TeamInvitation]:
        """Invitation history of a team (members and admins only)."""
        await self.directory.get_team(team_id)
        requester = await self.directory.get_user(requester_id)
        if not requester.is_admin and not await self.directory.is_member(team_id, requester_id):
            raise ForbiddenError("Only team members can view invitations")
        return await self.invitation_repo.list_by_team(team_id)

    async def _load_pending(self, invitation_id: UUID, user_id: UUID) -> TeamInvitation:
        invitation = await self.invitation_repo.get_for_invitee(invitation_id, user_id)
        if invitation is None:
            raise NotFoundError.for_entity("Invitation", invitation_id)
        if not invitation.is_pending:
            raise AlreadyDecidedError(f"Invitation already {invitation.status.lower()}")
        return invitation
