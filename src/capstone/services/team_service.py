"""Team membership engine - creation, leadership and member management."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.capstone.core.exceptions import (
    AlreadyMemberError,
    CannotRemoveLeaderError,
    DuplicateNameError,
    ForbiddenError,
    InvalidArgumentError,
    NotATeamMemberError,
    TeamHasProjectError,
    WorkflowError,
)
from src.capstone.core.logging import get_logger
from src.capstone.models import Role, Team, TeamMembership, TeamRole, User
from src.capstone.models.base import utc_now
from src.capstone.repositories import (
    MembershipRepository,
    ProfessorRequestRepository,
    TeamInvitationRepository,
    TeamRepository,
)
from src.capstone.schemas.team import TeamRead
from src.capstone.services.directory_service import DirectoryService

logger = get_logger(__name__)

# Academic leadership is reserved for these roles
LEADER_ELIGIBLE_ROLES = frozenset({Role.STUDENT, Role.ADMIN})


def initial_team_role(creator_role: Role) -> TeamRole:
    """Role the creator receives in a freshly created team."""
    return TeamRole.LEADER if creator_role in LEADER_ELIGIBLE_ROLES else TeamRole.MEMBER


class TeamService:
    """Owns teams and their memberships.

    Invariants: at most one LEADER per team, a user appears once per team,
    and the leader is never removed directly.
    """

    def __init__(
        self,
        team_repo: TeamRepository,
        membership_repo: MembershipRepository,
        invitation_repo: TeamInvitationRepository,
        request_repo: ProfessorRequestRepository,
        directory: DirectoryService,
        session: AsyncSession,
    ):
        self.team_repo = team_repo
        self.membership_repo = membership_repo
        self.invitation_repo = invitation_repo
        self.request_repo = request_repo
        self.directory = directory
        self.session = session

    async def create_team(self, name: str, description: str | None, creator_id: UUID) -> TeamRead:
        """Create a team with its creator as first member.

        Raises:
            DuplicateNameError: If a team with this name exists
        """
        name = name.strip()
        try:
            if not name:
                raise InvalidArgumentError("Team name must not be blank")
            creator = await self.directory.get_user(creator_id)

            if await self.team_repo.exists_by_name(name):
                raise DuplicateNameError(f"Team '{name}' already exists")

            team = Team(name=name, description=description)
            self.team_repo.add(team)
            await self.session.flush()

            role = initial_team_role(creator.role_enum)
            self.membership_repo.create_membership(team.id, creator.id, role)
            await self.session.commit()

        except IntegrityError as e:
            # Unique constraint on name catches concurrent creates
            await self.session.rollback()
            raise DuplicateNameError(f"Team '{name}' already exists") from e
        except WorkflowError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to create team", error=str(e))
            raise

        logger.info(
            "Team created",
            team_id=str(team.id),
            creator_id=str(creator_id),
            creator_role=role.value,
        )
        return await self.directory.build_team_view(team)

    async def update_team(
        self,
        team_id: UUID,
        name: str | None,
        description: str | None,
        requester_id: UUID,
    ) -> TeamRead:
        """Rename a team or change its description."""
        try:
            team = await self.directory.get_team(team_id)
            await self._check_manage_permission(team_id, requester_id)

            if name is not None:
                name = name.strip()
                if not name:
                    raise InvalidArgumentError("Team name must not be blank")
                if await self.team_repo.exists_by_name(name, exclude_id=team_id):
                    raise DuplicateNameError(f"Team '{name}' already exists")
                team.name = name
            if description is not None:
                team.description = description
            team.updated_at = utc_now()
            await self.session.commit()

        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateNameError(f"Team '{name}' already exists") from e
        except WorkflowError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to update team", team_id=str(team_id), error=str(e))
            raise

        logger.info("Team updated", team_id=str(team_id))
        return await self.directory.build_team_view(team)

    async def add_member(self, team_id: UUID, user_id: UUID, requester_id: UUID) -> TeamMembership:
        """Add a user to the team as MEMBER.

        Raises:
            ForbiddenError: If requester is neither ADMIN nor a team member
            AlreadyMemberError: If the user already belongs to the team
        """
        try:
            await self.directory.get_team(team_id)
            requester = await self.directory.get_user(requester_id)
            if not requester.is_admin and not await self.directory.is_member(team_id, requester_id):
                raise ForbiddenError("Only team members can add members")

            user = await self.directory.get_user(user_id)
            if await self.membership_repo.is_member(team_id, user.id):
                raise AlreadyMemberError("User already belongs to this team")

            membership = self.membership_repo.create_membership(team_id, user.id, TeamRole.MEMBER)
            await self.session.commit()

        except IntegrityError as e:
            await self.session.rollback()
            raise AlreadyMemberError("User already belongs to this team") from e
        except WorkflowError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(
                "Failed to add team member", team_id=str(team_id), user_id=str(user_id), error=str(e)
            )
            raise

        logger.info("Team member added", team_id=str(team_id), user_id=str(user_id))
        return membership

    async def change_leader(self, team_id: UUID, new_leader_id: UUID, requester_id: UUID) -> None:
        """Hand team leadership to an existing member.

        Bootstraps a leader when the team has none; no-op when the target
        already leads. Stray LEADER rows are demoted in the same transaction.

        Raises:
            ForbiddenError: If requester is not the leader, a professor or an admin
            NotATeamMemberError: If the new leader is not a member
        """
        try:
            await self.directory.get_team(team_id)
            await self._check_manage_permission(team_id, requester_id)

            target = await self.membership_repo.get_membership(team_id, new_leader_id)
            if target is None:
                raise NotATeamMemberError("New leader must already be a team member")
            if target.is_leader:
                logger.debug("Team leader unchanged", team_id=str(team_id), leader_id=str(new_leader_id))
                return

            new_leader = await self.directory.get_user(new_leader_id)
            if new_leader.role_enum not in LEADER_ELIGIBLE_ROLES:
                raise InvalidArgumentError("Only students or admins can lead a team")

            leaders = await self.membership_repo.list_leaders(team_id)
            for leader in leaders:
                self.membership_repo.set_role(leader, TeamRole.MEMBER)
            if len(leaders) > 1:
                logger.warning(
                    "Repaired team with multiple leaders",
                    team_id=str(team_id),
                    leader_count=len(leaders),
                )
            # Demotions must hit the database before the promotion
            await self.session.flush()

            self.membership_repo.set_role(target, TeamRole.LEADER)
            await self.session.commit()

        except WorkflowError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to change team leader", team_id=str(team_id), error=str(e))
            raise

        logger.info(
            "Team leader changed",
            team_id=str(team_id),
            new_leader_id=str(new_leader_id),
            bootstrap=not leaders,
        )

    async def remove_member(self, team_id: UUID, member_id: UUID, requester_id: UUID) -> None:
        """Remove a non-leader member.

        Raises:
            CannotRemoveLeaderError: If the target is the current leader
        """
        try:
            await self.directory.get_team(team_id)
            await self._check_manage_permission(team_id, requester_id)

            membership = await self.membership_repo.get_membership(team_id, member_id)
            if membership is None:
                raise NotATeamMemberError("User is not a member of this team")
            if membership.is_leader:
                raise CannotRemoveLeaderError("Reassign leadership before removing the leader")

            await self.membership_repo.delete(membership)
            await self.session.commit()

        except WorkflowError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(
                "Failed to remove team member", team_id=str(team_id), user_id=str(member_id), error=str(e)
            )
            raise

        logger.info("Team member removed", team_id=str(team_id), user_id=str(member_id))

    async def delete_team(self, team_id: UUID, requester_id: UUID) -> None:
        """Delete a team that has no project.

        The team's invitations and supervision requests go with it, then its
        memberships, then the team row.

        Raises:
            TeamHasProjectError: If a project references the team
        """
        try:
            team = await self.directory.get_team(team_id)
            await self._check_manage_permission(team_id, requester_id)

            if await self.directory.project_for_team(team_id) is not None:
                raise TeamHasProjectError("Teams assigned to a project cannot be deleted")

            await self.invitation_repo.delete_by_team(team_id)
            await self.request_repo.delete_by_team(team_id)
            await self.membership_repo.delete_by_team(team_id)
            await self.session.flush()
            await self.team_repo.delete(team)
            await self.session.commit()

        except WorkflowError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to delete team", team_id=str(team_id), error=str(e))
            raise

        logger.info("Team deleted", team_id=str(team_id), requester_id=str(requester_id))

    async def _check_manage_permission(self, team_id: UUID, requester_id: UUID) -> User:
        """Current leader, any professor, or an admin may manage the team."""
        requester = await self.directory.get_user(requester_id)
        if requester.is_admin or requester.is_professor:
            return requester
        membership = await self.membership_repo.get_membership(team_id, requester_id)
        if membership is None or not membership.is_leader:
            raise ForbiddenError("Only the team leader, a professor or an admin can do this")
        return requester
