"""Read-only directory of users, teams and projects used by the workflows."""

from uuid import UUID

from src.capstone.core.exceptions import NotFoundError
from src.capstone.models import Assignment, Project, Team, TeamMembership, User
from src.capstone.repositories import (
    AssignmentRepository,
    MembershipRepository,
    ProjectRepository,
    TeamRepository,
    UserRepository,
)
from src.capstone.schemas.team import TeamMemberRead, TeamRead


class DirectoryService:
    """Lookups shared by every workflow service. Never writes."""

    def __init__(
        self,
        user_repo: UserRepository,
        team_repo: TeamRepository,
        membership_repo: MembershipRepository,
        project_repo: ProjectRepository,
        assignment_repo: AssignmentRepository,
    ):
        self.user_repo = user_repo
        self.team_repo = team_repo
        self.membership_repo = membership_repo
        self.project_repo = project_repo
        self.assignment_repo = assignment_repo

    async def get_user(self, user_id: UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError.for_entity("User", user_id)
        return user

    async def get_team(self, team_id: UUID) -> Team:
        team = await self.team_repo.get_by_id(team_id)
        if team is None:
            raise NotFoundError.for_entity("Team", team_id)
        return team

    async def get_project(self, project_id: UUID) -> Project:
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError.for_entity("Project", project_id)
        return project

    async def get_assignment(self, assignment_id: UUID) -> Assignment:
        assignment = await self.assignment_repo.get_by_id(assignment_id)
        if assignment is None:
            raise NotFoundError.for_entity("Assignment", assignment_id)
        return assignment

    async def is_member(self, team_id: UUID | None, user_id: UUID) -> bool:
        if team_id is None:
            return False
        return await self.membership_repo.is_member(team_id, user_id)

    async def get_membership(self, team_id: UUID, user_id: UUID) -> TeamMembership | None:
        return await self.membership_repo.get_membership(team_id, user_id)

    async def list_members(self, team_id: UUID) -> list[TeamMembership]:
        return await self.membership_repo.list_by_team(team_id)

    async def get_leader(self, team_id: UUID) -> TeamMembership | None:
        leaders = await self.membership_repo.list_leaders(team_id)
        return leaders[0] if leaders else None

    async def project_for_team(self, team_id: UUID) -> Project | None:
        return await self.project_repo.get_by_team(team_id)

    async def is_supervisor_or_member(self, project: Project, user_id: UUID) -> bool:
        """Supervising professor of the project, or a member of its team."""
        if project.professor_id == user_id:
            return True
        return await self.is_member(project.team_id, user_id)

    async def build_team_view(self, team: Team) -> TeamRead:
        rows = await self.membership_repo.list_with_users(team.id)
        project = await self.project_repo.get_by_team(team.id)
        members = [
            TeamMemberRead(
                user_id=user.id,
                full_name=user.full_name,
                email=user.email,
                role=membership.role_enum,
                joined_at=membership.joined_at,
            )
            for membership, user in rows
        ]
        leader_id = next((m.user_id for m, _ in rows if m.is_leader), None)
        return TeamRead(
            id=team.id,
            name=team.name,
            description=team.description,
            created_at=team.created_at,
            leader_id=leader_id,
            project_title=project.title if project else None,
            members=members,
        )

    async def list_teams_for_user(self, user_id: UUID) -> list[TeamRead]:
        teams = await self.team_repo.list_by_member(user_id)
        return [await self.build_team_view(team) for team in teams]

    async def list_invitable_users(self, team_id: UUID) -> list[User]:
        await self.get_team(team_id)
        return await self.user_repo.list_invitable_for_team(team_id)
