"""Test helper functions for common data creation patterns."""

from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlmodel import select

from src.capstone.models import (
    Assignment,
    AssignmentStatus,
    Project,
    Team,
    TeamMembership,
    TeamRole,
    User,
)
from tests.factories import (
    AssignmentFactory,
    ProjectFactory,
    TeamFactory,
    TeamMembershipFactory,
    UserFactory,
)


async def create_user(session: AsyncSession, role: str = "STUDENT", **kwargs) -> User:
    """Create and commit a user with the given platform role."""
    user = UserFactory.build(role=role, **kwargs)
    session.add(user)
    await session.commit()
    return user


async def create_team_with_members(
    session: AsyncSession,
    leader: User | None = None,
    members: list[User] | None = None,
    **team_kwargs,
) -> Team:
    """Create a team with an optional leader and plain members.

    Args:
        session: Database session
        leader: User receiving the LEADER membership
        members: Users receiving MEMBER memberships
        **team_kwargs: Additional args passed to TeamFactory

    Returns:
        The committed team
    """
    team = TeamFactory.build(**team_kwargs)
    session.add(team)
    await session.flush()

    if leader is not None:
        session.add(TeamMembershipFactory.leader(team_id=team.id, user_id=leader.id))
    for member in members or []:
        session.add(TeamMembershipFactory.member(team_id=team.id, user_id=member.id))
    await session.commit()
    return team


async def create_project(
    session: AsyncSession,
    team: Team | None,
    professor: User | None = None,
    **kwargs,
) -> Project:
    project = ProjectFactory.build(
        team_id=team.id if team else None,
        professor_id=professor.id if professor else None,
        **kwargs,
    )
    session.add(project)
    await session.commit()
    return project


async def create_assignment(
    session: AsyncSession,
    project: Project,
    status: AssignmentStatus = AssignmentStatus.ONGOING,
    due_date: datetime | None = None,
    **kwargs,
) -> Assignment:
    assignment = AssignmentFactory.build(
        project_id=project.id, status=status.value, due_date=due_date, **kwargs
    )
    session.add(assignment)
    await session.commit()
    return assignment


# --- Fresh-session reads ---
# Assertions read through a new session so they see committed state only.


async def fetch_all(engine: AsyncEngine, query) -> list:
    async with AsyncSession(engine, expire_on_commit=False) as session:
        result = await session.execute(query)
        return list(result.scalars().all())


async def fetch_one(engine: AsyncEngine, query):
    async with AsyncSession(engine, expire_on_commit=False) as session:
        result = await session.execute(query)
        return result.scalar_one_or_none()


async def get_membership(engine: AsyncEngine, team_id: UUID, user_id: UUID) -> TeamMembership | None:
    return await fetch_one(
        engine,
        select(TeamMembership).where(
            TeamMembership.team_id == team_id,
            TeamMembership.user_id == user_id,
        ),
    )


async def count_leaders(engine: AsyncEngine, team_id: UUID) -> int:
    leaders = await fetch_all(
        engine,
        select(TeamMembership).where(
            TeamMembership.team_id == team_id,
            TeamMembership.role == TeamRole.LEADER.value,
        ),
    )
    return len(leaders)
