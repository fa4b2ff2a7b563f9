"""Repositories for Project, Assignment and AssignmentReview entities."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import and_, or_
from sqlmodel import select

from src.capstone.models import (
    Assignment,
    AssignmentReview,
    AssignmentStatus,
    Project,
    Team,
)
from src.capstone.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    model = Project

    async def get_by_team(self, team_id: UUID) -> Project | None:
        """First project attached to the team, if any."""
        result = await self.session.execute(
            select(Project).where(Project.team_id == team_id).order_by(Project.created_at).limit(1)
        )
        return result.scalars().first()

    async def exists_for_team(self, team_id: UUID) -> bool:
        return await self.get_by_team(team_id) is not None

    async def list_by_professor(self, professor_id: UUID) -> list[Project]:
        result = await self.session.execute(
            select(Project).where(Project.professor_id == professor_id).order_by(Project.created_at)
        )
        return list(result.scalars().all())


class AssignmentRepository(BaseRepository[Assignment]):
    model = Assignment

    async def list_by_project(self, project_id: UUID) -> list[Assignment]:
        result = await self.session.execute(
            select(Assignment)
            .where(Assignment.project_id == project_id)
            .order_by(Assignment.due_date.is_(None), Assignment.due_date)  # type: ignore[union-attr]
        )
        return list(result.scalars().all())

    async def list_review_queue(
        self,
        professor_id: UUID,
        due_before: datetime,
        limit: int,
    ) -> list[tuple[Assignment, Project, str | None]]:
        """Assignments needing the supervising professor's attention.

        PENDING assignments, plus ONGOING ones due on or before ``due_before``,
        across every project the professor supervises. Ordered by ascending
        due date with undated rows last.

        Returns:
            List of (assignment, project, team_name) tuples
        """
        result = await self.session.execute(
            select(Assignment, Project, Team.name)
            .join(Project, Project.id == Assignment.project_id)  # type: ignore[arg-type]
            .outerjoin(Team, Team.id == Project.team_id)  # type: ignore[arg-type]
            .where(
                Project.professor_id == professor_id,
                or_(
                    Assignment.status == AssignmentStatus.PENDING.value,
                    and_(
                        Assignment.status == AssignmentStatus.ONGOING.value,
                        Assignment.due_date.is_not(None),  # type: ignore[union-attr]
                        Assignment.due_date <= due_before,  # type: ignore[operator]
                    ),
                ),
            )
            .order_by(
                Assignment.due_date.is_(None),  # type: ignore[union-attr]
                Assignment.due_date,
                Assignment.created_at,
            )
            .limit(limit)
        )
        return [(assignment, project, team_name) for assignment, project, team_name in result.all()]


class AssignmentReviewRepository(BaseRepository[AssignmentReview]):
    model = AssignmentReview

    async def list_by_assignment(self, assignment_id: UUID) -> list[AssignmentReview]:
        """Review history for an assignment, newest first."""
        result = await self.session.execute(
            select(AssignmentReview)
            .where(AssignmentReview.assignment_id == assignment_id)
            .order_by(AssignmentReview.created_at.desc())  # type: ignore[attr-defined]
        )
        return list(result.scalars().all())
