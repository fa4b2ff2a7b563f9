"""Assignment status changes and student-initiated review requests."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.capstone.core.exceptions import (
    ForbiddenError,
    InvalidArgumentError,
    InvalidStateForReviewError,
    NotTeamMemberError,
    WorkflowError,
)
from src.capstone.core.logging import get_logger
from src.capstone.models import Assignment, AssignmentStatus, NotificationType, Project
from src.capstone.models.base import utc_now
from src.capstone.services.directory_service import DirectoryService
from src.capstone.services.notification_service import NotificationService

logger = get_logger(__name__)


class AssignmentService:
    def __init__(
        self,
        directory: DirectoryService,
        notifier: NotificationService,
        session: AsyncSession,
    ):
        self.directory = directory
        self.notifier = notifier
        self.session = session

    async def change_status(
        self,
        project_id: UUID,
        assignment_id: UUID,
        status: AssignmentStatus,
        requester_id: UUID,
    ) -> Assignment:
        """Set an assignment's status directly.

        No transition graph is enforced; any value may follow any other.

        Raises:
            InvalidArgumentError: If the assignment belongs to another project
            ForbiddenError: If requester is not the supervisor, a team member or an admin
        """
        status = AssignmentStatus(status)
        try:
            project, assignment = await self._load_pair(project_id, assignment_id)
            requester = await self.directory.get_user(requester_id)
            if not requester.is_admin and not await self.directory.is_supervisor_or_member(
                project, requester_id
            ):
                raise ForbiddenError("Not allowed to change this assignment")

            previous = assignment.status
            assignment.status = status.value
            assignment.updated_at = utc_now()
            await self.session.commit()

        except WorkflowError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(
                "Failed to change assignment status", assignment_id=str(assignment_id), error=str(e)
            )
            raise

        logger.info(
            "Assignment status changed",
            assignment_id=str(assignment_id),
            project_id=str(project_id),
            previous_status=previous,
            status=status.value,
        )
        return assignment

    async def request_review(
        self,
        project_id: UUID,
        assignment_id: UUID,
        user_id: UUID | None = None,
        message: str | None = None,
    ) -> Assignment:
        """Flag an assignment as awaiting instructor attention.

        The status is forced to PENDING whatever it was before. When
        ``user_id`` is given the caller must belong to the project's team.

        Raises:
            InvalidArgumentError: If the assignment belongs to another project
            NotTeamMemberError: If the caller is not a team member
            InvalidStateForReviewError: If the assignment is already COMPLETED
        """
        try:
            project, assignment = await self._load_pair(project_id, assignment_id)
            if user_id is not None and not await self.directory.is_member(project.team_id, user_id):
                raise NotTeamMemberError("Only team members can request a review")
            if assignment.status_enum == AssignmentStatus.COMPLETED:
                raise InvalidStateForReviewError("Completed assignments cannot be sent for review")

            assignment.status = AssignmentStatus.PENDING.value
            assignment.updated_at = utc_now()
            await self.session.commit()

        except WorkflowError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(
                "Failed to request assignment review", assignment_id=str(assignment_id), error=str(e)
            )
            raise

        logger.info(
            "Assignment review requested",
            assignment_id=str(assignment_id),
            project_id=str(project_id),
            user_id=str(user_id) if user_id else None,
        )
        if project.professor_id is not None:
            await self.notifier.push(
                project.professor_id,
                NotificationType.ASSIGNMENT_REVIEW_REQUESTED,
                "Review requested",
                message or f"Assignment '{assignment.title}' in '{project.title}' awaits review.",
                {
                    "assignment_id": assignment.id,
                    "project_id": project.id,
                    "requested_by": user_id,
                },
            )
        return assignment

    async def _load_pair(self, project_id: UUID, assignment_id: UUID) -> tuple[Project, Assignment]:
        project = await self.directory.get_project(project_id)
        assignment = await self.directory.get_assignment(assignment_id)
        if assignment.project_id != project.id:
            raise InvalidArgumentError("Assignment does not belong to this project")
        return project, assignment
