"""Assignment review workflow - professor queue, bulk decisions and notes."""

from datetime import timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.capstone.core.config import get_settings
from src.capstone.core.exceptions import (
    ForbiddenError,
    InvalidArgumentError,
    WorkflowError,
)
from src.capstone.core.logging import get_logger
from src.capstone.models import AssignmentReview, AssignmentStatus, ReviewDecision
from src.capstone.models.base import utc_now
from src.capstone.repositories import AssignmentRepository, AssignmentReviewRepository
from src.capstone.schemas.review import (
    BulkReviewRequest,
    BulkReviewResult,
    ReviewAction,
    ReviewHistoryItem,
    ReviewQueueItem,
)
from src.capstone.services.directory_service import DirectoryService

logger = get_logger(__name__)

ACTION_OUTCOMES: dict[ReviewAction, tuple[AssignmentStatus, ReviewDecision]] = {
    ReviewAction.APPROVE: (AssignmentStatus.COMPLETED, ReviewDecision.APPROVE),
    ReviewAction.REJECT: (AssignmentStatus.PENDING, ReviewDecision.REJECT),
}


def _blank_to_none(comment: str | None) -> str | None:
    if comment is None or not comment.strip():
        return None
    return comment.strip()


class ReviewService:
    """Derived review queue plus best-effort batch decisions.

    The queue is computed on every call and never stored.
    """

    def __init__(
        self,
        assignment_repo: AssignmentRepository,
        review_repo: AssignmentReviewRepository,
        directory: DirectoryService,
        session: AsyncSession,
    ):
        self.assignment_repo = assignment_repo
        self.review_repo = review_repo
        self.directory = directory
        self.session = session

    async def list_pending_reviews(
        self,
        user_id: UUID,
        days: int | None = None,
        limit: int | None = None,
    ) -> list[ReviewQueueItem]:
        """Assignments awaiting the professor's attention.

        PENDING assignments, plus ONGOING ones due within ``days`` days or
        already overdue, across the projects the user supervises. Ordered
        by ascending due date with undated rows last.

        Args:
            user_id: The supervising professor
            days: Look-ahead window for ONGOING work (settings default)
            limit: Maximum items returned; negative values yield nothing
        """
        settings = get_settings()
        if days is None:
            days = settings.review_queue_days
        if limit is None:
            limit = settings.review_queue_limit
        limit = max(0, limit)
        if limit == 0:
            return []

        await self.directory.get_user(user_id)
        due_before = utc_now() + timedelta(days=days)
        rows = await self.assignment_repo.list_review_queue(user_id, due_before, limit)

        return [
            ReviewQueueItem(
                assignment_id=assignment.id,
                project_id=project.id,
                project_title=project.title,
                team_name=team_name,
                title=assignment.title,
                updated_at=assignment.updated_at,
                due_date=assignment.due_date,
                status=assignment.status,
            )
            for assignment, project, team_name in rows
        ]

    async def bulk_review(self, user_id: UUID, request: BulkReviewRequest) -> BulkReviewResult:
        """Apply one action to many assignments, item by item.

        Items that fail validation are reported in ``failed_ids`` and leave
        the rest untouched. Applied items get a review history row. Storage
        errors abort the whole batch.
        """
        status, decision = ACTION_OUTCOMES[request.action]
        success = 0
        failed_ids: list[UUID] = []

        try:
            for item in request.items:
                try:
                    assignment = await self.directory.get_assignment(item.assignment_id)
                    if assignment.project_id != item.project_id:
                        raise InvalidArgumentError("Assignment does not belong to this project")
                    project = await self.directory.get_project(item.project_id)
                    if not await self.directory.is_supervisor_or_member(project, user_id):
                        raise ForbiddenError("Not allowed to review this assignment")
                except WorkflowError as e:
                    logger.info(
                        "Bulk review item skipped",
                        assignment_id=str(item.assignment_id),
                        reason=e.code,
                    )
                    failed_ids.append(item.assignment_id)
                    continue

                assignment.status = status.value
                assignment.updated_at = utc_now()
                self.review_repo.add(
                    AssignmentReview(
                        assignment_id=assignment.id,
                        decision=decision.value,
                        comment=_blank_to_none(item.comment),
                        reviewer_id=user_id,
                    )
                )
                success += 1

            await self.session.commit()

        except Exception as e:
            await self.session.rollback()
            logger.error("Bulk review failed", user_id=str(user_id), error=str(e))
            raise

        logger.info(
            "Bulk review applied",
            user_id=str(user_id),
            action=request.action.value,
            success=success,
            failed=len(failed_ids),
        )
        return BulkReviewResult(success=success, failed=len(failed_ids), failed_ids=failed_ids)

    async def add_note(self, user_id: UUID, assignment_id: UUID, comment: str) -> AssignmentReview:
        """Attach a free-form note to an assignment without changing its status."""
        try:
            if not comment or not comment.strip():
                raise InvalidArgumentError("Comment is required")
            assignment = await self.directory.get_assignment(assignment_id)
            project = await self.directory.get_project(assignment.project_id)
            if not await self.directory.is_supervisor_or_member(project, user_id):
                raise ForbiddenError("Not allowed to comment on this assignment")

            review = AssignmentReview(
                assignment_id=assignment.id,
                decision=ReviewDecision.NOTE.value,
                comment=comment.strip(),
                reviewer_id=user_id,
            )
            self.review_repo.add(review)
            await self.session.commit()

        except WorkflowError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to add review note", assignment_id=str(assignment_id), error=str(e))
            raise

        logger.info("Review note added", assignment_id=str(assignment_id), user_id=str(user_id))
        return review

    async def get_history(self, assignment_id: UUID) -> list[ReviewHistoryItem]:
        await self.directory.get_assignment(assignment_id)
        reviews = await self.review_repo.list_by_assignment(assignment_id)
        return [ReviewHistoryItem.model_validate(review) for review in reviews]
