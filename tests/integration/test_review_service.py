"""Integration tests for assignment status changes and the review workflow."""

from datetime import timedelta
from uuid import uuid4

import pytest
from sqlmodel import select

from src.capstone.core.exceptions import (
    ForbiddenError,
    InvalidArgumentError,
    InvalidStateForReviewError,
    NotTeamMemberError,
)
from src.capstone.models import (
    Assignment,
    AssignmentReview,
    AssignmentStatus,
    Notification,
    NotificationType,
    ReviewDecision,
)
from src.capstone.schemas import BulkReviewItem, BulkReviewRequest, ReviewAction
from tests.factories import utc_now
from tests.helpers import (
    create_assignment,
    create_project,
    create_team_with_members,
    fetch_all,
    fetch_one,
)

pytestmark = pytest.mark.integration


@pytest.fixture
async def supervised(db_session, student, student2, professor):
    """A team with a professor-supervised project."""
    team = await create_team_with_members(db_session, leader=student, members=[student2], name="Gamma")
    project = await create_project(db_session, team, professor=professor, title="Drone")
    return team, project


async def _status(engine, assignment_id) -> str:
    stored = await fetch_one(engine, select(Assignment).where(Assignment.id == assignment_id))
    return stored.status


class TestChangeStatus:
    async def test_member_sets_status(self, assignment_service, db_session, supervised, student, engine):
        _, project = supervised
        assignment = await create_assignment(db_session, project, AssignmentStatus.PENDING)

        await assignment_service.change_status(project.id, assignment.id, AssignmentStatus.COMPLETED, student.id)

        assert await _status(engine, assignment.id) == AssignmentStatus.COMPLETED.value

    async def test_any_transition_allowed(self, assignment_service, db_session, supervised, professor, engine):
        _, project = supervised
        assignment = await create_assignment(db_session, project, AssignmentStatus.COMPLETED)

        await assignment_service.change_status(project.id, assignment.id, AssignmentStatus.PENDING, professor.id)

        assert await _status(engine, assignment.id) == AssignmentStatus.PENDING.value

    async def test_wrong_project_rejected(self, assignment_service, db_session, supervised, student):
        team, project = supervised
        other = await create_project(db_session, team)
        assignment = await create_assignment(db_session, other)

        with pytest.raises(InvalidArgumentError):
            await assignment_service.change_status(project.id, assignment.id, AssignmentStatus.PENDING, student.id)

    async def test_outsider_forbidden(self, assignment_service, db_session, supervised, student3):
        _, project = supervised
        assignment = await create_assignment(db_session, project)

        with pytest.raises(ForbiddenError):
            await assignment_service.change_status(
                project.id, assignment.id, AssignmentStatus.COMPLETED, student3.id
            )

    async def test_admin_allowed(self, assignment_service, db_session, supervised, admin, engine):
        _, project = supervised
        assignment = await create_assignment(db_session, project)

        await assignment_service.change_status(project.id, assignment.id, AssignmentStatus.COMPLETED, admin.id)

        assert await _status(engine, assignment.id) == AssignmentStatus.COMPLETED.value


class TestRequestReview:
    async def test_forces_pending_and_notifies_professor(
        self, assignment_service, db_session, supervised, student, professor, engine
    ):
        _, project = supervised
        assignment = await create_assignment(db_session, project, AssignmentStatus.ONGOING)

        await assignment_service.request_review(project.id, assignment.id, student.id, "Ready")

        assert await _status(engine, assignment.id) == AssignmentStatus.PENDING.value
        notes = await fetch_all(engine, select(Notification).where(Notification.recipient_id == professor.id))
        assert [n.type for n in notes] == [NotificationType.ASSIGNMENT_REVIEW_REQUESTED.value]
        assert notes[0].body == "Ready"

    async def test_without_user_skips_membership_check(
        self, assignment_service, db_session, supervised, engine
    ):
        _, project = supervised
        assignment = await create_assignment(db_session, project, AssignmentStatus.ONGOING)

        await assignment_service.request_review(project.id, assignment.id)

        assert await _status(engine, assignment.id) == AssignmentStatus.PENDING.value

    async def test_completed_rejected(self, assignment_service, db_session, supervised, student, engine):
        _, project = supervised
        assignment = await create_assignment(db_session, project, AssignmentStatus.COMPLETED)

        with pytest.raises(InvalidStateForReviewError):
            await assignment_service.request_review(project.id, assignment.id, student.id)

        assert await _status(engine, assignment.id) == AssignmentStatus.COMPLETED.value

    async def test_non_member_rejected(self, assignment_service, db_session, supervised, student3):
        _, project = supervised
        assignment = await create_assignment(db_session, project)

        with pytest.raises(NotTeamMemberError):
            await assignment_service.request_review(project.id, assignment.id, student3.id)

    async def test_wrong_project_rejected(self, assignment_service, db_session, supervised, student):
        team, project = supervised
        other = await create_project(db_session, team)
        assignment = await create_assignment(db_session, other)

        with pytest.raises(InvalidArgumentError):
            await assignment_service.request_review(project.id, assignment.id, student.id)

    async def test_unsupervised_project_sends_nothing(
        self, assignment_service, db_session, student, engine
    ):
        team = await create_team_with_members(db_session, leader=student)
        project = await create_project(db_session, team)
        assignment = await create_assignment(db_session, project)

        await assignment_service.request_review(project.id, assignment.id, student.id)

        assert await fetch_all(engine, select(Notification)) == []


class TestReviewQueue:
    async def test_queue_selection_and_order(self, review_service, db_session, supervised, professor):
        _, project = supervised
        now = utc_now()
        pending_late = await create_assignment(
            db_session, project, AssignmentStatus.PENDING, due_date=now + timedelta(days=30)
        )
        pending_undated = await create_assignment(db_session, project, AssignmentStatus.PENDING)
        ongoing_soon = await create_assignment(
            db_session, project, AssignmentStatus.ONGOING, due_date=now + timedelta(days=2)
        )
        ongoing_overdue = await create_assignment(
            db_session, project, AssignmentStatus.ONGOING, due_date=now - timedelta(days=3)
        )
        # Outside the window, undated ongoing, and completed work stay out
        await create_assignment(db_session, project, AssignmentStatus.ONGOING, due_date=now + timedelta(days=20))
        await create_assignment(db_session, project, AssignmentStatus.ONGOING)
        await create_assignment(db_session, project, AssignmentStatus.COMPLETED, due_date=now)

        queue = await review_service.list_pending_reviews(professor.id, days=7, limit=50)

        assert [item.assignment_id for item in queue] == [
            ongoing_overdue.id,
            ongoing_soon.id,
            pending_late.id,
            pending_undated.id,
        ]
        assert all(item.team_name == "Gamma" and item.project_title == "Drone" for item in queue)

    async def test_limit_caps_results(self, review_service, db_session, supervised, professor):
        _, project = supervised
        for _ in range(3):
            await create_assignment(db_session, project, AssignmentStatus.PENDING)

        assert len(await review_service.list_pending_reviews(professor.id, limit=2)) == 2
        assert await review_service.list_pending_reviews(professor.id, limit=0) == []
        assert await review_service.list_pending_reviews(professor.id, limit=-5) == []

    async def test_only_supervised_projects(
        self, review_service, db_session, supervised, professor2
    ):
        _, project = supervised
        await create_assignment(db_session, project, AssignmentStatus.PENDING)

        assert await review_service.list_pending_reviews(professor2.id) == []


class TestBulkReview:
    async def test_partial_failure_reports_mismatched_item(
        self, review_service, db_session, supervised, professor, engine
    ):
        team, project = supervised
        other = await create_project(db_session, team)
        first = await create_assignment(db_session, project, AssignmentStatus.PENDING)
        misplaced = await create_assignment(db_session, other, AssignmentStatus.PENDING)
        third = await create_assignment(db_session, project, AssignmentStatus.PENDING)

        result = await review_service.bulk_review(
            professor.id,
            BulkReviewRequest(
                action=ReviewAction.APPROVE,
                items=[
                    BulkReviewItem(assignment_id=first.id, project_id=project.id),
                    BulkReviewItem(assignment_id=misplaced.id, project_id=project.id),
                    BulkReviewItem(assignment_id=third.id, project_id=project.id, comment="Nice"),
                ],
            ),
        )

        assert result.success == 2
        assert result.failed == 1
        assert result.failed_ids == [misplaced.id]
        assert await _status(engine, first.id) == AssignmentStatus.COMPLETED.value
        assert await _status(engine, third.id) == AssignmentStatus.COMPLETED.value
        assert await _status(engine, misplaced.id) == AssignmentStatus.PENDING.value

        reviews = await fetch_all(engine, select(AssignmentReview))
        assert {(r.assignment_id, r.decision) for r in reviews} == {
            (first.id, ReviewDecision.APPROVE.value),
            (third.id, ReviewDecision.APPROVE.value),
        }

    async def test_reject_sends_back_to_pending(
        self, review_service, db_session, supervised, professor, engine
    ):
        _, project = supervised
        assignment = await create_assignment(db_session, project, AssignmentStatus.ONGOING)

        result = await review_service.bulk_review(
            professor.id,
            BulkReviewRequest(
                action=ReviewAction.REJECT,
                items=[BulkReviewItem(assignment_id=assignment.id, project_id=project.id)],
            ),
        )

        assert result.success == 1
        assert await _status(engine, assignment.id) == AssignmentStatus.PENDING.value

    async def test_unknown_and_unauthorized_items_fail(
        self, review_service, db_session, supervised, student3, engine
    ):
        _, project = supervised
        assignment = await create_assignment(db_session, project, AssignmentStatus.PENDING)
        missing = uuid4()

        result = await review_service.bulk_review(
            student3.id,
            BulkReviewRequest(
                action=ReviewAction.APPROVE,
                items=[
                    BulkReviewItem(assignment_id=assignment.id, project_id=project.id),
                    BulkReviewItem(assignment_id=missing, project_id=project.id),
                ],
            ),
        )

        assert result.success == 0
        assert result.failed_ids == [assignment.id, missing]
        assert await _status(engine, assignment.id) == AssignmentStatus.PENDING.value

    async def test_blank_comment_stored_as_none(
        self, review_service, db_session, supervised, professor, engine
    ):
        _, project = supervised
        blank = await create_assignment(db_session, project, AssignmentStatus.PENDING)
        padded = await create_assignment(db_session, project, AssignmentStatus.PENDING)

        result = await review_service.bulk_review(
            professor.id,
            BulkReviewRequest(
                action=ReviewAction.APPROVE,
                items=[
                    BulkReviewItem(assignment_id=blank.id, project_id=project.id, comment="   "),
                    BulkReviewItem(assignment_id=padded.id, project_id=project.id, comment="  Nice work  "),
                ],
            ),
        )

        assert result.success == 2
        reviews = await fetch_all(engine, select(AssignmentReview))
        assert {r.assignment_id: r.comment for r in reviews} == {blank.id: None, padded.id: "Nice work"}


class TestNotesAndHistory:
    async def test_history_newest_first(self, review_service, db_session, supervised, student, professor):
        _, project = supervised
        assignment = await create_assignment(db_session, project, AssignmentStatus.PENDING)

        await review_service.add_note(student.id, assignment.id, "First draft uploaded")
        await review_service.bulk_review(
            professor.id,
            BulkReviewRequest(
                action=ReviewAction.REJECT,
                items=[BulkReviewItem(assignment_id=assignment.id, project_id=project.id, comment="Redo")],
            ),
        )

        history = await review_service.get_history(assignment.id)

        assert [(h.decision, h.comment) for h in history] == [
            (ReviewDecision.REJECT.value, "Redo"),
            (ReviewDecision.NOTE.value, "First draft uploaded"),
        ]

    async def test_note_requires_participant(self, review_service, db_session, supervised, student3):
        _, project = supervised
        assignment = await create_assignment(db_session, project)

        with pytest.raises(ForbiddenError):
            await review_service.add_note(student3.id, assignment.id, "Hello")

    async def test_blank_note_rejected(self, review_service, db_session, supervised, student):
        _, project = supervised
        assignment = await create_assignment(db_session, project)

        with pytest.raises(InvalidArgumentError):
            await review_service.add_note(student.id, assignment.id, "   ")
