"""Service factories.

Each factory builds a service and its repositories on one ``AsyncSession``.
Notifiers handed to workflows deliver on sessions of their own, opened from
the workflow session's engine unless an explicit ``notifier_session`` is
given, so a failed delivery rolls back only its own unit of work.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.capstone.core.db import get_session_factory
from src.capstone.repositories import (
    ActivityLogRepository,
    AssignmentRepository,
    AssignmentReviewRepository,
    MembershipRepository,
    NotificationRepository,
    ProfessorRequestRepository,
    ProjectRepository,
    TeamInvitationRepository,
    TeamRepository,
    UserRepository,
)
from src.capstone.services.assignment_service import AssignmentService
from src.capstone.services.directory_service import DirectoryService
from src.capstone.services.invitation_service import InvitationService
from src.capstone.services.notification_service import NotificationService
from src.capstone.services.professor_assignment_service import ProfessorAssignmentService
from src.capstone.services.review_service import ReviewService
from src.capstone.services.team_service import TeamService


def get_directory(session: AsyncSession) -> DirectoryService:
    """Get directory service."""
    return DirectoryService(
        UserRepository(session),
        TeamRepository(session),
        MembershipRepository(session),
        ProjectRepository(session),
        AssignmentRepository(session),
    )


def get_notification_service(session: AsyncSession) -> NotificationService:
    """Get notification service bound to its own session."""
    return NotificationService(NotificationRepository(session), UserRepository(session), session)


def get_workflow_notifier(
    session: AsyncSession, notifier_session: AsyncSession | None = None
) -> NotificationService:
    """Get the notifier a workflow pushes through after its commit."""
    if notifier_session is not None:
        return get_notification_service(notifier_session)
    return NotificationService(
        NotificationRepository(session),
        UserRepository(session),
        session,
        delivery_sessions=get_session_factory(session.bind),
    )


def get_team_service(session: AsyncSession) -> TeamService:
    return TeamService(
        TeamRepository(session),
        MembershipRepository(session),
        TeamInvitationRepository(session),
        ProfessorRequestRepository(session),
        get_directory(session),
        session,
    )


def get_invitation_service(
    session: AsyncSession, notifier_session: AsyncSession | None = None
) -> InvitationService:
    return InvitationService(
        TeamInvitationRepository(session),
        MembershipRepository(session),
        get_directory(session),
        get_workflow_notifier(session, notifier_session),
        session,
    )


def get_professor_assignment_service(
    session: AsyncSession, notifier_session: AsyncSession | None = None
) -> ProfessorAssignmentService:
    return ProfessorAssignmentService(
        ProfessorRequestRepository(session),
        ProjectRepository(session),
        MembershipRepository(session),
        ActivityLogRepository(session),
        get_directory(session),
        get_workflow_notifier(session, notifier_session),
        session,
    )


def get_assignment_service(
    session: AsyncSession, notifier_session: AsyncSession | None = None
) -> AssignmentService:
    return AssignmentService(
        get_directory(session),
        get_workflow_notifier(session, notifier_session),
        session,
    )


def get_review_service(session: AsyncSession) -> ReviewService:
    return ReviewService(
        AssignmentRepository(session),
        AssignmentReviewRepository(session),
        get_directory(session),
        session,
    )
