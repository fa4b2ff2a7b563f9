"""Professor assignment workflow.

Teams ask a professor to supervise either before a project exists
(pre-request, carrying a draft title) or for an existing project
(post-request). Approval creates or updates the project and admits the
professor to the team as MEMBER.
"""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.capstone.core.config import get_settings
from src.capstone.core.exceptions import (
    DuplicatePendingError,
    ForbiddenError,
    InvalidArgumentError,
    InvalidProfessorError,
    NotFoundError,
    WorkflowError,
)
from src.capstone.core.logging import get_logger
from src.capstone.models import (
    NotificationType,
    PostRequestTarget,
    PreRequestTarget,
    ProfessorAssignmentRequest,
    Project,
    ProjectStatus,
    RequestStatus,
    TeamRole,
    User,
)
from src.capstone.models.base import utc_now
from src.capstone.repositories import (
    ActivityLogRepository,
    MembershipRepository,
    ProfessorRequestRepository,
    ProjectRepository,
)
from src.capstone.services.directory_service import DirectoryService
from src.capstone.services.notification_service import NotificationService

logger = get_logger(__name__)


class ProfessorAssignmentService:
    """PENDING -> APPROVED | REJECTED for supervising-professor requests."""

    def __init__(
        self,
        request_repo: ProfessorRequestRepository,
        project_repo: ProjectRepository,
        membership_repo: MembershipRepository,
        activity_repo: ActivityLogRepository,
        directory: DirectoryService,
        notifier: NotificationService,
        session: AsyncSession,
    ):
        self.request_repo = request_repo
        self.project_repo = project_repo
        self.membership_repo = membership_repo
        self.activity_repo = activity_repo
        self.directory = directory
        self.notifier = notifier
        self.session = session

    # --- Creation ---

    async def create_pre_request(
        self,
        team_id: UUID,
        title: str | None,
        target_professor_id: UUID,
        message: str | None,
        requester_id: UUID,
    ) -> ProfessorAssignmentRequest:
        """Request a supervisor before the project exists.

        Raises:
            ForbiddenError: If requester is neither ADMIN nor a team member
            InvalidArgumentError: If the title is blank
            DuplicatePendingError: If the team has a pending request with this title
            InvalidProfessorError: If the target is not a professor
        """
        try:
            team = await self.directory.get_team(team_id)
            requester = await self.directory.get_user(requester_id)
            if not requester.is_admin and not await self.directory.is_member(team_id, requester_id):
                raise ForbiddenError("Only team members can request a professor")

            if title is None or not title.strip():
                raise InvalidArgumentError("Title is required")
            title = title.strip()

            if await self.request_repo.exists_pending_pre_request(team_id, title):
                raise DuplicatePendingError("A pending request with this title already exists")

            professor = await self._resolve_professor(target_professor_id)

            request = ProfessorAssignmentRequest(
                project_id=None,
                team_id=team.id,
                requested_by_id=requester_id,
                target_professor_id=professor.id,
                message=message,
                title=title,
            )
            self.request_repo.add(request)
            await self.session.commit()

        except IntegrityError as e:
            # Partial unique index on pending pre-request titles catches races
            await self.session.rollback()
            raise DuplicatePendingError("A pending request with this title already exists") from e
        except WorkflowError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to create professor pre-request", team_id=str(team_id), error=str(e))
            raise

        logger.info(
            "Professor pre-request created",
            request_id=str(request.id),
            team_id=str(team_id),
            target_professor_id=str(target_professor_id),
        )
        await self._notify_professor(request, requester, team.name)
        return request

    async def create_request(
        self,
        project_id: UUID,
        target_professor_id: UUID,
        message: str | None,
        requester_id: UUID,
    ) -> ProfessorAssignmentRequest:
        """Request a supervisor for an existing project.

        Raises:
            InvalidArgumentError: If the project has no team
            ForbiddenError: If requester is neither ADMIN nor a member of the project's team
            DuplicatePendingError: If the project already has a pending request
            InvalidProfessorError: If the target is not a professor
        """
        try:
            project = await self.directory.get_project(project_id)
            if project.team_id is None:
                raise InvalidArgumentError("Project has no team")
            requester = await self.directory.get_user(requester_id)
            if not requester.is_admin and not await self.directory.is_member(
                project.team_id, requester_id
            ):
                raise ForbiddenError("Only project members can request a professor")

            if await self.request_repo.exists_pending_for_project(project_id):
                raise DuplicatePendingError("A pending request already exists for this project")

            professor = await self._resolve_professor(target_professor_id)

            request = ProfessorAssignmentRequest(
                project_id=project.id,
                team_id=project.team_id,
                requested_by_id=requester_id,
                target_professor_id=professor.id,
                message=message,
                title=project.title or get_settings().default_project_title,
            )
            self.request_repo.add(request)
            await self.session.commit()

        except IntegrityError as e:
            # Partial unique index on pending project requests catches races
            await self.session.rollback()
            raise DuplicatePendingError("A pending request already exists for this project") from e
        except WorkflowError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(
                "Failed to create professor request", project_id=str(project_id), error=str(e)
            )
            raise

        team = await self.directory.get_team(request.team_id)
        logger.info(
            "Professor request created",
            request_id=str(request.id),
            project_id=str(project_id),
            target_professor_id=str(target_professor_id),
        )
        await self._notify_professor(request, requester, team.name)
        return request

    async def list_pending_for_professor(self, professor_id: UUID) -> list[ProfessorAssignmentRequest]:
        """The professor's undecided requests, newest first."""
        return await self.request_repo.list_pending_for_professor(professor_id)

    # --- Decisions ---

    async def approve(self, request_id: UUID, actor_id: UUID) -> ProfessorAssignmentRequest:
        """Approve a request as its target professor.

        Pre-request: creates the project with the actor as professor and
        back-fills it on the request. Post-request: assigns the actor to the
        existing project. Either way the actor joins the team as MEMBER.
        Already decided requests are returned unchanged.
        """
        try:
            request, actor = await self._load_for_decision(request_id, actor_id)
            if not request.is_pending:
                logger.info("Professor request already decided", request_id=str(request_id))
                return request

            match request.target:
                case PreRequestTarget(team_id=team_id, title=title):
                    project = Project(
                        title=title or get_settings().default_project_title,
                        team_id=team_id,
                        professor_id=actor.id,
                        status=ProjectStatus.ACTIVE.value,
                        archived=False,
                    )
                    self.project_repo.add(project)
                    await self.session.flush()
                    request.project_id = project.id
                case PostRequestTarget(project_id=project_id):
                    project = await self.directory.get_project(project_id)
                    project.professor_id = actor.id
                    project.updated_at = utc_now()

            # Professors join as MEMBER only; leadership stays with students
            if project.team_id is not None and not await self.membership_repo.is_member(
                project.team_id, actor.id
            ):
                self.membership_repo.create_membership(project.team_id, actor.id, TeamRole.MEMBER)

            self.request_repo.mark_decided(request, RequestStatus.APPROVED, actor.id)
            self.activity_repo.log(
                project.id, f"Professor assignment approved: {actor.full_name}", actor.id
            )
            await self.session.commit()

        except WorkflowError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to approve professor request", request_id=str(request_id), error=str(e))
            raise

        logger.info(
            "Professor request approved",
            request_id=str(request_id),
            project_id=str(project.id),
            professor_id=str(actor.id),
        )
        await self.notifier.push(
            request.requested_by_id,
            NotificationType.PROFESSOR_REQUEST_APPROVED,
            "Professor request approved",
            f"{actor.full_name} agreed to supervise '{request.title}'.",
            {"request_id": request.id, "project_id": project.id, "team_id": request.team_id},
        )
        return request

    async def reject(
        self, request_id: UUID, message: str | None, actor_id: UUID
    ) -> ProfessorAssignmentRequest:
        """Reject a request as its target professor.

        A non-blank ``message`` replaces the request message. Already decided
        requests are returned unchanged.
        """
        try:
            request, actor = await self._load_for_decision(request_id, actor_id)
            if not request.is_pending:
                logger.info("Professor request already decided", request_id=str(request_id))
                return request

            self.request_repo.mark_decided(request, RequestStatus.REJECTED, actor.id)
            if message is not None and message.strip():
                request.message = message

            if isinstance(request.target, PostRequestTarget):
                self.activity_repo.log(
                    request.target.project_id,
                    f"Professor assignment rejected: {actor.full_name}",
                    actor.id,
                )
            await self.session.commit()

        except WorkflowError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to reject professor request", request_id=str(request_id), error=str(e))
            raise

        logger.info("Professor request rejected", request_id=str(request_id), professor_id=str(actor.id))
        await self.notifier.push(
            request.requested_by_id,
            NotificationType.PROFESSOR_REQUEST_REJECTED,
            "Professor request rejected",
            f"{actor.full_name} declined to supervise '{request.title}'.",
            {"request_id": request.id, "team_id": request.team_id},
        )
        return request

    # --- Helpers ---

    async def _resolve_professor(self, professor_id: UUID) -> User:
        try:
            professor = await self.directory.get_user(professor_id)
        except NotFoundError as e:
            raise InvalidProfessorError("Professor account not found") from e
        if not professor.is_professor:
            raise InvalidProfessorError("Target user is not a professor")
        return professor

    async def _load_for_decision(
        self, request_id: UUID, actor_id: UUID
    ) -> tuple[ProfessorAssignmentRequest, User]:
        """Only the targeted professor may decide; admins cannot act on their behalf."""
        request = await self.request_repo.get_by_id(request_id)
        if request is None:
            raise NotFoundError.for_entity("Professor request", request_id)
        actor = await self.directory.get_user(actor_id)
        if not actor.is_professor or actor.id != request.target_professor_id:
            raise ForbiddenError("Only the target professor can decide this request")
        return request, actor

    async def _notify_professor(
        self, request: ProfessorAssignmentRequest, requester: User, team_name: str
    ) -> None:
        await self.notifier.push(
            request.target_professor_id,
            NotificationType.PROFESSOR_REQUEST,
            "Supervision request",
            f"{requester.full_name} asked you to supervise '{request.title}' for team '{team_name}'.",
            {
                "request_id": request.id,
                "team_id": request.team_id,
                "project_id": request.project_id,
            },
        )
