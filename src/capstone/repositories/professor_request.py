"""Repository for ProfessorAssignmentRequest entity."""

from uuid import UUID

from sqlalchemy import delete, func
from sqlmodel import select

from src.capstone.models import ProfessorAssignmentRequest, RequestStatus
from src.capstone.models.base import utc_now
from src.capstone.repositories.base import BaseRepository


class ProfessorRequestRepository(BaseRepository[ProfessorAssignmentRequest]):
    model = ProfessorAssignmentRequest

    async def exists_pending_pre_request(self, team_id: UUID, title: str) -> bool:
        """Pending pre-request for the team with the same title (case-insensitive)."""
        result = await self.session.execute(
            select(func.count())
            .select_from(ProfessorAssignmentRequest)
            .where(
                ProfessorAssignmentRequest.team_id == team_id,
                ProfessorAssignmentRequest.project_id.is_(None),  # type: ignore[union-attr]
                func.lower(ProfessorAssignmentRequest.title) == title.lower(),
                ProfessorAssignmentRequest.status == RequestStatus.PENDING.value,
            )
        )
        return result.scalar_one() > 0

    async def exists_pending_for_project(self, project_id: UUID) -> bool:
        result = await self.session.execute(
            select(func.count())
            .select_from(ProfessorAssignmentRequest)
            .where(
                ProfessorAssignmentRequest.project_id == project_id,
                ProfessorAssignmentRequest.status == RequestStatus.PENDING.value,
            )
        )
        return result.scalar_one() > 0

    async def list_pending_for_professor(self, professor_id: UUID) -> list[ProfessorAssignmentRequest]:
        result = await self.session.execute(
            select(ProfessorAssignmentRequest)
            .where(
                ProfessorAssignmentRequest.target_professor_id == professor_id,
                ProfessorAssignmentRequest.status == RequestStatus.PENDING.value,
            )
            .order_by(ProfessorAssignmentRequest.created_at.desc())  # type: ignore[attr-defined]
        )
        return list(result.scalars().all())

    def mark_decided(
        self,
        request: ProfessorAssignmentRequest,
        status: RequestStatus,
        decided_by_id: UUID,
    ) -> ProfessorAssignmentRequest:
        request.status = status.value
        request.decided_by_id = decided_by_id
        request.decided_at = utc_now()
        self.session.add(request)
        return request

    async def delete_by_team(self, team_id: UUID) -> None:
        await self.session.execute(
            delete(ProfessorAssignmentRequest).where(
                ProfessorAssignmentRequest.team_id == team_id  # type: ignore[arg-type]
            )
        )
