"""Repository for ActivityLog entity."""

from uuid import UUID

from sqlmodel import select

from src.capstone.models import ActivityLog
from src.capstone.repositories.base import BaseRepository


class ActivityLogRepository(BaseRepository[ActivityLog]):
    model = ActivityLog

    def log(self, project_id: UUID, message: str, actor_id: UUID | None = None) -> ActivityLog:
        """Append an activity entry (add to session, no commit)."""
        entry = ActivityLog(project_id=project_id, actor_id=actor_id, message=message[:500])
        self.session.add(entry)
        return entry

    async def list_by_project(self, project_id: UUID) -> list[ActivityLog]:
        result = await self.session.execute(
            select(ActivityLog)
            .where(ActivityLog.project_id == project_id)
            .order_by(ActivityLog.created_at.desc())  # type: ignore[attr-defined]
        )
        return list(result.scalars().all())
