"""Repository for Notification entity."""

from uuid import UUID

from sqlalchemy import func
from sqlmodel import select, update

from src.capstone.models import Notification
from src.capstone.models.base import utc_now
from src.capstone.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    model = Notification

    async def list_by_recipient(
        self,
        recipient_id: UUID,
        cursor: str | None,
        limit: int,
        unread_only: bool = False,
    ) -> tuple[list[Notification], str | None, bool]:
        """List a user's notifications, newest first, with cursor pagination."""
        query = select(Notification).where(Notification.recipient_id == recipient_id)
        if unread_only:
            query = query.where(Notification.is_read == False)  # noqa: E712
        return await self.paginate(query, cursor, limit)

    async def count_unread(self, recipient_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(Notification)
            .where(
                Notification.recipient_id == recipient_id,
                Notification.is_read == False,  # noqa: E712
            )
        )
        return result.scalar_one()

    async def mark_all_read(self, recipient_id: UUID) -> int:
        result = await self.session.execute(
            update(Notification)
            .where(Notification.recipient_id == recipient_id)  # type: ignore[arg-type]
            .where(Notification.is_read == False)  # type: ignore[arg-type]  # noqa: E712
            .values(is_read=True, read_at=utc_now())
        )
        return result.rowcount or 0  # type: ignore[attr-defined]
