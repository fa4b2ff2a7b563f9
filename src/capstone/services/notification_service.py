"""Notification service - the workflows' side channel to users."""

import contextlib
from collections.abc import AsyncIterator
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.capstone.core.config import get_settings
from src.capstone.core.exceptions import InvalidArgumentError, NotFoundError
from src.capstone.core.logging import get_logger
from src.capstone.models import Notification, NotificationType
from src.capstone.models.base import utc_now
from src.capstone.repositories import NotificationRepository, UserRepository
from src.capstone.schemas import NotificationRead, PaginatedResponse

logger = get_logger(__name__)


def _jsonable(payload: dict[str, Any] | None) -> dict[str, Any] | None:
    """UUIDs and other scalars are stored as strings in the JSON payload."""
    if payload is None:
        return None
    return {
        key: value if isinstance(value, (str, int, float, bool)) or value is None else str(value)
        for key, value in payload.items()
    }


class NotificationService:
    """Service for delivering and reading notifications.

    Fire-and-forget design: ``push`` never raises, so a delivery failure
    cannot undo the workflow transition that triggered it. Workflows call it
    after their own commit. With ``delivery_sessions`` set, every push runs
    on a fresh session of its own, so its rollback never expires objects
    the caller still holds.
    """

    def __init__(
        self,
        notification_repo: NotificationRepository,
        user_repo: UserRepository,
        session: AsyncSession,
        delivery_sessions: async_sessionmaker[AsyncSession] | None = None,
    ):
        self.notification_repo = notification_repo
        self.user_repo = user_repo
        self.session = session
        self.delivery_sessions = delivery_sessions

    @contextlib.asynccontextmanager
    async def _delivery_scope(
        self,
    ) -> AsyncIterator[tuple[AsyncSession, NotificationRepository, UserRepository]]:
        if self.delivery_sessions is None:
            yield self.session, self.notification_repo, self.user_repo
            return
        async with self.delivery_sessions() as session:
            yield session, NotificationRepository(session), UserRepository(session)

    async def push(
        self,
        recipient_id: UUID,
        type: NotificationType | str,
        title: str,
        body: str | None = None,
        payload: dict[str, Any] | None = None,
    ) -> Notification | None:
        """Deliver a notification to a user.

        Failures are logged but do not raise exceptions.

        Returns:
            The created Notification, or None if delivery failed
        """
        type_value = type.value if isinstance(type, NotificationType) else type
        try:
            async with self._delivery_scope() as (session, notification_repo, user_repo):
                recipient = await user_repo.get_by_id(recipient_id)
                if recipient is None:
                    raise NotFoundError.for_entity("Recipient", recipient_id)

                notification = Notification(
                    recipient_id=recipient_id,
                    type=type_value,
                    title=title[:120],
                    body=body[:1000] if body else None,
                    payload=_jsonable(payload),
                )
                notification_repo.add(notification)
                await session.commit()

            logger.debug(
                "Notification delivered",
                notification_id=str(notification.id),
                recipient_id=str(recipient_id),
                type=type_value,
            )
            return notification

        except Exception as e:
            logger.warning(
                "Failed to deliver notification",
                recipient_id=str(recipient_id),
                type=type_value,
                error=str(e),
            )
            if self.delivery_sessions is None:
                with contextlib.suppress(Exception):
                    await self.session.rollback()
            return None

    async def list_for_user(
        self,
        user_id: UUID,
        unread_only: bool = False,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> PaginatedResponse[NotificationRead]:
        """List a user's notifications, newest first."""
        if limit is None:
            limit = get_settings().notification_page_size
        try:
            items, next_cursor, has_more = await self.notification_repo.list_by_recipient(
                user_id, cursor, max(0, limit), unread_only=unread_only
            )
        except ValueError as e:
            raise InvalidArgumentError("Invalid cursor") from e
        return PaginatedResponse[NotificationRead](
            items=[NotificationRead.model_validate(item) for item in items],
            next_cursor=next_cursor,
            has_more=has_more,
        )

    async def unread_count(self, user_id: UUID) -> int:
        return await self.notification_repo.count_unread(user_id)

    async def mark_read(
        self, notification_id: UUID, user_id: UUID, is_read: bool = True
    ) -> Notification:
        """Set the read flag. Only the recipient may change it."""
        notification = await self.notification_repo.get_by_id(notification_id)
        if notification is None or notification.recipient_id != user_id:
            raise NotFoundError.for_entity("Notification", notification_id)

        notification.is_read = is_read
        notification.read_at = utc_now() if is_read else None
        await self.session.commit()
        return notification

    async def mark_all_read(self, user_id: UUID) -> int:
        updated = await self.notification_repo.mark_all_read(user_id)
        await self.session.commit()
        logger.info("Marked notifications as read", recipient_id=str(user_id), count=updated)
        return updated
