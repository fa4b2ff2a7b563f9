"""Shared repository behaviour."""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import and_, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from src.capstone.schemas.pagination import decode_cursor, encode_cursor

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Data access for one table.

    Repositories stage changes on the session; services decide when to
    commit or roll back.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: UUID) -> ModelType | None:
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        )
        return result.scalar_one_or_none()

    def add(self, entity: ModelType) -> None:
        self.session.add(entity)

    async def delete(self, entity: ModelType) -> None:
        await self.session.delete(entity)

    async def paginate(
        self,
        query: Any,
        cursor: str | None,
        limit: int,
    ) -> tuple[list[ModelType], str | None, bool]:
        """Keyset-paginate ``query`` by (created_at, id), newest first.

        The model must carry ``created_at`` and ``id`` columns.

        Raises:
            ValueError: If the cursor cannot be decoded

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        created_col = self.model.created_at  # type: ignore[attr-defined]
        id_col = self.model.id  # type: ignore[attr-defined]

        if cursor:
            created_at, row_id = decode_cursor(cursor)
            query = query.where(
                or_(
                    created_col < created_at,
                    and_(created_col == created_at, id_col < row_id),
                )
            )

        # One extra row tells us whether another page exists
        result = await self.session.execute(
            query.order_by(created_col.desc(), id_col.desc()).limit(limit + 1)
        )
        items = list(result.scalars().all())

        has_more = len(items) > limit
        items = items[:limit]
        next_cursor = None
        if has_more and items:
            last = items[-1]
            next_cursor = encode_cursor(last.created_at, last.id)  # type: ignore[attr-defined]
        return items, next_cursor, has_more
