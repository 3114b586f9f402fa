"""
Base repository - generic data access over a session factory (SOLID: Dependency Inversion).
Challenge: Consistent data access, testability, query optimization in one place.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.sql.elements import ColumnElement

from news_api.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Generic async repository. Every call runs in its own short-lived session."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], model: type[ModelType]):
        self.session_factory = session_factory
        self.model = model

    async def count_where(self, *criteria: ColumnElement[bool]) -> int:
        """Number of rows matching all criteria."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(func.count()).select_from(self.model).where(*criteria)
            )
            return int(result.scalar_one())

    async def get_many_where(
        self,
        *criteria: ColumnElement[bool],
        columns: list[str],
        skip: int = 0,
        limit: int = 20,
    ) -> list[dict[str, Any]]:
        """Paginated rows as dicts. Ordered by primary key so windows do not overlap."""
        cols = [getattr(self.model, name) for name in columns]
        async with self.session_factory() as session:
            result = await session.execute(
                select(*cols)
                .where(*criteria)
                .order_by(self.model.id)
                .offset(skip)
                .limit(limit)
            )
            return [dict(row._mapping) for row in result]

    async def delete_all(self) -> int:
        """Remove every row. Returns the number of rows deleted."""
        async with self.session_factory() as session:
            result = await session.execute(delete(self.model))
            await session.commit()
            return result.rowcount or 0
