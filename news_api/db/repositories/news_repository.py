"""
News repository - primary store gateway for the bulk jobs and listing.
Challenge: Windowed reads, batched upserts keyed by an arbitrary column, text filter.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import func, insert, literal_column, or_, select, update
from sqlalchemy.sql.elements import ColumnElement

from news_api.db.models.article import NewsArticle, RECORD_FIELDS, new_record_id
from news_api.db.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)

# Fields covered by the store-side text predicate (GIN index in migration 001).
TEXT_SEARCH_FIELDS = ("title", "content", "author", "url", "description", "source_name")


@dataclass
class UpsertOp:
    """One insert-or-update keyed by a single-column equality filter."""

    filter: dict[str, Any]
    fields: dict[str, Any]
    upsert: bool = False


@dataclass
class BulkWriteResult:
    matched: int = 0
    upserted: int = 0
    upserted_ids: list[str] = field(default_factory=list)


def _text_document() -> ColumnElement:
    """coalesce(title, '') || ' ' || coalesce(content, '') ... Literals inlined to match the index expression."""
    blank = literal_column("''")
    space = literal_column("' '")
    parts = [func.coalesce(getattr(NewsArticle, name), blank) for name in TEXT_SEARCH_FIELDS]
    doc = parts[0]
    for part in parts[1:]:
        doc = doc.op("||")(space).op("||")(part)
    return doc


class NewsRepository(BaseRepository[NewsArticle]):
    """News-specific queries: count/page with optional text filter, bulk upsert by filter."""

    def __init__(self, session_factory):
        super().__init__(session_factory, NewsArticle)

    def _dialect_name(self) -> str:
        bind = self.session_factory.kw.get("bind")
        return bind.dialect.name if bind is not None else ""

    def text_search_clause(self, query: str) -> ColumnElement[bool]:
        """Store-native text predicate. PostgreSQL full-text; substring match elsewhere (SQLite tests)."""
        if self._dialect_name() == "postgresql":
            english = literal_column("'english'")
            return func.to_tsvector(english, _text_document()).op("@@")(
                func.plainto_tsquery(english, query)
            )
        return or_(
            *(getattr(NewsArticle, name).icontains(query, autoescape=True) for name in TEXT_SEARCH_FIELDS)
        )

    def _criteria(self, search: str | None) -> list[ColumnElement[bool]]:
        return [self.text_search_clause(search)] if search else []

    async def count(self, search: str | None = None) -> int:
        return await self.count_where(*self._criteria(search))

    async def page(
        self,
        search: str | None = None,
        fields: tuple[str, ...] | list[str] | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> list[dict[str, Any]]:
        """One window of records as dicts with "id" plus the requested fields (all nine by default)."""
        columns = ["id", *(fields if fields is not None else RECORD_FIELDS)]
        return await self.get_many_where(*self._criteria(search), columns=columns, skip=skip, limit=limit)

    async def bulk_upsert(self, ops: list[UpsertOp]) -> BulkWriteResult:
        """
        Apply ops as one unit of work and commit.
        Matching row (first by id) gets a full field update; no match inserts when op.upsert.
        Ops sharing a filter value resolve as if applied in order: with no matching row,
        ops before the first upsert are skipped, the rest merge into the inserted row.
        """
        result = BulkWriteResult()
        if not ops:
            return result

        # (column, value) -> ops in input order
        grouped: dict[tuple[str, Any], list[UpsertOp]] = {}
        for op in ops:
            if len(op.filter) != 1:
                raise ValueError(f"Upsert filter must have exactly one key, got {op.filter!r}")
            grouped.setdefault(next(iter(op.filter.items())), []).append(op)

        async with self.session_factory() as session:
            existing: dict[tuple[str, Any], str] = {}
            for column_name in {col for col, _ in grouped}:
                column = getattr(NewsArticle, column_name)
                values = [value for col, value in grouped if col == column_name]
                selected = [NewsArticle.id] if column_name == "id" else [NewsArticle.id, column]
                rows = await session.execute(
                    select(*selected).where(column.in_(values)).order_by(NewsArticle.id)
                )
                for row in rows:
                    existing.setdefault((column_name, row[-1]), row[0])

            updates: list[dict[str, Any]] = []
            inserts: list[dict[str, Any]] = []
            for (column_name, value), key_ops in grouped.items():
                row_id = existing.get((column_name, value))
                if row_id is None:
                    first = next((i for i, op in enumerate(key_ops) if op.upsert), None)
                    if first is None:
                        continue
                    key_ops = key_ops[first:]
                fields: dict[str, Any] = {}
                for op in key_ops:
                    fields.update(op.fields)
                if row_id is not None:
                    updates.append({**fields, "id": row_id})
                else:
                    inserts.append({"id": new_record_id(), column_name: value, **fields})

            if updates:
                await session.execute(update(NewsArticle), updates)
            if inserts:
                await session.execute(insert(NewsArticle), inserts)
            await session.commit()

        result.matched = len(updates)
        result.upserted = len(inserts)
        result.upserted_ids = [row["id"] for row in inserts]
        logger.debug("bulk_upsert: matched=%d upserted=%d", result.matched, result.upserted)
        return result
