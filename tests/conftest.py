"""
Pytest fixtures - SQLite store, in-memory search index and Redis doubles, API client.
No real PostgreSQL / Elasticsearch / Redis needed for unit tests.
"""

from datetime import datetime, timezone
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from news_api.cache import redis_client
from news_api.core.dependencies import get_news_repository, get_news_search_index
from news_api.db.base import Base
from news_api.db.models import NewsArticle  # noqa: F401 - ensure models are registered
from news_api.db.models.article import new_record_id
from news_api.db.repositories.news_repository import NewsRepository, UpsertOp
from news_api.main import app
from news_api.search.elasticsearch_client import BulkOutcome


class FakeSearchIndex:
    """In-memory stand-in for NewsSearchIndex. fail_on_calls: 1-based bulk calls whose first item errors."""

    def __init__(self):
        self.indices: dict[str, dict[str, dict[str, Any]]] = {}
        self.bulk_calls: list[list[tuple[str, dict[str, Any]]]] = []
        self.search_calls: list[dict[str, Any]] = []
        self.fail_on_calls: set[int] = set()
        self.search_error: Exception | None = None

    async def bulk_index(self, index, docs):
        self.bulk_calls.append(list(docs))
        call_no = len(self.bulk_calls)
        store = self.indices.setdefault(index, {})
        failed = []
        for position, (doc_id, document) in enumerate(docs):
            if call_no in self.fail_on_calls and position == 0:
                failed.append({"_id": doc_id, "status": 400, "error": {"type": "mapper_parsing_exception"}})
                continue
            store[doc_id] = document
        return BulkOutcome(errors=bool(failed), indexed=len(docs) - len(failed), failed_items=failed)

    async def search(self, index, query, fields, from_, size):
        self.search_calls.append(
            {"index": index, "query": query, "fields": fields, "from_": from_, "size": size}
        )
        if self.search_error is not None:
            raise self.search_error
        needle = query.lower()
        matches = [
            (doc_id, document)
            for doc_id, document in self.indices.get(index, {}).items()
            if any(needle in str(document.get(f) or "").lower() for f in fields)
        ]
        return matches[from_ : from_ + size], len(matches)


class FakeRedis:
    """Just enough of redis.asyncio.Redis for job locks."""

    def __init__(self):
        self.store: dict[str, str] = {}

    async def set(self, key, value, nx=False, ex=None):
        if nx and key in self.store:
            return None
        self.store[key] = value
        return True

    async def get(self, key):
        return self.store.get(key)

    async def delete(self, key):
        return 1 if self.store.pop(key, None) is not None else 0

    async def aclose(self):
        pass


def make_record(**overrides) -> dict[str, Any]:
    """Complete record fields (snake_case); override any of them."""
    record = {
        "title": "Budget vote delayed",
        "content": "Lawmakers postponed the vote.",
        "author": "Jane Doe",
        "url": f"https://example.com/{new_record_id()}",
        "url_to_image": "https://images.example.com/a.jpg",
        "published_at": datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        "description": "A short summary.",
        "source_id": "src-1",
        "source_name": "Daily Ledger",
    }
    record.update(overrides)
    return record


async def insert_records(repo: NewsRepository, records: list[dict[str, Any]]) -> list[str]:
    """Insert records as-is (incomplete ones too). Returns the new ids in input order."""
    ids = [new_record_id() for _ in records]
    await repo.bulk_upsert(
        [UpsertOp(filter={"id": row_id}, fields=record, upsert=True) for row_id, record in zip(ids, records)]
    )
    return ids


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch) -> FakeRedis:
    fake = FakeRedis()
    monkeypatch.setattr(redis_client, "_redis", fake)
    return fake


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def news_repo(session_factory) -> NewsRepository:
    return NewsRepository(session_factory)


@pytest.fixture
def search_index() -> FakeSearchIndex:
    return FakeSearchIndex()


@pytest_asyncio.fixture
async def client(news_repo: NewsRepository, search_index: FakeSearchIndex):
    app.dependency_overrides[get_news_repository] = lambda: news_repo
    app.dependency_overrides[get_news_search_index] = lambda: search_index
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
