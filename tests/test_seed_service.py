"""
Seed service tests - batch arithmetic, url dedup, abort without rollback.
"""

import math

import pytest

from conftest import make_record
from news_api.core.exceptions import NewsServiceError
from news_api.db.repositories.news_repository import NewsRepository
from news_api.schemas.news import NewsCreate
from news_api.services.fake_news import generate_fake_news
from news_api.services.seed_service import SeedService


class RecordingRepository(NewsRepository):
    """Real repository that remembers bulk write sizes and can fail on the Nth call."""

    def __init__(self, session_factory, fail_on_call: int | None = None):
        super().__init__(session_factory)
        self.batch_sizes: list[int] = []
        self.fail_on_call = fail_on_call

    async def bulk_upsert(self, ops):
        self.batch_sizes.append(len(ops))
        if self.fail_on_call == len(self.batch_sizes):
            raise RuntimeError("connection reset")
        return await super().bulk_upsert(ops)


def fixed_generator(count: int):
    """Cycles through `count` deterministic urls."""
    state = {"n": 0}

    def generate() -> NewsCreate:
        n = state["n"] % count
        state["n"] += 1
        return NewsCreate(**make_record(url=f"https://example.com/story-{n}", title=f"Story {n}"))

    return generate


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "max_records,batch_size,expected",
    [(250, 100, [100, 100, 50]), (200, 100, [100, 100]), (7, 3, [3, 3, 1]), (0, 100, [])],
)
async def test_bulk_write_count(session_factory, max_records, batch_size, expected):
    repo = RecordingRepository(session_factory)
    result = await SeedService(repo).run_seed(max_records, batch_size=batch_size)

    assert repo.batch_sizes == expected
    assert len(repo.batch_sizes) == math.ceil(max_records / batch_size)
    assert result.processed == max_records
    assert result.batches == len(expected)
    assert await repo.count() == max_records


@pytest.mark.asyncio
async def test_seeding_twice_upserts_by_url(news_repo: NewsRepository):
    await SeedService(news_repo, generator=fixed_generator(30)).run_seed(30, batch_size=10)
    await SeedService(news_repo, generator=fixed_generator(30)).run_seed(30, batch_size=10)
    assert await news_repo.count() == 30


@pytest.mark.asyncio
async def test_generation_attempts_not_distinct_rows(news_repo: NewsRepository):
    """Colliding urls overwrite: 25 attempts over 5 urls leave 5 rows."""
    result = await SeedService(news_repo, generator=fixed_generator(5)).run_seed(25, batch_size=4)
    assert result.processed == 25
    assert await news_repo.count() == 5


@pytest.mark.asyncio
async def test_failed_flush_aborts_and_keeps_earlier_batches(session_factory):
    repo = RecordingRepository(session_factory, fail_on_call=2)
    with pytest.raises(NewsServiceError) as exc_info:
        await SeedService(repo).run_seed(50, batch_size=10)

    assert exc_info.value.message == "Failed to seed news"
    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert repo.batch_sizes == [10, 10]
    assert await repo.count() == 10


@pytest.mark.asyncio
async def test_rejects_bad_batch_size(news_repo: NewsRepository):
    with pytest.raises(ValueError):
        await SeedService(news_repo).run_seed(10, batch_size=0)


def test_fake_news_is_valid_and_unique():
    records = [generate_fake_news() for _ in range(50)]
    assert len({r.url for r in records}) == 50
    assert all(r.title and r.content and r.author and r.source_name for r in records)
