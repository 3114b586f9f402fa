"""
Celery tasks - run the bulk jobs outside the request path.
Each task owns its event loop, DB engine and ES client; nothing is shared with the API process.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from news_api.cache.redis_client import close_redis, job_lock
from news_api.config import get_settings
from news_api.core.exceptions import JobAlreadyRunningError
from news_api.db.repositories.news_repository import NewsRepository
from news_api.db.session import create_worker_engine
from news_api.queue.celery_app import celery_app
from news_api.search.elasticsearch_client import NewsSearchIndex, new_elasticsearch
from news_api.services.reindex_service import ReindexService
from news_api.services.seed_service import SeedService

logger = logging.getLogger(__name__)
settings = get_settings()


def _run_async(coro):
    """Run async function from sync Celery task. The Redis client is rebuilt per loop."""

    async def _main():
        try:
            return await coro
        finally:
            await close_redis()

    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(_main())
    finally:
        loop.close()


@asynccontextmanager
async def _worker_repository():
    engine = create_worker_engine()
    try:
        yield NewsRepository(async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False))
    finally:
        await engine.dispose()


async def _seed(max_records: int, batch_size: int) -> dict:
    async with job_lock("seed"), _worker_repository() as repo:
        result = await SeedService(repo).run_seed(max_records, batch_size=batch_size)
    return result.model_dump()


async def _reindex(batch_size: int) -> dict:
    async with job_lock("reindex"), _worker_repository() as repo:
        result = await ReindexService(repo).reindex(batch_size=batch_size)
    return result.model_dump()


async def _reindex_to_search(batch_size: int) -> dict:
    async with job_lock("reindex-elasticsearch"), _worker_repository() as repo:
        es = new_elasticsearch()
        try:
            svc = ReindexService(repo, NewsSearchIndex(es), index_name=settings.news_index)
            result = await svc.reindex_to_elasticsearch(batch_size=batch_size)
        finally:
            await es.close()
    return result.model_dump()


def _run_job(job: str, coro) -> dict:
    try:
        return _run_async(coro)
    except JobAlreadyRunningError:
        logger.info("%s skipped: another run holds the lock", job)
        return {"skipped": True}


@celery_app.task
def seed_news_task(max_records: int | None = None, batch_size: int | None = None) -> dict:
    """Seed synthetic records (same batching as the HTTP trigger)."""
    return _run_job(
        "seed",
        _seed(
            settings.seed_default_records if max_records is None else max_records,
            batch_size or settings.bulk_batch_size,
        ),
    )


@celery_app.task
def reindex_news_task(batch_size: int | None = None) -> dict:
    """Store-to-store reindex with default backfill."""
    return _run_job("reindex", _reindex(batch_size or settings.bulk_batch_size))


@celery_app.task
def reindex_news_to_search_task(batch_size: int | None = None) -> dict:
    """Store-to-search reindex. Fails the task on any bulk item error."""
    return _run_job("reindex-elasticsearch", _reindex_to_search(batch_size or settings.bulk_batch_size))
