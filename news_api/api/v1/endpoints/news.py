"""
News endpoints - listing, engine-backed search and the bulk maintenance jobs.
Design: Thin controller; services hold the logic, gateways come from dependencies.
Paths and query names follow the public contract (page/limit, q, maxRecords).
"""

import time
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from news_api.cache.redis_client import job_lock
from news_api.config import get_settings
from news_api.core.dependencies import (
    get_news_search_service,
    get_news_service,
    get_reindex_service,
    get_search_reindex_service,
    get_seed_service,
)
from news_api.schemas.news import JobResult, NewsListResponse, SearchResponse
from news_api.services.news_service import NewsService
from news_api.services.reindex_service import ReindexService
from news_api.services.seed_service import SeedService

router = APIRouter()
settings = get_settings()


@router.get("/clear-data")
async def clear_data(svc: Annotated[NewsService, Depends(get_news_service)]):
    """Delete every record from the primary store."""
    deleted = await svc.clear_data()
    return {"message": "Data cleared successfully", "deleted": deleted}


@router.get("/re-index", response_model=JobResult)
async def re_index(svc: Annotated[ReindexService, Depends(get_reindex_service)]):
    """Rewrite every record with missing fields backfilled."""
    async with job_lock("reindex"):
        return await svc.reindex(batch_size=settings.bulk_batch_size)


@router.get("/re-index-elasticsearch", response_model=JobResult)
async def re_index_elasticsearch(svc: Annotated[ReindexService, Depends(get_search_reindex_service)]):
    """Mirror every record into the search index."""
    async with job_lock("reindex-elasticsearch"):
        return await svc.reindex_to_elasticsearch(batch_size=settings.bulk_batch_size)


@router.get("/search", response_model=SearchResponse)
async def search_news(
    svc: Annotated[NewsService, Depends(get_news_search_service)],
    q: str = Query(..., min_length=1),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=settings.max_page_size),
):
    """Relevance search on title, content, author and description."""
    return await svc.search(q, page=page, limit=limit)


@router.get("/run-seed", response_model=JobResult)
async def run_seed(
    svc: Annotated[SeedService, Depends(get_seed_service)],
    max_records: int = Query(settings.seed_default_records, ge=0, alias="maxRecords"),
):
    """Insert/update maxRecords synthetic records in batches."""
    async with job_lock("seed"):
        return await svc.run_seed(max_records, batch_size=settings.bulk_batch_size)


@router.get("", response_model=NewsListResponse)
async def list_news(
    svc: Annotated[NewsService, Depends(get_news_service)],
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    search: str | None = Query(None),
):
    """Paginated records, optionally filtered by the store's text search. Adds request latency."""
    started = time.perf_counter()
    result = await svc.get_news(page, limit, search)
    result["latency"] = f"{round((time.perf_counter() - started) * 1000)}ms"
    return result
