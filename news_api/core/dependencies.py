"""
FastAPI dependencies - gateway and service construction (SOLID: Dependency Inversion).
Tests override get_news_repository / get_news_search_index with local doubles.
"""

from typing import Annotated

from fastapi import Depends

from news_api.config import get_settings
from news_api.db.repositories.news_repository import NewsRepository
from news_api.db.session import get_session_factory
from news_api.search.elasticsearch_client import NewsSearchIndex, get_elasticsearch
from news_api.services.news_service import NewsService
from news_api.services.reindex_service import ReindexService
from news_api.services.seed_service import SeedService


def get_news_repository() -> NewsRepository:
    return NewsRepository(get_session_factory())


async def get_news_search_index() -> NewsSearchIndex:
    return NewsSearchIndex(await get_elasticsearch())


NewsRepo = Annotated[NewsRepository, Depends(get_news_repository)]
SearchIndex = Annotated[NewsSearchIndex, Depends(get_news_search_index)]


def get_news_service(news_repo: NewsRepo) -> NewsService:
    """Listing and clearing only touch the primary store."""
    return NewsService(news_repo, index_name=get_settings().news_index)


def get_news_search_service(news_repo: NewsRepo, search_index: SearchIndex) -> NewsService:
    return NewsService(news_repo, search_index, index_name=get_settings().news_index)


def get_reindex_service(news_repo: NewsRepo) -> ReindexService:
    return ReindexService(news_repo, index_name=get_settings().news_index)


def get_search_reindex_service(news_repo: NewsRepo, search_index: SearchIndex) -> ReindexService:
    return ReindexService(news_repo, search_index, index_name=get_settings().news_index)


def get_seed_service(news_repo: NewsRepo) -> SeedService:
    return SeedService(news_repo)
