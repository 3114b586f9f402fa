"""
News service - listing, engine-backed search and clearing the collection.
Design: Gateways come in through the constructor; easy to test with fakes.
"""

import asyncio
import logging
from typing import Any

from news_api.core.exceptions import NewsServiceError
from news_api.db.repositories.news_repository import NewsRepository
from news_api.search.elasticsearch_client import NewsSearchIndex

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ["title", "content", "author", "description"]


class NewsService:
    """Read paths over the primary store and the search index."""

    def __init__(self, news_repo: NewsRepository, search_index: NewsSearchIndex | None = None, index_name: str = "news"):
        self.news_repo = news_repo
        self.search_index = search_index
        self.index_name = index_name

    async def clear_data(self) -> int:
        """Delete every record from the primary store. The search index is left as is."""
        try:
            deleted = await self.news_repo.delete_all()
        except Exception as e:
            logger.exception("Error clearing data: %s", e)
            raise NewsServiceError("Failed to clear data") from e
        logger.info("Data cleared successfully (%d records)", deleted)
        return deleted

    async def search(self, query: str, page: int = 1, limit: int = 10) -> dict[str, Any]:
        """Relevance search in the index. Each hit is its source with the document id as "id"."""
        try:
            hits, total = await self.search_index.search(
                self.index_name,
                query,
                SEARCH_FIELDS,
                from_=(page - 1) * limit,
                size=limit,
            )
        except Exception as e:
            logger.exception("Error during Elasticsearch search: %s", e)
            raise NewsServiceError("Failed to search news") from e

        data = [{"id": doc_id, **source} for doc_id, source in hits]
        logger.info('Search completed: found %d results for query "%s"', total, query)
        return {"data": data, "total": total}

    async def get_news(self, page: int, limit: int, search: str | None = None) -> dict[str, Any]:
        """Page of records, optionally filtered by the store's text predicate, with the matching total."""
        try:
            news, total = await asyncio.gather(
                self.news_repo.page(search=search, skip=(page - 1) * limit, limit=limit),
                self.news_repo.count(search=search),
            )
        except Exception as e:
            logger.exception("Error fetching news: %s", e)
            raise NewsServiceError("Failed to fetch news") from e

        logger.info("Search query: %r", search)
        logger.info("Total records found: %d", total)
        return {"data": news, "total": total}
