"""
Reindex service - streams the whole collection in fixed windows.
Store to store: backfill missing fields and write back by id.
Store to search: project each record to a search document and bulk index it by id.
Windows are processed strictly one after another; a failure stops the run, earlier windows stay written.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from news_api.core.exceptions import NewsServiceError
from news_api.db.models.article import RECORD_FIELDS
from news_api.db.repositories.news_repository import NewsRepository, UpsertOp
from news_api.schemas.news import JobResult, NewsDocument
from news_api.search.elasticsearch_client import NewsSearchIndex

logger = logging.getLogger(__name__)

# Falsy values (None, "") are replaced; published_at gets the time of the backfill.
FIELD_DEFAULTS: dict[str, Any] = {
    "title": "No Title",
    "content": "No Content",
    "author": "Unknown Author",
    "url": "",
    "url_to_image": "",
    "published_at": None,
    "description": "",
    "source_id": "",
    "source_name": "Unknown Source",
}


def backfill(record: dict[str, Any], now: datetime | None = None) -> dict[str, Any]:
    """Full nine-field set for a record, defaults substituted per field."""
    now = now or datetime.now(timezone.utc)
    fields = {name: record.get(name) or default for name, default in FIELD_DEFAULTS.items()}
    if not fields["published_at"]:
        fields["published_at"] = now
    return fields


def to_search_document(record: dict[str, Any]) -> dict[str, Any]:
    """Strict nine-field projection, camelCase, values as stored."""
    return NewsDocument(**{name: record.get(name) for name in RECORD_FIELDS}).model_dump(
        by_alias=True, mode="json"
    )


class ReindexService:
    """Bulk rewrite of the primary store and bulk mirror into the search index."""

    def __init__(self, news_repo: NewsRepository, search_index: NewsSearchIndex | None = None, index_name: str = "news"):
        self.news_repo = news_repo
        self.search_index = search_index
        self.index_name = index_name

    async def reindex(self, batch_size: int = 100) -> JobResult:
        """Backfill defaults on every record. Total is read once; rows added mid-run are not covered."""
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        processed = 0
        batches = 0
        try:
            total = await self.news_repo.count()
            logger.info("Total records to reindex: %d", total)

            for skip in range(0, total, batch_size):
                records = await self.news_repo.page(fields=RECORD_FIELDS, skip=skip, limit=batch_size)
                now = datetime.now(timezone.utc)
                ops = [
                    UpsertOp(filter={"id": record["id"]}, fields=backfill(record, now))
                    for record in records
                ]
                await self.news_repo.bulk_upsert(ops)
                processed += len(records)
                batches += 1
                logger.info("Reindexed %d of %d records", min(skip + batch_size, total), total)
        except Exception as e:
            logger.exception("Error during reindexing: %s", e)
            raise NewsServiceError("Failed to reindex news") from e

        logger.info("Reindexing completed successfully")
        return JobResult(processed=processed, batches=batches)

    async def reindex_to_elasticsearch(self, batch_size: int = 100) -> JobResult:
        """
        Mirror every record into the search index, document id = record id (reruns overwrite).
        Any item error in a page fails the whole run; pages already indexed are not rolled back.
        """
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        if self.search_index is None:
            raise ValueError("reindex_to_elasticsearch needs a search index gateway")
        message = "Failed to reindex news to Elasticsearch"
        processed = 0
        batches = 0
        try:
            total = await self.news_repo.count()
            logger.info("Total records to reindex to Elasticsearch: %d", total)

            for skip in range(0, total, batch_size):
                records = await self.news_repo.page(skip=skip, limit=batch_size)
                docs = [(str(record["id"]), to_search_document(record)) for record in records]
                if not docs:
                    continue

                outcome = await self.search_index.bulk_index(self.index_name, docs)
                if outcome.errors:
                    logger.error(
                        "Errors occurred during bulk indexing (window at %d): %d failed items, first: %s",
                        skip,
                        len(outcome.failed_items),
                        outcome.failed_items[:1],
                    )
                    raise NewsServiceError(message)
                processed += len(docs)
                batches += 1
                logger.info(
                    "Reindexed %d of %d records to Elasticsearch", min(skip + batch_size, total), total
                )
        except NewsServiceError:
            raise
        except Exception as e:
            logger.exception("Error during reindexing to Elasticsearch: %s", e)
            raise NewsServiceError(message) from e

        logger.info("Reindexing to Elasticsearch completed successfully")
        return JobResult(processed=processed, batches=batches)
