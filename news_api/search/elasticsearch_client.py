"""
Elasticsearch client - search index gateway for news documents.
Challenge: Index management, async bulk writes, relevance queries, hit-total normalization.
Sync helpers used by scripts and Celery workers (no shared event loop).
"""

import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlparse

from elasticsearch import AsyncElasticsearch, Elasticsearch

from news_api.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

_es_client: AsyncElasticsearch | None = None


def _es_client_options() -> dict:
    """Build Elasticsearch client options from settings (supports HTTPS + basic auth in URL)."""
    url = settings.elasticsearch_url
    basic_auth = None
    if "@" in url and "://" in url:
        parsed = urlparse(url)
        if parsed.username and parsed.password:
            basic_auth = (parsed.username, parsed.password)
        # Remove auth from URL for the client (it uses basic_auth separately)
        netloc = parsed.hostname or ""
        if parsed.port:
            netloc += f":{parsed.port}"
        url = f"{parsed.scheme}://{netloc}"
    opts = {
        "hosts": [url],
        "verify_certs": settings.elasticsearch_verify_certs,
        "request_timeout": 30,  # bulk with refresh can be slow when ES busy
    }
    if basic_auth:
        opts["basic_auth"] = basic_auth
    return opts


async def get_elasticsearch() -> AsyncElasticsearch:
    """Shared async client for the API process."""
    global _es_client
    if _es_client is None:
        _es_client = AsyncElasticsearch(**_es_client_options())
    return _es_client


async def close_elasticsearch() -> None:
    """Close the shared async client on shutdown."""
    global _es_client
    if _es_client is not None:
        client, _es_client = _es_client, None
        await client.close()


def new_elasticsearch() -> AsyncElasticsearch:
    """Fresh async client, owned and closed by the caller (Celery tasks)."""
    return AsyncElasticsearch(**_es_client_options())


def _news_index_mappings() -> dict:
    """Mapping for the news index: the nine projected record fields, camelCase."""
    return {
        "properties": {
            "title": {"type": "text", "analyzer": "standard"},
            "content": {"type": "text", "analyzer": "standard"},
            "author": {"type": "text", "analyzer": "standard"},
            "url": {"type": "keyword"},
            "urlToImage": {"type": "keyword", "index": False},
            "publishedAt": {"type": "date"},
            "description": {"type": "text", "analyzer": "standard"},
            "sourceId": {"type": "keyword"},
            "sourceName": {"type": "text", "fields": {"raw": {"type": "keyword"}}},
        }
    }


async def ensure_news_index() -> None:
    """Create news index with mapping if not exists. Single-node: 0 replicas to avoid unassigned shards."""
    es = await get_elasticsearch()
    if not await es.indices.exists(index=settings.news_index):
        await es.indices.create(
            index=settings.news_index,
            settings={"index": {"number_of_replicas": 0}},
            mappings=_news_index_mappings(),
        )
        logger.info("Created Elasticsearch index %r", settings.news_index)


def normalize_total(total: Any, fallback: int = 0) -> int:
    """hits.total is a bare int (track_total_hits=true, older servers) or {"value": n, "relation": ...}."""
    if isinstance(total, bool):
        return fallback
    if isinstance(total, int):
        return total
    if isinstance(total, dict) and "value" in total:
        return int(total["value"])
    return fallback


@dataclass
class BulkOutcome:
    """Result of one _bulk request. errors mirrors the response flag."""

    errors: bool
    indexed: int = 0
    failed_items: list[dict[str, Any]] = field(default_factory=list)


class NewsSearchIndex:
    """Search index gateway: bulk index-or-overwrite by id and multi-field relevance search."""

    def __init__(self, client: AsyncElasticsearch):
        self.client = client

    async def bulk_index(self, index: str, docs: list[tuple[str, dict[str, Any]]]) -> BulkOutcome:
        operations: list[dict[str, Any]] = []
        for doc_id, document in docs:
            operations.append({"index": {"_index": index, "_id": str(doc_id)}})
            operations.append(document)
        response = await self.client.bulk(operations=operations, refresh=True)
        body = getattr(response, "body", response)
        failed = [
            action
            for item in body.get("items", [])
            for action in item.values()
            if action.get("error")
        ]
        return BulkOutcome(
            errors=bool(body.get("errors")),
            indexed=len(docs) - len(failed),
            failed_items=failed,
        )

    async def search(
        self,
        index: str,
        query: str,
        fields: list[str],
        from_: int,
        size: int,
    ) -> tuple[list[tuple[str, dict[str, Any]]], int]:
        """Run a multi_match query. Returns (id, source) hits in score order and the normalized total."""
        response = await self.client.search(
            index=index,
            query={"multi_match": {"query": query, "fields": fields}},
            from_=from_,
            size=size,
        )
        # Response may be ObjectApiResponse; support both .body and dict access
        body = getattr(response, "body", response)
        raw_hits = body["hits"]["hits"]
        hits = [(hit["_id"], hit.get("_source") or {}) for hit in raw_hits]
        total = normalize_total(body["hits"].get("total"), fallback=len(hits))
        return hits, total


# --- Sync API for scripts and Celery workers ---

def _sync_es_client() -> Elasticsearch:
    """New sync client per call (safe in forked Celery worker)."""
    return Elasticsearch(**_es_client_options())


def delete_news_index_sync() -> bool:
    """Drop the news index so the next reindex recreates it. Returns False when it did not exist."""
    es = _sync_es_client()
    if es.indices.exists(index=settings.news_index):
        es.indices.delete(index=settings.news_index)
        return True
    return False


def ensure_news_index_sync() -> None:
    """Create news index if not exists. Single-node: 0 replicas."""
    es = _sync_es_client()
    if not es.indices.exists(index=settings.news_index):
        es.indices.create(
            index=settings.news_index,
            settings={"index": {"number_of_replicas": 0}},
            mappings=_news_index_mappings(),
        )
