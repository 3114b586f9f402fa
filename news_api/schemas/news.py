"""News request/response schemas - REST API contract and search document shape."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

# API and search documents use camelCase (urlToImage, publishedAt, ...); Python uses snake_case.
CAMEL_CONFIG = {"alias_generator": to_camel, "populate_by_name": True}


class NewsCreate(BaseModel):
    """Validated construction of a record. Missing or empty required fields raise ValidationError."""

    model_config = CAMEL_CONFIG

    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    url_to_image: str | None = None
    published_at: datetime
    description: str | None = None
    source_id: str | None = None
    source_name: str = Field(..., min_length=1)


class NewsDocument(BaseModel):
    """Search index projection of a record. Values are forwarded as stored, nulls included."""

    model_config = CAMEL_CONFIG

    title: str | None = None
    content: str | None = None
    author: str | None = None
    url: str | None = None
    url_to_image: str | None = None
    published_at: datetime | None = None
    description: str | None = None
    source_id: str | None = None
    source_name: str | None = None


class NewsResponse(NewsDocument):
    id: str


class NewsListResponse(BaseModel):
    data: list[NewsResponse]
    total: int
    latency: str | None = None  # Populated by the endpoint


class SearchResponse(BaseModel):
    data: list[dict[str, Any]]
    total: int


class JobResult(BaseModel):
    """Outcome of a bulk job (seed or reindex)."""

    processed: int
    batches: int
