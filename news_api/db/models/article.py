"""
News article model - the record mirrored into the search index.
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Text, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from news_api.db.base import Base

# The nine fields shared by the store, the API and the search document.
RECORD_FIELDS = (
    "title",
    "content",
    "author",
    "url",
    "url_to_image",
    "published_at",
    "description",
    "source_id",
    "source_name",
)


def new_record_id() -> str:
    return str(uuid.uuid4())


class NewsArticle(Base):
    """News article. Columns are nullable; requiredness is checked by NewsCreate."""

    __tablename__ = "news"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_record_id)
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    author: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # Seeding dedup key. Not unique at the store level.
    url: Mapped[str | None] = mapped_column(Text, nullable=True, index=True)
    url_to_image: Mapped[str | None] = mapped_column(Text, nullable=True)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    source_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    source_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<NewsArticle(id={self.id}, title={self.title})>"
