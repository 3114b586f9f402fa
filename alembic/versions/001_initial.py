"""Initial schema: news articles

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Must match NewsRepository.text_search_clause so the planner can use the index
TEXT_SEARCH_EXPRESSION = (
    "to_tsvector('english', "
    "coalesce(title, '') || ' ' || coalesce(content, '') || ' ' || coalesce(author, '') || ' ' || "
    "coalesce(url, '') || ' ' || coalesce(description, '') || ' ' || coalesce(source_name, ''))"
)


def upgrade() -> None:
    op.create_table(
        "news",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("author", sa.String(255), nullable=True),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("url_to_image", sa.Text(), nullable=True),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("source_id", sa.String(255), nullable=True),
        sa.Column("source_name", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    # Seeding dedup key; not unique
    op.create_index("ix_news_url", "news", ["url"], unique=False)
    op.execute(f"CREATE INDEX ix_news_text_search ON news USING GIN ({TEXT_SEARCH_EXPRESSION})")


def downgrade() -> None:
    op.execute("DROP INDEX IF EXISTS ix_news_text_search")
    op.drop_index("ix_news_url", "news")
    op.drop_table("news")
