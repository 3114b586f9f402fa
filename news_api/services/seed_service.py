"""
Seed service - bulk synthetic data, upserted in fixed-size batches keyed by url.
"""

import logging
from collections.abc import Callable

from news_api.core.exceptions import NewsServiceError
from news_api.db.repositories.news_repository import NewsRepository, UpsertOp
from news_api.schemas.news import JobResult, NewsCreate
from news_api.services.fake_news import generate_fake_news

logger = logging.getLogger(__name__)


class SeedService:
    """Generates records and writes them with one bulk upsert per batch."""

    def __init__(
        self,
        news_repo: NewsRepository,
        generator: Callable[[], NewsCreate] = generate_fake_news,
    ):
        self.news_repo = news_repo
        self.generator = generator

    async def run_seed(self, max_records: int = 2000, batch_size: int = 100) -> JobResult:
        """
        Generate max_records records (attempts, not distinct rows: a repeated url overwrites).
        Exactly ceil(max_records / batch_size) bulk writes; a failed flush aborts, earlier batches stay.
        """
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        if max_records < 0:
            raise ValueError("max_records must be >= 0")

        logger.info("Seeding %d fake news records...", max_records)
        ops: list[UpsertOp] = []
        count = 0
        batches = 0
        try:
            while count < max_records:
                record = self.generator()
                ops.append(
                    UpsertOp(
                        filter={"url": record.url},
                        fields=record.model_dump(),
                        upsert=True,
                    )
                )
                count += 1

                if len(ops) == batch_size:
                    await self.news_repo.bulk_upsert(ops)
                    batches += 1
                    logger.info("Inserted/Updated %d records...", count)
                    ops = []

            if ops:
                await self.news_repo.bulk_upsert(ops)
                batches += 1
                logger.info("Inserted/Updated %d records...", count)
        except Exception as e:
            logger.exception("Error during seeding after %d records: %s", count, e)
            raise NewsServiceError("Failed to seed news") from e

        logger.info("Seeding completed successfully. Inserted/Updated %d records.", count)
        return JobResult(processed=count, batches=batches)
