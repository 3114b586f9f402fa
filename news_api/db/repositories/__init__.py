# Repository pattern: abstract data access (SOLID - Dependency Inversion)

from news_api.db.repositories.news_repository import BulkWriteResult, NewsRepository, UpsertOp

__all__ = ["NewsRepository", "UpsertOp", "BulkWriteResult"]
