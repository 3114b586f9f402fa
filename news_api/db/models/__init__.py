from news_api.db.models.article import NewsArticle, RECORD_FIELDS

__all__ = ["NewsArticle", "RECORD_FIELDS"]
