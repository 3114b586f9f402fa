"""
News service tests - engine-backed search paging, store listing, clearing, error mapping.
"""

import pytest

from conftest import FakeSearchIndex, insert_records, make_record
from news_api.core.exceptions import NewsServiceError
from news_api.db.repositories.news_repository import NewsRepository
from news_api.services.news_service import NewsService


@pytest.mark.asyncio
async def test_search_paging_and_id_injection(news_repo: NewsRepository, search_index: FakeSearchIndex):
    search_index.indices["news"] = {
        f"doc-{i:02d}": {"title": f"election update {i}", "content": "", "author": "A", "description": ""}
        for i in range(25)
    }
    svc = NewsService(news_repo, search_index, index_name="news")

    result = await svc.search("election", page=2, limit=10)

    call = search_index.search_calls[0]
    assert call["from_"] == 10 and call["size"] == 10
    assert call["fields"] == ["title", "content", "author", "description"]
    assert result["total"] == 25
    assert len(result["data"]) == 10
    assert result["data"][0]["id"] == "doc-10"
    assert result["data"][0]["title"] == "election update 10"


@pytest.mark.asyncio
async def test_search_failure_is_generic(news_repo: NewsRepository, search_index: FakeSearchIndex):
    search_index.search_error = ConnectionError("es down")
    with pytest.raises(NewsServiceError) as exc_info:
        await NewsService(news_repo, search_index).search("anything")
    assert exc_info.value.message == "Failed to search news"


@pytest.mark.asyncio
async def test_get_news_with_text_filter(news_repo: NewsRepository):
    await insert_records(
        news_repo,
        [make_record(title=f"Budget item {i}") for i in range(12)]
        + [make_record(title="Weather", content="Sunny", description="Warm") for _ in range(5)],
    )
    svc = NewsService(news_repo)

    result = await svc.get_news(page=1, limit=10, search="budget")
    assert result["total"] == 12
    assert len(result["data"]) == 10
    assert all("Budget" in row["title"] for row in result["data"])

    second = await svc.get_news(page=2, limit=10, search="budget")
    assert len(second["data"]) == 2

    everything = await svc.get_news(page=1, limit=100)
    assert everything["total"] == 17


@pytest.mark.asyncio
async def test_get_news_failure_is_generic(news_repo: NewsRepository, monkeypatch):
    async def broken_page(**kwargs):
        raise ConnectionError("db down")

    monkeypatch.setattr(news_repo, "page", broken_page)
    with pytest.raises(NewsServiceError) as exc_info:
        await NewsService(news_repo).get_news(1, 10)
    assert exc_info.value.message == "Failed to fetch news"


@pytest.mark.asyncio
async def test_clear_data(news_repo: NewsRepository):
    await insert_records(news_repo, [make_record() for _ in range(3)])
    assert await NewsService(news_repo).clear_data() == 3
    assert await news_repo.count() == 0
