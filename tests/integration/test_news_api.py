from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from cryptodash.api.deps import get_news_service
from cryptodash.api.main import app
from cryptodash.domain.enums import NewsAgency
from cryptodash.services.news_service import NewsService, NewsSource

SOURCE = NewsSource("SEC Press Releases", "https://sec.example/rss", NewsAgency.SEC, filter_crypto=True)


@pytest.fixture()
def rss_client():
    client = MagicMock()
    client.get_items = AsyncMock(return_value=[
        {
            "title": "SEC Charges Crypto Platform",
            "description": "<p>Unregistered offering</p>",
            "pubDate": "2025-05-01 10:00:00",
            "link": "https://sec.example/1",
        },
        {"title": "SEC Announces Open Meeting", "description": "", "pubDate": "2025-05-02 10:00:00"},
    ])
    return client


@pytest.fixture()
async def client(rss_client):
    service = NewsService(rss_client, sources=[SOURCE], now=lambda: datetime(2025, 5, 3, tzinfo=UTC))
    app.dependency_overrides[get_news_service] = lambda: service
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


class TestNewsAPI:
    async def test_initial_feed(self, client):
        res = await client.get("/api/news")
        assert res.status_code == 200
        assert res.json()["news"] == []
        assert res.json()["loading"] is True

    async def test_refetch(self, client, rss_client):
        res = await client.post("/api/news/refetch")
        assert res.status_code == 200
        data = res.json()
        assert data["loading"] is False
        assert data["lastUpdated"].startswith("2025-05-03")
        assert len(data["news"]) == 1
        item = data["news"][0]
        assert item["title"] == "SEC Charges Crypto Platform"
        assert item["description"] == "Unregistered offering..."
        assert item["agency"] == "SEC"
        assert item["url"] == "https://sec.example/1"
        rss_client.get_items.assert_awaited_once_with("https://sec.example/rss")

        assert (await client.get("/api/news")).json() == data
