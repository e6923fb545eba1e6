from unittest.mock import AsyncMock

import httpx
import pytest

from cryptodash.exceptions import ExternalServiceError
from cryptodash.infra.news.rss2json import RSS2JSON_API, Rss2JsonClient


class TestRss2JsonClient:
    async def test_returns_items(self, mock_http, make_response):
        mock_http.get = AsyncMock(return_value=make_response(200, {
            "status": "ok",
            "items": [{"title": "A"}, "junk", {"title": "B"}],
        }))
        client = Rss2JsonClient(mock_http)

        items = await client.get_items("https://sec.example/rss")

        assert [i["title"] for i in items] == ["A", "B"]
        mock_http.get.assert_awaited_once_with(
            RSS2JSON_API, params={"rss_url": "https://sec.example/rss"}, timeout=10.0,
        )

    async def test_error_status_in_body(self, mock_http, make_response):
        mock_http.get = AsyncMock(return_value=make_response(200, {"status": "error", "message": "feed unreachable"}))

        with pytest.raises(ExternalServiceError, match="feed unreachable"):
            await Rss2JsonClient(mock_http).get_items("https://sec.example/rss")

    async def test_http_error(self, mock_http, make_response):
        mock_http.get = AsyncMock(return_value=make_response(503))

        with pytest.raises(ExternalServiceError, match="503"):
            await Rss2JsonClient(mock_http).get_items("https://sec.example/rss")

    async def test_transport_error(self, mock_http):
        mock_http.get = AsyncMock(side_effect=httpx.ReadTimeout("slow"))

        with pytest.raises(ExternalServiceError):
            await Rss2JsonClient(mock_http).get_items("https://sec.example/rss")
