"""rss2json.com client: turns an RSS feed URL into a list of item dicts."""

import logging
from typing import Any

import httpx

from cryptodash.exceptions import ExternalServiceError
from cryptodash.infra.http.rate_limited_client import RateLimitedClient

logger = logging.getLogger(__name__)

RSS2JSON_API = "https://api.rss2json.com/v1/api.json"


class Rss2JsonClient:
    def __init__(self, http_client: RateLimitedClient, timeout: float = 10.0, api_url: str = RSS2JSON_API) -> None:
        self._http = http_client
        self._timeout = timeout
        self._api_url = api_url

    async def get_items(self, rss_url: str) -> list[dict[str, Any]]:
        """Raw feed items; raises ExternalServiceError when the feed cannot be read."""
        try:
            response = await self._http.get(self._api_url, params={"rss_url": rss_url}, timeout=self._timeout)
        except httpx.HTTPError as exc:
            raise ExternalServiceError(f"rss2json request failed for {rss_url}: {exc}") from exc

        if response.status_code != 200:
            raise ExternalServiceError(f"rss2json returned {response.status_code} for {rss_url}")

        data = response.json()
        if data.get("status") != "ok":
            raise ExternalServiceError(f"rss2json status {data.get('status')!r} for {rss_url}: {data.get('message', '')}")

        items = data.get("items") or []
        return [item for item in items if isinstance(item, dict)]
