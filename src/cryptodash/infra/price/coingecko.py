"""CoinGecko simple price and market chart, reached through the CORS relay race."""

import logging
from typing import Any
from urllib.parse import urlencode

from cryptodash.domain.enums import PriceSource
from cryptodash.domain.models import CurrentPrice
from cryptodash.exceptions import ExternalServiceError, InvalidQuoteError
from cryptodash.infra.http.proxy_race import ProxyRaceFetcher
from cryptodash.infra.price.base import DEFAULT_TIMEOUT, CurrentPriceProvider

logger = logging.getLogger(__name__)

BASE_URL = "https://api.coingecko.com/api/v3"
HISTORY_TIMEOUT = 8.0


class CoinGeckoProvider(CurrentPriceProvider):
    """Last resort in the current-price chain, and the only source of history."""

    source = PriceSource.COINGECKO

    def __init__(
        self,
        race: ProxyRaceFetcher,
        coin: str = "bitcoin",
        timeout: float = DEFAULT_TIMEOUT,
        history_timeout: float = HISTORY_TIMEOUT,
        base_url: str = BASE_URL,
    ) -> None:
        super().__init__(http_client=None, coin=coin, timeout=timeout)
        self._race = race
        self._history_timeout = history_timeout
        self._base_url = base_url.rstrip("/")

    def simple_price_url(self) -> str:
        query = urlencode({"ids": self._coin, "vs_currencies": "usd", "include_24hr_change": "true"})
        return f"{self._base_url}/simple/price?{query}"

    def market_chart_url(self, days: int) -> str:
        query = urlencode({"vs_currency": "usd", "days": days, "interval": "daily"})
        return f"{self._base_url}/coins/{self._coin}/market_chart?{query}"

    async def _fetch_payload(self) -> Any:
        return await self._race.fetch_json(self.simple_price_url(), timeout=self._timeout)

    def _parse(self, payload: Any) -> CurrentPrice:
        entry = payload.get(self._coin)
        if not entry:
            raise InvalidQuoteError(f"CoinGecko: no entry for '{self._coin}'")
        return self._quote(entry.get("usd"), entry.get("usd_24h_change"))

    async def fetch_history(self, days: int) -> list[list[float]]:
        """Daily ``[timestamp_ms, price]`` samples for the last ``days`` days.

        Raises ExternalServiceError when no relay delivers a non-empty series.
        """
        data = await self._race.fetch_json(self.market_chart_url(days), timeout=self._history_timeout)
        prices = data.get("prices") if isinstance(data, dict) else None
        if not prices:
            raise ExternalServiceError("CoinGecko market chart returned no prices")
        logger.info("Got historical data: %d data points", len(prices))
        return prices
