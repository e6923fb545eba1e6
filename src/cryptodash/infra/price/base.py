"""Common shape for current-price providers.

Every provider turns its own JSON layout into a ``CurrentPrice``; the
resolver only ever sees ``fetch_current()``. Adapters raise on any failure
(HTTP error, timeout, unexpected payload) and never return a partial quote.
"""

from abc import ABC, abstractmethod
from typing import Any

import httpx

from cryptodash.domain.enums import PriceSource
from cryptodash.domain.models import CurrentPrice
from cryptodash.domain.pricing import round_usd
from cryptodash.exceptions import ExternalServiceError, InvalidQuoteError, UnsupportedCoinError
from cryptodash.infra.http.rate_limited_client import RateLimitedClient

DEFAULT_TIMEOUT = 5.0

# CoinGecko-style coin id → ticker symbol used by the exchanges
COIN_SYMBOLS: dict[str, str] = {
    "bitcoin": "BTC",
    "ethereum": "ETH",
    "solana": "SOL",
    "ripple": "XRP",
    "dogecoin": "DOGE",
    "litecoin": "LTC",
    "cardano": "ADA",
    "chainlink": "LINK",
}


def coin_symbol(coin: str) -> str:
    symbol = COIN_SYMBOLS.get(coin.lower())
    if symbol is None:
        raise UnsupportedCoinError(f"No ticker symbol known for coin '{coin}'")
    return symbol


class CurrentPriceProvider(ABC):
    """One upstream source of the current spot price."""

    source: PriceSource

    def __init__(
        self,
        http_client: RateLimitedClient | None,
        coin: str = "bitcoin",
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._http = http_client
        self._coin = coin
        self._timeout = timeout

    @property
    def name(self) -> str:
        return self.source.value

    async def fetch_current(self) -> CurrentPrice:
        payload = await self._fetch_payload()
        try:
            return self._parse(payload)
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as exc:
            raise InvalidQuoteError(f"{self.name}: unexpected payload ({type(exc).__name__}: {exc})") from exc

    @abstractmethod
    async def _fetch_payload(self) -> Any:
        """Issue the request(s) and return the decoded JSON body."""

    @abstractmethod
    def _parse(self, payload: Any) -> CurrentPrice:
        """Extract price and 24h change from the provider's JSON layout."""

    def _quote(self, price: Any, change24h: Any = None) -> CurrentPrice:
        if price is None:
            raise InvalidQuoteError(f"{self.name}: no price in response")
        return CurrentPrice(
            price=round_usd(price),
            change24h=float(change24h) if change24h is not None else None,
            source=self.source,
        )

    async def _get_json(self, url: str, params: dict | None = None) -> Any:
        try:
            response = await self._http.get(url, params=params, timeout=self._timeout)
        except httpx.HTTPError as exc:
            raise ExternalServiceError(f"{self.name}: {type(exc).__name__}: {exc}") from exc
        if response.status_code != 200:
            raise ExternalServiceError(f"{self.name} API error: {response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            raise ExternalServiceError(f"{self.name}: response is not JSON") from exc
