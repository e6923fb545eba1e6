"""Binance public ticker price (no 24h change on this endpoint)."""

from typing import Any

from cryptodash.domain.enums import PriceSource
from cryptodash.domain.models import CurrentPrice
from cryptodash.infra.price.base import CurrentPriceProvider, coin_symbol

BASE_URL = "https://api.binance.com"


class BinanceProvider(CurrentPriceProvider):
    source = PriceSource.BINANCE

    async def _fetch_payload(self) -> Any:
        symbol = f"{coin_symbol(self._coin)}USDT"
        return await self._get_json(f"{BASE_URL}/api/v3/ticker/price", params={"symbol": symbol})

    def _parse(self, payload: Any) -> CurrentPrice:
        return self._quote(payload["price"])
