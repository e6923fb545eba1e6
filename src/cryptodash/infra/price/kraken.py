"""Kraken public ticker."""

from typing import Any

from cryptodash.domain.enums import PriceSource
from cryptodash.domain.models import CurrentPrice
from cryptodash.exceptions import ExternalServiceError, InvalidQuoteError
from cryptodash.infra.price.base import CurrentPriceProvider, coin_symbol

BASE_URL = "https://api.kraken.com"

# Kraken's legacy asset codes differ from the usual tickers
KRAKEN_ASSETS: dict[str, str] = {
    "BTC": "XBT",
    "DOGE": "XDG",
}


class KrakenProvider(CurrentPriceProvider):
    source = PriceSource.KRAKEN

    def _asset(self) -> str:
        symbol = coin_symbol(self._coin)
        return KRAKEN_ASSETS.get(symbol, symbol)

    async def _fetch_payload(self) -> Any:
        return await self._get_json(f"{BASE_URL}/0/public/Ticker", params={"pair": f"{self._asset()}USD"})

    def _parse(self, payload: Any) -> CurrentPrice:
        # Kraken answers 200 with a populated "error" list on bad requests
        errors = payload.get("error") or []
        if errors:
            raise ExternalServiceError(f"Kraken API error: {', '.join(map(str, errors))}")

        asset = self._asset()
        result = payload["result"]
        # Result key is the canonical pair name, e.g. XXBTZUSD for XBTUSD
        ticker = result.get(f"X{asset}ZUSD") or result.get(f"{asset}USD")
        if not ticker:
            raise InvalidQuoteError("Kraken: No ticker data found")
        return self._quote(ticker["c"][0])  # c = last trade closed [price, lot volume]
