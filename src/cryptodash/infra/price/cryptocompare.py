"""CryptoCompare single-symbol price endpoint."""

from typing import Any

from cryptodash.domain.enums import PriceSource
from cryptodash.domain.models import CurrentPrice
from cryptodash.exceptions import InvalidQuoteError
from cryptodash.infra.price.base import CurrentPriceProvider, coin_symbol

BASE_URL = "https://min-api.cryptocompare.com"


class CryptoCompareProvider(CurrentPriceProvider):
    source = PriceSource.CRYPTOCOMPARE

    async def _fetch_payload(self) -> Any:
        params = {"fsym": coin_symbol(self._coin), "tsyms": "USD"}
        return await self._get_json(f"{BASE_URL}/data/price", params=params)

    def _parse(self, payload: Any) -> CurrentPrice:
        usd = payload.get("USD")
        if not usd:
            raise InvalidQuoteError("CryptoCompare: No USD price found")
        return self._quote(usd)
