"""CoinCap asset endpoint; the only direct provider that reports 24h change."""

from typing import Any

from cryptodash.domain.enums import PriceSource
from cryptodash.domain.models import CurrentPrice
from cryptodash.infra.price.base import CurrentPriceProvider

BASE_URL = "https://api.coincap.io"


class CoinCapProvider(CurrentPriceProvider):
    source = PriceSource.COINCAP

    async def _fetch_payload(self) -> Any:
        return await self._get_json(f"{BASE_URL}/v2/assets/{self._coin}")

    def _parse(self, payload: Any) -> CurrentPrice:
        asset = payload["data"]
        return self._quote(asset["priceUsd"], asset.get("changePercent24Hr"))
