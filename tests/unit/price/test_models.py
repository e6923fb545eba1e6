from cryptodash.domain.enums import PriceSource
from cryptodash.domain.models import CacheEntry, CurrentPrice, PricePoint


class TestWireKeys:
    def test_current_price_keeps_change24h_key(self):
        quote = CurrentPrice(price=67890, change24h=-2.5, source=PriceSource.KRAKEN)

        assert quote.model_dump(by_alias=True, mode="json") == {
            "price": 67890, "change24h": -2.5, "source": "kraken",
        }

    def test_current_price_parses_change24h_key(self):
        quote = CurrentPrice.model_validate({"price": 1, "change24h": 0.5, "source": "binance"})
        assert quote.change24h == 0.5

    def test_cache_entry_camel_case(self):
        entry = CacheEntry(
            price_data=[PricePoint(month="2024-01", price=43200)],
            current_price=CurrentPrice(price=43300, change24h=None, source=PriceSource.COINCAP),
            timestamp=1,
        )

        data = entry.model_dump(by_alias=True, mode="json")

        assert set(data) == {"priceData", "currentPrice", "timestamp"}
        assert "change24h" in data["currentPrice"]
