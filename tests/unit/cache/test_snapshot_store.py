"""Tests for SnapshotStore TTL handling and best-effort error behaviour."""

import json
from unittest.mock import MagicMock

from cryptodash.domain.enums import PriceSource
from cryptodash.domain.models import CurrentPrice, PricePoint
from cryptodash.infra.cache import JsonFileStorage, KeyValueStorage, MemoryStorage, SnapshotStore
from cryptodash.infra.cache.snapshot_store import CACHE_KEY

T0 = 1_700_000_000_000

SERIES = [PricePoint(month="2024-01", price=43200), PricePoint(month="2024-02", price=52000)]
CURRENT = CurrentPrice(price=52100, change24h=0.8, source=PriceSource.COINCAP)


class FakeClock:
    def __init__(self, now_ms: int = T0) -> None:
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms


class TestSnapshotStore:
    def test_empty_storage(self):
        assert SnapshotStore(MemoryStorage()).load() is None

    def test_fresh_entry_roundtrip(self):
        clock = FakeClock()
        store = SnapshotStore(MemoryStorage(), ttl_s=60, clock=clock)

        assert store.save(SERIES, CURRENT) is True
        clock.now_ms += 59_999
        entry = store.load()

        assert entry is not None
        assert entry.price_data == SERIES
        assert entry.current_price == CURRENT
        assert entry.timestamp == T0

    def test_expired_entry_ignored_but_kept(self):
        clock = FakeClock()
        storage = MemoryStorage()
        store = SnapshotStore(storage, ttl_s=60, clock=clock)
        store.save(SERIES, CURRENT)

        clock.now_ms += 60_000

        assert store.load() is None
        assert storage.get(CACHE_KEY) is not None

    def test_corrupt_entry(self):
        storage = MemoryStorage()
        storage.set(CACHE_KEY, "{not json")

        assert SnapshotStore(storage).load() is None

    def test_wrong_shape_entry(self):
        storage = MemoryStorage()
        storage.set(CACHE_KEY, json.dumps({"priceData": "nope"}))

        assert SnapshotStore(storage).load() is None

    def test_read_error_swallowed(self):
        storage = MagicMock(spec=KeyValueStorage)
        storage.get.side_effect = OSError("permission denied")

        assert SnapshotStore(storage).load() is None

    def test_write_error_swallowed(self):
        storage = MagicMock(spec=KeyValueStorage)
        storage.set.side_effect = OSError("disk full")

        assert SnapshotStore(storage).save(SERIES, CURRENT) is False

    def test_save_overwrites(self):
        clock = FakeClock()
        store = SnapshotStore(MemoryStorage(), clock=clock)
        store.save(SERIES, CURRENT)

        clock.now_ms += 1_000
        newer = CurrentPrice(price=60000, change24h=None, source=PriceSource.BINANCE)
        store.save(SERIES[:1], newer)

        entry = store.load()
        assert entry.current_price == newer
        assert entry.price_data == SERIES[:1]
        assert entry.timestamp == T0 + 1_000


class TestJsonFileStorage:
    def test_missing_key(self, tmp_path):
        assert JsonFileStorage(tmp_path).get("absent") is None

    def test_persists_camel_case_snapshot(self, tmp_path):
        cache_dir = tmp_path / "nested" / "cache"
        store = SnapshotStore(JsonFileStorage(cache_dir), clock=FakeClock())

        store.save(SERIES, CURRENT)

        files = list(cache_dir.iterdir())
        assert [f.name for f in files] == [f"{CACHE_KEY}.json"]
        data = json.loads(files[0].read_text(encoding="utf-8"))
        assert data["timestamp"] == T0
        assert data["priceData"][0] == {"month": "2024-01", "price": 43200}
        assert data["currentPrice"] == {"price": 52100, "change24h": 0.8, "source": "coincap"}

    def test_survives_new_instance(self, tmp_path):
        clock = FakeClock()
        SnapshotStore(JsonFileStorage(tmp_path), clock=clock).save(SERIES, CURRENT)

        entry = SnapshotStore(JsonFileStorage(tmp_path), clock=clock).load()

        assert entry is not None
        assert entry.current_price.price == 52100
