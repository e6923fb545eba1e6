import asyncio
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from cryptodash.api.deps import get_price_aggregator
from cryptodash.api.main import app
from cryptodash.domain.models import ProviderHealth
from cryptodash.infra.cache import MemoryStorage, SnapshotStore
from cryptodash.services.price_aggregator import PriceAggregator

HISTORY = [
    [1704412800000, 43000.0],
    [1705708800000, 43400.0],
    [1707523200000, 52000.0],
]


@pytest.fixture()
def resolver(live_quote):
    resolver = MagicMock()
    resolver.resolve = AsyncMock(return_value=live_quote)
    resolver.get_health = MagicMock(return_value=[
        ProviderHealth(provider_name="coincap", successes=3),
        ProviderHealth(provider_name="binance", failures=1, consecutive_failures=1, last_error="HTTP 451"),
    ])
    return resolver


@pytest.fixture()
def history():
    history = MagicMock()
    history.fetch_history = AsyncMock(return_value=HISTORY)
    return history


@pytest.fixture()
def aggregator(resolver, history):
    store = SnapshotStore(MemoryStorage())
    return PriceAggregator(resolver, history, store, now=lambda: datetime(2024, 2, 15, tzinfo=UTC))


@pytest.fixture()
async def client(aggregator):
    app.dependency_overrides[get_price_aggregator] = lambda: aggregator
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


class TestHealthAPI:
    async def test_health(self, client):
        res = await client.get("/api/health")
        assert res.status_code == 200
        assert res.json() == {"status": "ok", "version": "0.1.0"}


class TestPricesAPI:
    async def test_initial_state(self, client):
        res = await client.get("/api/prices")
        assert res.status_code == 200
        data = res.json()
        assert data["loading"] is True
        assert data["priceData"] == []
        assert data["currentPrice"] is None
        assert data["phase"] == "UNINITIALIZED"

    async def test_refetch_runs_cycle(self, client):
        res = await client.post("/api/prices/refetch")
        assert res.status_code == 200
        data = res.json()
        assert data["started"] is True

        state = data["state"]
        assert state["priceData"] == [{"month": "2024-01", "price": 43200}, {"month": "2024-02", "price": 52000}]
        assert state["currentPrice"] == {"price": 67890, "change24h": 1.5, "source": "coincap"}
        assert state["isLive"] is True
        assert state["dataSource"] == "coincap"
        assert state["error"] is None
        assert state["lastCycleError"] is None
        assert state["outcome"] == "live"
        assert state["phase"] == "SETTLED"
        assert state["lastUpdated"].startswith("2024-02-15")

        res = await client.get("/api/prices")
        assert res.json() == state

    async def test_refetch_while_busy(self, client, aggregator, history):
        gate = asyncio.Event()

        async def slow_history(days):
            await gate.wait()
            return HISTORY

        history.fetch_history.side_effect = slow_history
        running = asyncio.create_task(aggregator.refresh())
        await asyncio.sleep(0)

        res = await client.post("/api/prices/refetch")

        assert res.status_code == 200
        assert res.json()["started"] is False
        assert res.json()["state"]["phase"] == "FETCHING"

        gate.set()
        await running
        assert history.fetch_history.await_count == 1

    async def test_total_failure_still_renders(self, client, resolver, history):
        resolver.resolve.return_value = None
        history.fetch_history.side_effect = RuntimeError("relays down")

        state = (await client.post("/api/prices/refetch")).json()["state"]

        assert state["error"] is None
        assert state["isLive"] is False
        assert state["dataSource"] == "fallback"
        assert state["currentPrice"]["price"] == 71000
        assert "relays down" in state["lastCycleError"]

    async def test_provider_health(self, client):
        res = await client.get("/api/prices/providers")
        assert res.status_code == 200
        providers = res.json()["providers"]
        assert [p["providerName"] for p in providers] == ["coincap", "binance"]
        assert providers[1]["consecutiveFailures"] == 1
        assert providers[1]["lastError"] == "HTTP 451"
        assert providers[0]["lastOkAt"] is None
