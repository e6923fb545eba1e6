"""PriceAggregator: keeps the dashboard's price view populated.

One aggregation cycle fetches the current price (provider chain) and the
historical series (CoinGecko via relays) concurrently, buckets the history
into monthly averages, fills gaps from the static fallback table and
persists successful results to the snapshot cache. The cycle never leaves
the view empty: whatever fails, a price and a series are shown.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Protocol

from cryptodash.domain.enums import ControllerPhase, CycleOutcome, PriceSource
from cryptodash.domain.fallback import fallback_current_price, fallback_series
from cryptodash.domain.models import CurrentPrice, DashboardState, ProviderHealth
from cryptodash.domain.pricing import monthly_averages
from cryptodash.infra.cache.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


class CurrentPriceResolver(Protocol):
    async def resolve(self) -> CurrentPrice | None: ...


class HistorySource(Protocol):
    async def fetch_history(self, days: int) -> list[list[float]]: ...


def _utc_now() -> datetime:
    return datetime.now(UTC)


class PriceAggregator:
    """Controller behind ``GET /api/prices``.

    All mutable state lives on the instance, so independent aggregators
    (one per coin, or one per test) never share a guard or a timer.
    """

    def __init__(
        self,
        resolver: CurrentPriceResolver,
        history_source: HistorySource,
        store: SnapshotStore,
        coin: str = "bitcoin",
        days: int = 2555,
        refresh_interval_s: float = 60.0,
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._resolver = resolver
        self._history = history_source
        self._store = store
        self.coin = coin
        self.days = days
        self.refresh_interval_s = refresh_interval_s
        self._now = now

        self._state = DashboardState()
        self._fetching = False
        self._timer_task: asyncio.Task | None = None
        self._cycle_tasks: set[asyncio.Task] = set()

    # -- lifecycle -----------------------------------------------------------

    async def start(self) -> None:
        """Hydrate from cache, kick off the first cycle and arm the refresh timer."""
        if self._timer_task is not None:
            return
        self.hydrate_from_cache()
        self._spawn_refresh()
        self._timer_task = asyncio.create_task(self._timer_loop(), name=f"price-timer:{self.coin}")
        logger.info("Refresh interval set to %.0f seconds for %s", self.refresh_interval_s, self.coin)

    async def stop(self) -> None:
        tasks = list(self._cycle_tasks)
        if self._timer_task is not None:
            tasks.append(self._timer_task)
            self._timer_task = None
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("PriceAggregator stopped for %s", self.coin)

    async def _timer_loop(self) -> None:
        while True:
            await asyncio.sleep(self.refresh_interval_s)
            self._spawn_refresh()

    def _spawn_refresh(self) -> None:
        task = asyncio.create_task(self.refresh(), name=f"price-cycle:{self.coin}")
        self._cycle_tasks.add(task)
        task.add_done_callback(self._cycle_tasks.discard)

    # -- public interface ----------------------------------------------------

    @property
    def is_fetching(self) -> bool:
        return self._fetching

    def snapshot(self) -> DashboardState:
        return self._state.model_copy(deep=True)

    def provider_health(self) -> list[ProviderHealth]:
        get_health = getattr(self._resolver, "get_health", None)
        return get_health() if get_health is not None else []

    def hydrate_from_cache(self) -> bool:
        """Show the cached snapshot immediately, without touching the network."""
        cached = self._store.load()
        if cached is None:
            return False
        self._state = self._state.model_copy(update={
            "price_data": cached.price_data,
            "current_price": cached.current_price,
            "loading": False,
            "is_live": True,
            "data_source": PriceSource.CACHE.value,
            "phase": ControllerPhase.CACHE_HYDRATED,
        })
        return True

    async def refetch(self) -> bool:
        """Manual refresh from the UI; subject to the same one-cycle-at-a-time guard."""
        return await self.refresh()

    async def refresh(self) -> bool:
        """Run one aggregation cycle. Returns False if a cycle was already running."""
        if self._fetching:
            logger.info("Fetch already in progress, skipping...")
            return False
        self._fetching = True
        self._state = self._state.model_copy(update={"phase": ControllerPhase.FETCHING})
        logger.info("Starting price fetch for %s", self.coin)

        try:
            self._state = await self._run_cycle()
        except Exception as exc:
            logger.exception("Complete failure, showing fallback data")
            self._state = self._total_fallback(exc)
        finally:
            self._fetching = False
        return True

    # -- cycle ---------------------------------------------------------------

    async def _run_cycle(self) -> DashboardState:
        price_result, history_result = await asyncio.gather(
            self._resolver.resolve(),
            self._history.fetch_history(self.days),
            return_exceptions=True,
        )
        failures: list[str] = []

        current = price_result if isinstance(price_result, CurrentPrice) else None
        if isinstance(price_result, BaseException):
            failures.append(f"current price: {type(price_result).__name__}: {price_result}")
        elif current is None:
            failures.append("current price: all providers failed")
        got_live_price = current is not None
        if got_live_price:
            logger.info("Live price updated: %d from %s", current.price, current.source.value)

        series = None
        if isinstance(history_result, BaseException):
            logger.warning("Historical data fetch failed: %s", history_result)
            failures.append(f"history: {type(history_result).__name__}: {history_result}")
        else:
            try:
                series = monthly_averages(history_result) or None
            except Exception as exc:
                logger.warning("Historical data could not be bucketed: %s", exc)
                failures.append(f"history: {type(exc).__name__}: {exc}")
            else:
                if series is None:
                    failures.append("history: no usable samples")
        got_history = series is not None

        if got_history:
            if current is None:
                current = CurrentPrice(price=series[-1].price, change24h=None, source=PriceSource.COINGECKO)
                logger.info("Using latest monthly average as current price: %d", current.price)
            self._store.save(series, current)
        else:
            logger.warning("Using fallback historical data")
            series = fallback_series()
            if current is None:
                current = fallback_current_price()
                logger.warning("Using fallback price: %d", current.price)

        if got_live_price and got_history:
            outcome = CycleOutcome.LIVE
        elif got_live_price or got_history:
            outcome = CycleOutcome.PARTIAL
        else:
            outcome = CycleOutcome.FALLBACK

        return DashboardState(
            price_data=series,
            current_price=current,
            loading=False,
            error=None,
            last_updated=self._now(),
            is_live=got_live_price or got_history,
            data_source=current.source.value,
            phase=ControllerPhase.SETTLED,
            outcome=outcome,
            last_cycle_error="; ".join(failures) or None,
        )

    def _total_fallback(self, exc: Exception) -> DashboardState:
        # error stays None so the UI keeps rendering; the cause is kept in last_cycle_error
        return DashboardState(
            price_data=fallback_series(),
            current_price=fallback_current_price(),
            loading=False,
            error=None,
            last_updated=self._now(),
            is_live=False,
            data_source=PriceSource.FALLBACK.value,
            phase=ControllerPhase.SETTLED,
            outcome=CycleOutcome.FALLBACK,
            last_cycle_error=f"{type(exc).__name__}: {exc}",
        )
