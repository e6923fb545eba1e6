"""SnapshotStore: time-boxed persistence of the last good aggregation."""

import logging
import time
from collections.abc import Callable

from cryptodash.domain.models import CacheEntry, CurrentPrice, PricePoint
from cryptodash.infra.cache.storage import KeyValueStorage

logger = logging.getLogger(__name__)

CACHE_KEY = "btc_price_cache_v2"
CACHE_TTL_S = 60.0


def _now_ms() -> int:
    return int(time.time() * 1000)


class SnapshotStore:
    """Best-effort cache: read and write failures are logged, never raised."""

    def __init__(
        self,
        storage: KeyValueStorage,
        ttl_s: float = CACHE_TTL_S,
        key: str = CACHE_KEY,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._storage = storage
        self._ttl_ms = ttl_s * 1000
        self._key = key
        self._clock = clock

    def load(self) -> CacheEntry | None:
        """Return the stored snapshot if younger than the TTL, else None."""
        try:
            raw = self._storage.get(self._key)
            if raw is None:
                return None
            entry = CacheEntry.model_validate_json(raw)
        except Exception as exc:
            logger.warning("Cache read error: %s", exc)
            return None

        age_ms = self._clock() - entry.timestamp
        if age_ms < self._ttl_ms:
            logger.info("Using cached data, age: %d seconds", round(age_ms / 1000))
            return entry
        logger.info("Cache expired, age: %d seconds", round(age_ms / 1000))
        return None

    def save(self, price_data: list[PricePoint], current_price: CurrentPrice) -> bool:
        """Overwrite the snapshot, stamped now. Returns False if it could not be written."""
        try:
            entry = CacheEntry(price_data=price_data, current_price=current_price, timestamp=self._clock())
            self._storage.set(self._key, entry.model_dump_json(by_alias=True))
        except Exception as exc:
            logger.warning("Cache write error: %s", exc)
            return False
        logger.info("Data cached successfully")
        return True
