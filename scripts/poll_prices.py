"""Run one price aggregation cycle against the live APIs and print the result.

Usage:
    PYTHONPATH=src python scripts/poll_prices.py [coin] [days]

Wires the same components as the API (provider chain, relay race, cache)
and prints the dashboard state plus per-provider health as JSON.
"""

import asyncio
import json
import logging
import sys

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)-5s %(name)s - %(message)s")
logger = logging.getLogger("poll_prices")

# Suppress noisy loggers
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


async def main(coin: str, days: int) -> int:
    from cryptodash.config import Settings
    from cryptodash.container import Container

    container = Container()
    container.settings.override(Settings(coin=coin, history_days=days))

    aggregator = container.price_aggregator()
    try:
        if aggregator.hydrate_from_cache():
            logger.info("Cache hit; refreshing anyway")
        await aggregator.refresh()
        state = aggregator.snapshot()
        print(json.dumps(state.model_dump(mode="json", by_alias=True), indent=2))
        print(json.dumps([h.model_dump(mode="json", by_alias=True) for h in aggregator.provider_health()], indent=2))
        logger.info("Outcome: %s (source=%s)", state.outcome.value if state.outcome else None, state.data_source)
    finally:
        await container.http_client().close()
    return 0


if __name__ == "__main__":
    coin_arg = sys.argv[1] if len(sys.argv) > 1 else "bitcoin"
    days_arg = int(sys.argv[2]) if len(sys.argv) > 2 else 2555
    sys.exit(asyncio.run(main(coin_arg, days_arg)))
