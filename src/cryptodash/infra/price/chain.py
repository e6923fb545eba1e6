"""Ordered fallback over current-price providers.

Providers are tried one at a time, in priority order. Each gets
``max_retries + 1`` attempts with exponential backoff before the chain moves
on. The first valid quote wins; if every provider is exhausted the resolver
returns None and the caller decides what to show instead.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from tenacity import AsyncRetrying, RetryCallState, retry_if_not_exception_type, stop_after_attempt, wait_exponential

from cryptodash.domain.models import CurrentPrice, ProviderHealth
from cryptodash.exceptions import InvalidQuoteError, UnsupportedCoinError
from cryptodash.infra.price.base import CurrentPriceProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """``max_retries`` extra attempts per provider, waiting base, 2*base, 4*base, ..."""

    max_retries: int = 3
    base_delay_s: float = 1.0

    @property
    def attempts(self) -> int:
        return self.max_retries + 1


def _retry_logger(provider_name: str) -> Callable[[RetryCallState], None]:
    def _log(retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0
        logger.warning(
            "%s attempt %d failed: %s; retrying in %.1fs",
            provider_name, retry_state.attempt_number, exc, delay,
        )

    return _log


class SourceChainResolver:
    """Walk the provider list until one yields a usable ``CurrentPrice``."""

    def __init__(
        self,
        providers: Sequence[CurrentPriceProvider],
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._providers = list(providers)
        self._policy = retry_policy or RetryPolicy()
        self._sleep = sleep
        self._health: dict[str, ProviderHealth] = {
            p.name: ProviderHealth(provider_name=p.name) for p in self._providers
        }

    @property
    def providers(self) -> list[CurrentPriceProvider]:
        return list(self._providers)

    async def resolve(self) -> CurrentPrice | None:
        for provider in self._providers:
            health = self._health[provider.name]
            try:
                quote = await self._fetch_with_retry(provider)
            except Exception as exc:
                health.record_failure(f"{type(exc).__name__}: {exc}")
                logger.warning("%s abandoned: %s", provider.name, exc)
                continue

            health.record_success()
            logger.info("Got price from %s: %d", provider.name, quote.price)
            return quote

        logger.error("All current-price providers failed (%s)", ", ".join(p.name for p in self._providers))
        return None

    async def _fetch_with_retry(self, provider: CurrentPriceProvider) -> CurrentPrice:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._policy.attempts),
            wait=wait_exponential(multiplier=self._policy.base_delay_s),
            retry=retry_if_not_exception_type(UnsupportedCoinError),
            before_sleep=_retry_logger(provider.name),
            sleep=self._sleep,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                quote = await provider.fetch_current()
                if quote is None:
                    raise InvalidQuoteError(f"{provider.name}: no quote returned")
                if attempt.retry_state.attempt_number > 1:
                    logger.info("%s succeeded on attempt %d", provider.name, attempt.retry_state.attempt_number)
        return quote

    def get_health(self) -> list[ProviderHealth]:
        """Per-provider tallies, in chain order."""
        return [self._health[p.name].model_copy() for p in self._providers]
