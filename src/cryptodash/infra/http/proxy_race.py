"""Fetch a URL through several CORS relays at once and keep the first good answer."""

import asyncio
import logging
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote

import httpx

from cryptodash.exceptions import AllRelaysFailedError, ConfigurationError, ExternalServiceError
from cryptodash.infra.http.rate_limited_client import RateLimitedClient

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


def build_relay_url(relay: str, target: str) -> str:
    """Relays taking the target as a query value get it percent-encoded; path-style relays get it raw."""
    if "?" in relay:
        return f"{relay}{quote(target, safe='')}"
    return f"{relay}{target}"


class ProxyRaceFetcher:
    """Race the same GET through every relay; first 2xx JSON body wins, the rest are cancelled."""

    def __init__(self, http_client: RateLimitedClient, relays: Sequence[str]) -> None:
        if not relays:
            raise ConfigurationError("ProxyRaceFetcher needs at least one relay")
        self._http = http_client
        self._relays = list(relays)

    @property
    def relays(self) -> list[str]:
        return list(self._relays)

    async def fetch_json(self, url: str, timeout: float = DEFAULT_TIMEOUT) -> Any:
        tasks = [
            asyncio.create_task(self._fetch_via(relay, url, timeout), name=f"relay:{relay}")
            for relay in self._relays
        ]
        pending = set(tasks)
        errors: list[str] = []
        try:
            while pending:
                done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
                winner = None
                for task in done:
                    exc = task.exception()
                    if exc is not None:
                        errors.append(str(exc))
                    elif winner is None:
                        winner = task
                if winner is not None:
                    logger.debug("Relay race for %s won by %s", url, winner.get_name())
                    return winner.result()
        finally:
            for task in pending:
                task.cancel()

        raise AllRelaysFailedError(url, errors)

    async def _fetch_via(self, relay: str, url: str, timeout: float) -> Any:
        relay_url = build_relay_url(relay, url)
        try:
            response = await asyncio.wait_for(
                self._http.get(relay_url, headers={"Accept": "application/json"}, timeout=timeout),
                timeout=timeout,
            )
        except TimeoutError as exc:
            raise ExternalServiceError(f"{relay}: timed out after {timeout}s") from exc
        except httpx.HTTPError as exc:
            raise ExternalServiceError(f"{relay}: {type(exc).__name__}: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise ExternalServiceError(f"{relay}: HTTP {response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            raise ExternalServiceError(f"{relay}: response is not JSON") from exc
