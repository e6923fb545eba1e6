"""CFPB Consumer Complaint Database client for crypto-company complaints."""

import asyncio
import logging
from typing import Any

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from cryptodash.exceptions import ExternalServiceError
from cryptodash.infra.http.rate_limited_client import RateLimitedClient

logger = logging.getLogger(__name__)

API_BASE = "https://www.consumerfinance.gov/data-research/consumer-complaints/search/api/v1/"
PAGE_SIZE = 100
REQUEST_DELAY_S = 0.5

CRYPTO_COMPANIES = [
    "Block, Inc.",
    "Coinbase, Inc.",
    "ROBINHOOD MARKETS INC.",
    "Foris DAX, Inc.",
    "Paypal Holdings, Inc",
    "Winklevoss Exchange LLC",
    "BAM Management US Holdings Inc.",
    "Payward Ventures Inc. dba Kraken",
    "Blockchain.com, Inc.",
    "Abra",
    "BlockFi Inc",
    "Paxos Trust Company, LLC",
    "Voyager Digital (Canada) Ltd.",
    "Celsius Network LLC",
    "FTX Trading Ltd.",
]


def extract_search_after(hits: list[dict[str, Any]]) -> str | None:
    """Cursor for the next page: ``<sort[0]>_<sort[1]>`` of the last hit."""
    if not hits:
        return None
    sort = hits[-1].get("sort")
    if not sort or len(sort) < 2:
        return None
    return f"{sort[0]}_{sort[1]}"


def _total_of(response: dict[str, Any]) -> int:
    total = (response.get("hits") or {}).get("total") or 0
    if isinstance(total, dict):
        return int(total.get("value") or 0)
    return int(total)


class CFPBComplaintsClient:
    def __init__(
        self,
        http_client: RateLimitedClient,
        page_size: int = PAGE_SIZE,
        request_delay_s: float = REQUEST_DELAY_S,
        companies: list[str] | None = None,
    ) -> None:
        self._http = http_client
        self._page_size = page_size
        self._request_delay_s = request_delay_s
        self._companies = companies if companies is not None else list(CRYPTO_COMPANIES)

    def build_params(self, frm: int = 0, search_after: str | None = None) -> list[tuple[str, str]]:
        params: list[tuple[str, str]] = [("company", company) for company in self._companies]
        params.append(("sub_product", "Virtual currency"))
        params += [("size", str(self._page_size)), ("sort", "created_date_desc"), ("format", "json")]
        if frm:
            params.append(("frm", str(frm)))
        if search_after:
            params.append(("search_after", search_after))
        return params

    @retry(
        retry=retry_if_exception_type(ExternalServiceError),
        stop=stop_after_attempt(3),
        wait=wait_fixed(2),
        reraise=True,
    )
    async def fetch_page(self, frm: int = 0, search_after: str | None = None) -> dict[str, Any]:
        logger.info("Fetching: frm=%d, search_after=%s", frm, search_after or "none")
        try:
            response = await self._http.get(
                API_BASE,
                params=self.build_params(frm, search_after),
                headers={"Accept": "application/json", "User-Agent": "CryptoComplaintsDashboard/1.0"},
            )
        except httpx.HTTPError as exc:
            raise ExternalServiceError(f"CFPB request failed: {exc}") from exc
        if response.status_code != 200:
            raise ExternalServiceError(f"CFPB API HTTP {response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            raise ExternalServiceError("CFPB response is not JSON") from exc

    async def fetch_all(self) -> list[dict[str, Any]]:
        """Walk every page until an empty page or the reported total is reached."""
        all_hits: list[dict[str, Any]] = []
        frm = 0
        search_after: str | None = None
        total_expected: int | None = None
        page = 0

        while True:
            page += 1
            response = await self.fetch_page(frm=frm, search_after=search_after)
            if total_expected is None:
                total_expected = _total_of(response)
                logger.info("Total complaints available: %d", total_expected)

            hits = (response.get("hits") or {}).get("hits") or []
            logger.info("Page %d: retrieved %d complaints", page, len(hits))
            if not hits:
                break

            all_hits.extend(hits)
            search_after = extract_search_after(hits)
            frm += len(hits)
            if len(all_hits) >= total_expected:
                break
            await asyncio.sleep(self._request_delay_s)

        return all_hits


def format_output(hits: list[dict[str, Any]]) -> dict[str, Any]:
    """Elasticsearch-shaped envelope the dashboard's static loader expects."""
    return {"hits": {"total": {"value": len(hits)}, "hits": hits}}
