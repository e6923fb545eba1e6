"""Regulatory news: merge a handful of RSS feeds into one filtered headline list."""

import asyncio
import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import Any

from cryptodash.domain.enums import NewsAgency
from cryptodash.domain.models import NewsFeed, NewsItem
from cryptodash.infra.news.rss2json import Rss2JsonClient

logger = logging.getLogger(__name__)

MAX_ITEMS = 20
DESCRIPTION_LENGTH = 200

CRYPTO_KEYWORDS = (
    "crypto", "bitcoin", "digital asset", "virtual currency", "blockchain",
    "coinbase", "binance", "kraken", "gemini", "ftx", "celsius", "voyager",
    "defi", "nft", "token", "stablecoin", "exchange", "trading platform",
    "cryptocurrency", "ethereum", "ripple", "tether", "usdc",
)

REGULATION_KEYWORDS = (
    "sec", "cftc", "doj", "fbi", "treasury", "regulation", "regulatory",
    "lawsuit", "enforcement", "fine", "penalty", "charged", "indicted",
    "settlement", "court", "judge", "ruling", "ban", "crackdown",
    "investigation", "subpoena", "compliance", "license", "approved",
    "senator", "congress", "bill", "law", "legislation", "hearing",
)

_TAG_RE = re.compile(r"<[^>]*>")


@dataclass(frozen=True)
class NewsSource:
    name: str
    url: str
    agency: NewsAgency
    filter_crypto: bool = False
    filter_regulation: bool = False


NEWS_SOURCES: tuple[NewsSource, ...] = (
    # Official releases: keep only the crypto-related ones
    NewsSource("SEC Press Releases", "https://www.sec.gov/news/pressreleases.rss", NewsAgency.SEC, filter_crypto=True),
    # Crypto outlets: keep only the regulatory stories
    NewsSource(
        "Cointelegraph Regulation", "https://cointelegraph.com/rss/tag/regulation", NewsAgency.NEWS,
        filter_regulation=True,
    ),
    NewsSource("CoinDesk", "https://www.coindesk.com/arc/outboundfeeds/rss/", NewsAgency.NEWS, filter_regulation=True),
    NewsSource("Decrypt", "https://decrypt.co/feed", NewsAgency.NEWS, filter_regulation=True),
)


def _matches(keywords: Sequence[str], title: str, description: str) -> bool:
    text = f"{title} {description}".lower()
    return any(keyword in text for keyword in keywords)


def is_crypto_related(title: str, description: str) -> bool:
    return _matches(CRYPTO_KEYWORDS, title, description)


def is_regulation_related(title: str, description: str) -> bool:
    return _matches(REGULATION_KEYWORDS, title, description)


def _summarize(description: str) -> str:
    return _TAG_RE.sub("", description)[:DESCRIPTION_LENGTH] + "..."


def _parse_date(value: Any) -> datetime | None:
    """rss2json emits "YYYY-MM-DD HH:MM:SS"; raw feeds sometimes leak RFC 822 dates."""
    if not value:
        return None
    text = str(value).strip()
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        try:
            parsed = parsedate_to_datetime(text)
        except (TypeError, ValueError):
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def to_news_items(source: NewsSource, raw_items: Sequence[dict[str, Any]]) -> list[NewsItem]:
    items: list[NewsItem] = []
    for raw in raw_items:
        title = raw.get("title") or ""
        description = raw.get("description") or ""
        if source.filter_crypto and not is_crypto_related(title, description):
            continue
        if source.filter_regulation and not is_regulation_related(title, description):
            continue
        items.append(NewsItem(
            title=title,
            description=_summarize(description),
            date=_parse_date(raw.get("pubDate")),
            url=raw.get("link"),
            agency=source.agency,
            source=source.name,
        ))
    return items


def _sort_key(item: NewsItem) -> datetime:
    return item.date or datetime.min.replace(tzinfo=UTC)


class NewsService:
    """Polls every source concurrently; a failing source simply contributes nothing."""

    def __init__(
        self,
        client: Rss2JsonClient,
        sources: Sequence[NewsSource] = NEWS_SOURCES,
        refresh_interval_s: float = 60.0,
        now: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._client = client
        self._sources = list(sources)
        self.refresh_interval_s = refresh_interval_s
        self._now = now
        self._feed = NewsFeed()
        self._timer_task: asyncio.Task | None = None

    def snapshot(self) -> NewsFeed:
        return self._feed.model_copy(deep=True)

    async def start(self) -> None:
        if self._timer_task is not None:
            return
        self._timer_task = asyncio.create_task(self._timer_loop(), name="news-timer")

    async def stop(self) -> None:
        if self._timer_task is None:
            return
        task, self._timer_task = self._timer_task, None
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)

    async def _timer_loop(self) -> None:
        while True:
            await self.refresh()
            await asyncio.sleep(self.refresh_interval_s)

    async def refetch(self) -> NewsFeed:
        await self.refresh()
        return self.snapshot()

    async def refresh(self) -> None:
        try:
            results = await asyncio.gather(*(self._fetch_source(s) for s in self._sources))
            merged = [item for items in results for item in items]
            merged.sort(key=_sort_key, reverse=True)
            self._feed = NewsFeed(news=merged[:MAX_ITEMS], loading=False, error=None, last_updated=self._now())
        except Exception as exc:
            logger.exception("News refresh failed")
            self._feed = self._feed.model_copy(update={"loading": False, "error": str(exc)})

    async def _fetch_source(self, source: NewsSource) -> list[NewsItem]:
        try:
            raw_items = await self._client.get_items(source.url)
        except Exception as exc:
            logger.warning("News source %s failed: %s", source.name, exc)
            return []
        return to_news_items(source, raw_items)
