from datetime import datetime

from cryptodash.domain.enums import NewsAgency
from cryptodash.domain.models.base import CamelModel


class NewsItem(CamelModel):
    title: str
    description: str
    date: datetime | None = None
    url: str | None = None
    agency: NewsAgency
    source: str


class NewsFeed(CamelModel):
    """Merged regulatory headlines as shown on the dashboard."""

    news: list[NewsItem] = []
    loading: bool = True
    error: str | None = None
    last_updated: datetime | None = None
