from cryptodash.domain.models.health import ProviderHealth
from cryptodash.domain.models.news import NewsFeed, NewsItem
from cryptodash.domain.models.price import CacheEntry, CurrentPrice, DashboardState, PricePoint

__all__ = [
    "CacheEntry",
    "CurrentPrice",
    "DashboardState",
    "NewsFeed",
    "NewsItem",
    "PricePoint",
    "ProviderHealth",
]
