from dependency_injector import containers, providers

from cryptodash.config import Settings
from cryptodash.infra.cache.snapshot_store import SnapshotStore
from cryptodash.infra.cache.storage import JsonFileStorage
from cryptodash.infra.http.proxy_race import ProxyRaceFetcher
from cryptodash.infra.http.rate_limited_client import RateLimitedClient
from cryptodash.infra.news.rss2json import Rss2JsonClient
from cryptodash.infra.price import (
    BinanceProvider,
    CoinCapProvider,
    CoinGeckoProvider,
    CryptoCompareProvider,
    KrakenProvider,
)
from cryptodash.infra.price.chain import RetryPolicy, SourceChainResolver
from cryptodash.services.news_service import NewsService
from cryptodash.services.price_aggregator import PriceAggregator


class Container(containers.DeclarativeContainer):
    wiring_config = containers.WiringConfiguration(modules=["cryptodash.api.deps"])

    settings = providers.Singleton(Settings)

    http_client = providers.Singleton(
        RateLimitedClient,
        rate_per_second=settings.provided.http_rate_per_second,
        timeout=30.0,
    )

    relay_race = providers.Singleton(
        ProxyRaceFetcher,
        http_client=http_client,
        relays=settings.provided.cors_proxies,
    )

    # Current-price chain, in priority order
    coincap = providers.Singleton(
        CoinCapProvider, http_client=http_client, coin=settings.provided.coin, timeout=settings.provided.price_timeout_s,
    )
    binance = providers.Singleton(
        BinanceProvider, http_client=http_client, coin=settings.provided.coin, timeout=settings.provided.price_timeout_s,
    )
    kraken = providers.Singleton(
        KrakenProvider, http_client=http_client, coin=settings.provided.coin, timeout=settings.provided.price_timeout_s,
    )
    cryptocompare = providers.Singleton(
        CryptoCompareProvider,
        http_client=http_client,
        coin=settings.provided.coin,
        timeout=settings.provided.price_timeout_s,
    )
    coingecko = providers.Singleton(
        CoinGeckoProvider,
        race=relay_race,
        coin=settings.provided.coin,
        timeout=settings.provided.price_timeout_s,
        history_timeout=settings.provided.history_timeout_s,
        base_url=settings.provided.coingecko_api_url,
    )

    retry_policy = providers.Singleton(
        RetryPolicy,
        max_retries=settings.provided.max_retries,
        base_delay_s=settings.provided.retry_base_delay_s,
    )

    resolver = providers.Singleton(
        SourceChainResolver,
        providers=providers.List(coincap, binance, kraken, cryptocompare, coingecko),
        retry_policy=retry_policy,
    )

    snapshot_store = providers.Singleton(
        SnapshotStore,
        storage=providers.Singleton(JsonFileStorage, directory=settings.provided.cache_dir),
        ttl_s=settings.provided.cache_ttl_s,
    )

    price_aggregator = providers.Singleton(
        PriceAggregator,
        resolver=resolver,
        history_source=coingecko,
        store=snapshot_store,
        coin=settings.provided.coin,
        days=settings.provided.history_days,
        refresh_interval_s=settings.provided.refresh_interval_s,
    )

    news_service = providers.Singleton(
        NewsService,
        client=providers.Singleton(Rss2JsonClient, http_client=http_client),
        refresh_interval_s=settings.provided.news_refresh_interval_s,
    )
