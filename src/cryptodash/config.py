from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CORS_PROXIES = [
    "https://corsproxy.io/?",
    "https://api.allorigins.win/raw?url=",
    "https://api.codetabs.com/v1/proxy?quest=",
]


class Settings(BaseSettings):
    coin: str = "bitcoin"
    history_days: int = 2555
    refresh_interval_s: float = 60.0
    news_refresh_interval_s: float = 60.0

    price_timeout_s: float = 5.0  # per current-price request
    history_timeout_s: float = 8.0  # per historical-chart relay request
    max_retries: int = 3
    retry_base_delay_s: float = 1.0  # 1s, 2s, 4s between attempts

    cache_dir: str = ".cache/cryptodash"
    cache_ttl_s: float = 60.0

    cors_proxies: list[str] = DEFAULT_CORS_PROXIES
    coingecko_api_url: str = "https://api.coingecko.com/api/v3"
    news_enabled: bool = True

    http_rate_per_second: float = 10.0
    debug: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_prefix="CRYPTODASH_", extra="ignore")
