from cryptodash.infra.price.binance import BinanceProvider
from cryptodash.infra.price.coincap import CoinCapProvider
from cryptodash.infra.price.coingecko import CoinGeckoProvider
from cryptodash.infra.price.cryptocompare import CryptoCompareProvider
from cryptodash.infra.price.kraken import KrakenProvider

__all__ = [
    "BinanceProvider",
    "CoinCapProvider",
    "CoinGeckoProvider",
    "CryptoCompareProvider",
    "KrakenProvider",
]
