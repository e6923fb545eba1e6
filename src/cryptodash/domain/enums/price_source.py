from enum import Enum


class PriceSource(str, Enum):
    COINCAP = "coincap"
    BINANCE = "binance"
    KRAKEN = "kraken"
    CRYPTOCOMPARE = "cryptocompare"
    COINGECKO = "coingecko"
    FALLBACK = "fallback"
    CACHE = "cache"
