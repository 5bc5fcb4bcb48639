from .base import RateSource
from .coingecko import CoinGeckoProvider
from .exchangerate_api import ExchangeRateAPIProvider

__all__ = ['RateSource', 'CoinGeckoProvider', 'ExchangeRateAPIProvider']
