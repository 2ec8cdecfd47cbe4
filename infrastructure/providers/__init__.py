from .base import ExchangeRateProvider
from .ecb import EcbProvider
from .http import HttpFetcher
from .openrates import OpenRatesProvider

__all__ = ['ExchangeRateProvider', 'EcbProvider', 'HttpFetcher', 'OpenRatesProvider']
