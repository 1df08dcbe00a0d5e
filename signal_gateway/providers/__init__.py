"""
Market data provider adapters, looked up by host name.
"""

from typing import Dict, Optional

from .base import MarketDataProvider, OHLC_COLUMNS
from .currencybeacon import CurrencyBeaconProvider
from .fmp import FinancialModelingPrepProvider

_PROVIDERS: Dict[str, MarketDataProvider] = {}


def register_provider(provider: MarketDataProvider):
    """Register an adapter under its host and aliases"""
    _PROVIDERS[provider.host] = provider
    for alias in provider.aliases:
        _PROVIDERS[alias] = provider


def get_provider(host: str) -> Optional[MarketDataProvider]:
    return _PROVIDERS.get(host)


register_provider(CurrencyBeaconProvider())
register_provider(FinancialModelingPrepProvider())

__all__ = [
    "MarketDataProvider",
    "OHLC_COLUMNS",
    "CurrencyBeaconProvider",
    "FinancialModelingPrepProvider",
    "register_provider",
    "get_provider",
]
