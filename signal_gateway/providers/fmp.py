"""
Financial Modeling Prep adapter
Intraday historical charts and daily history for forex and metals
"""

from typing import Any, Dict, Optional, Tuple

import pandas as pd

from signal_gateway.core.exceptions import ProviderError
from .base import MarketDataProvider

# Gateway timeframe -> FMP chart interval
INTRADAY_INTERVALS = {
    '1m': '1min',
    '5m': '5min',
    '15m': '15min',
    '30m': '30min',
    '1h': '1hour',
    '4h': '4hour',
}


class FinancialModelingPrepProvider(MarketDataProvider):
    """Financial Modeling Prep (v3 API)"""

    host = "financialmodelingprep.com"
    aliases = ("financialmodellingprep.com",)
    supported_timeframes = tuple(INTRADAY_INTERVALS) + ('1d',)
    base_url = "https://financialmodelingprep.com/api/v3"
    daily_points = 250

    def build_request(self, pair: str, timeframe: str, api_key: str) -> Tuple[str, Dict[str, Any]]:
        self.check_timeframe(timeframe)
        base, quote = self.split_pair(pair)
        ticker = f"{base}{quote}"

        if timeframe == '1d':
            return f"{self.base_url}/historical-price-full/{ticker}", {
                'apikey': api_key,
                'timeseries': self.daily_points,
            }

        return f"{self.base_url}/historical-chart/{INTRADAY_INTERVALS[timeframe]}/{ticker}", {
            'apikey': api_key,
        }

    def error_message(self, payload: Any) -> Optional[str]:
        if isinstance(payload, dict):
            message = payload.get('Error Message') or payload.get('error') or payload.get('message')
            if message:
                return str(message)
        return None

    def parse_candles(self, payload: Any) -> pd.DataFrame:
        if isinstance(payload, dict):
            rows = payload.get('historical')
            if rows is None:
                raise ProviderError("FMP daily response has no 'historical' field", host=self.host)
        elif isinstance(payload, list):
            rows = payload
        else:
            raise ProviderError("Unexpected FMP response", host=self.host)

        return self.frame_from_rows(rows, time_field='date')
