"""
CurrencyBeacon adapter
Daily close rates from the timeseries endpoint
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

import pandas as pd

from signal_gateway.core.exceptions import ProviderError
from .base import MarketDataProvider, OHLC_COLUMNS


class CurrencyBeaconProvider(MarketDataProvider):
    """
    CurrencyBeacon only publishes one rate per day, so candles are built
    from consecutive closes: open is the previous close, high/low the
    larger/smaller of open and close.
    """

    host = "currencybeacon.com"
    supported_timeframes = ("1d",)
    base_url = "https://api.currencybeacon.com/v1"
    days_back = 120

    def build_request(self, pair: str, timeframe: str, api_key: str) -> Tuple[str, Dict[str, Any]]:
        self.check_timeframe(timeframe)
        base, quote = self.split_pair(pair)

        end = datetime.now(timezone.utc).date()
        start = end - timedelta(days=self.days_back)

        return f"{self.base_url}/timeseries", {
            'api_key': api_key,
            'base': base,
            'symbols': quote,
            'start_date': start.isoformat(),
            'end_date': end.isoformat(),
        }

    def error_message(self, payload: Any) -> Optional[str]:
        if not isinstance(payload, dict):
            return None

        meta = payload.get('meta') or {}
        code = meta.get('code')
        if code is not None and code != 200:
            detail = meta.get('error_detail') or meta.get('error_type') or f"code {code}"
            return str(detail)

        if payload.get('error'):
            error = payload['error']
            if isinstance(error, dict):
                return str(error.get('info') or error.get('message') or error)
            return str(error)

        return None

    def parse_candles(self, payload: Any) -> pd.DataFrame:
        if not isinstance(payload, dict):
            raise ProviderError("Unexpected CurrencyBeacon response", host=self.host)

        series = payload.get('response', payload)
        if not isinstance(series, dict):
            raise ProviderError("CurrencyBeacon response has no rate series", host=self.host)

        closes = {}
        for day, rates in series.items():
            if not isinstance(rates, dict) or not rates:
                continue
            try:
                closes[pd.Timestamp(day)] = float(next(iter(rates.values())))
            except (ValueError, TypeError):
                continue

        if not closes:
            return pd.DataFrame(columns=OHLC_COLUMNS)

        close = pd.Series(closes).sort_index()
        open_ = close.shift(1).fillna(close)

        df = pd.DataFrame({
            'open': open_,
            'high': pd.concat([open_, close], axis=1).max(axis=1),
            'low': pd.concat([open_, close], axis=1).min(axis=1),
            'close': close,
        })
        df.index.name = 'timestamp'
        return df
