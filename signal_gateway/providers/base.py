"""
Market data provider adapters
Each adapter knows how to build a candle request for its host and how to turn
the JSON answer into an OHLC DataFrame
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from signal_gateway.core.exceptions import ProviderError

OHLC_COLUMNS = ['open', 'high', 'low', 'close']

LIMIT_MARKERS = ("limit", "quota", "too many requests")


class MarketDataProvider(ABC):
    """Base adapter for a market data host"""

    host: str = ""
    aliases: Tuple[str, ...] = ()
    supported_timeframes: Tuple[str, ...] = ()

    def supports(self, timeframe: str) -> bool:
        return timeframe in self.supported_timeframes

    def check_timeframe(self, timeframe: str):
        if not self.supports(timeframe):
            raise ProviderError(
                f"Timeframe '{timeframe}' is not supported by {self.host}. "
                f"Supported: {', '.join(self.supported_timeframes)}",
                host=self.host
            )

    @abstractmethod
    def build_request(self, pair: str, timeframe: str, api_key: str) -> Tuple[str, Dict[str, Any]]:
        """
        Build the candle request for a pair

        Returns:
            (url, query parameters) including the API key
        """

    @abstractmethod
    def parse_candles(self, payload: Any) -> pd.DataFrame:
        """Convert a successful response body into an OHLC frame sorted by time"""

    @abstractmethod
    def error_message(self, payload: Any) -> Optional[str]:
        """Provider error text carried in a response body, if any"""

    def limit_message(self, status: int, payload: Any) -> Optional[str]:
        """
        Detect quota / rate limit exhaustion

        Returns:
            Description of the limit condition, or None
        """
        if status == 429:
            return self.error_message(payload) or "HTTP 429 Too Many Requests"

        message = self.error_message(payload)
        if message and any(marker in message.lower() for marker in LIMIT_MARKERS):
            return message

        return None

    @staticmethod
    def split_pair(pair: str) -> Tuple[str, str]:
        """"EUR/USD" -> ("EUR", "USD")"""
        if "/" not in pair:
            raise ProviderError(f"Pair '{pair}' must look like BASE/QUOTE")
        base, quote = pair.split("/", 1)
        return base, quote

    @staticmethod
    def frame_from_rows(rows: List[Dict[str, Any]], time_field: str = 'date') -> pd.DataFrame:
        """Build an OHLC frame from a list of candle dicts"""
        if not rows:
            return pd.DataFrame(columns=OHLC_COLUMNS)

        df = pd.DataFrame(rows)
        missing = [c for c in OHLC_COLUMNS + [time_field] if c not in df.columns]
        if missing:
            raise ProviderError(f"Candle data missing fields: {', '.join(missing)}")

        df[time_field] = pd.to_datetime(df[time_field])
        df = df.set_index(time_field).sort_index()
        df = df[OHLC_COLUMNS].astype(float)
        df.index.name = 'timestamp'
        return df
