"""
Market data provider adapter tests
"""

import pytest

from signal_gateway.core.exceptions import ProviderError
from signal_gateway.providers import (
    CurrencyBeaconProvider,
    FinancialModelingPrepProvider,
    OHLC_COLUMNS,
    get_provider,
)


class TestProviderRegistry:
    """Test host lookup"""

    def test_registered_hosts(self):
        assert isinstance(get_provider("currencybeacon.com"), CurrencyBeaconProvider)
        assert isinstance(get_provider("financialmodelingprep.com"), FinancialModelingPrepProvider)

    def test_alias_host(self):
        """The double-l spelling maps to the same adapter"""
        assert get_provider("financialmodellingprep.com") is get_provider("financialmodelingprep.com")

    def test_unknown_host(self):
        assert get_provider("example.com") is None


class TestFinancialModelingPrep:
    """Test FMP request building and parsing"""

    def setup_method(self):
        self.provider = FinancialModelingPrepProvider()

    def test_intraday_request(self):
        url, params = self.provider.build_request("EUR/USD", "1h", "KEY")
        assert url == "https://financialmodelingprep.com/api/v3/historical-chart/1hour/EURUSD"
        assert params == {"apikey": "KEY"}

    def test_daily_request(self):
        url, params = self.provider.build_request("XAG/USD", "1d", "KEY")
        assert url.endswith("/historical-price-full/XAGUSD")
        assert params["apikey"] == "KEY"

    def test_unsupported_timeframe(self):
        with pytest.raises(ProviderError):
            self.provider.build_request("EUR/USD", "2h", "KEY")

    def test_pair_without_slash(self):
        with pytest.raises(ProviderError):
            self.provider.build_request("EURUSD", "1h", "KEY")

    def test_parse_intraday_sorted_ascending(self):
        """FMP returns newest first; frames are oldest first"""
        payload = [
            {"date": "2024-01-01 02:00:00", "open": 1.2, "high": 1.3, "low": 1.1, "close": 1.25, "volume": 0},
            {"date": "2024-01-01 01:00:00", "open": 1.1, "high": 1.2, "low": 1.0, "close": 1.2, "volume": 0},
        ]
        df = self.provider.parse_candles(payload)
        assert list(df.columns) == OHLC_COLUMNS
        assert df.index.is_monotonic_increasing
        assert df['close'].tolist() == [1.2, 1.25]

    def test_parse_daily(self):
        payload = {"symbol": "EURUSD", "historical": [
            {"date": "2024-01-02", "open": 1.1, "high": 1.2, "low": 1.0, "close": 1.15},
        ]}
        df = self.provider.parse_candles(payload)
        assert len(df) == 1

    def test_parse_missing_fields(self):
        with pytest.raises(ProviderError):
            self.provider.parse_candles([{"date": "2024-01-01", "close": 1.0}])

    def test_limit_from_message(self):
        payload = {"Error Message": "Limit Reach . Please upgrade your plan or visit our documentation"}
        assert "Limit Reach" in self.provider.limit_message(200, payload)

    def test_limit_from_status(self):
        assert self.provider.limit_message(429, None) == "HTTP 429 Too Many Requests"

    def test_other_errors_are_not_limits(self):
        payload = {"Error Message": "Invalid API KEY."}
        assert self.provider.limit_message(401, payload) is None
        assert self.provider.error_message(payload) == "Invalid API KEY."


class TestCurrencyBeacon:
    """Test CurrencyBeacon request building and parsing"""

    def setup_method(self):
        self.provider = CurrencyBeaconProvider()

    def test_daily_request(self):
        url, params = self.provider.build_request("EUR/USD", "1d", "KEY")
        assert url == "https://api.currencybeacon.com/v1/timeseries"
        assert params["api_key"] == "KEY"
        assert params["base"] == "EUR"
        assert params["symbols"] == "USD"
        assert params["start_date"] < params["end_date"]

    def test_intraday_not_supported(self):
        with pytest.raises(ProviderError):
            self.provider.build_request("EUR/USD", "5m", "KEY")

    def test_parse_builds_candles_from_closes(self):
        payload = {
            "meta": {"code": 200},
            "response": {
                "2024-01-03": {"USD": 1.12},
                "2024-01-01": {"USD": 1.10},
                "2024-01-02": {"USD": 1.08},
            },
        }
        df = self.provider.parse_candles(payload)
        assert df['close'].tolist() == [1.10, 1.08, 1.12]
        assert df['open'].tolist() == [1.10, 1.10, 1.08]
        assert (df['high'] >= df[['open', 'close']].max(axis=1)).all()
        assert (df['low'] <= df[['open', 'close']].min(axis=1)).all()

    def test_parse_empty_series(self):
        df = self.provider.parse_candles({"meta": {"code": 200}, "response": {}})
        assert df.empty

    def test_error_meta(self):
        payload = {"meta": {"code": 401, "error_type": "unauthorized", "error_detail": "Invalid API key"}}
        assert self.provider.error_message(payload) == "Invalid API key"
        assert self.provider.limit_message(401, payload) is None

    def test_quota_meta_is_limit(self):
        payload = {"meta": {"code": 429, "error_detail": "You have exceeded your monthly request limit"}}
        assert "limit" in self.provider.limit_message(429, payload)
