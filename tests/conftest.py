"""
Pytest Configuration and Shared Fixtures
Key tables, a controllable clock and a scripted analyzer for gateway tests
"""

import os
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
import pytest

# Set test environment
os.environ['ENVIRONMENT'] = 'testing'

from signal_gateway.core.config import TestingSettings
from signal_gateway.keys import KeyRotator, KeyStore


KEY_TABLE = {
    "currencybeacon.com": {
        "EUR/USD": ["K1", "K2"],
        "GBP/USD": ["G1", "G2", "G3"],
    },
    "financialmodelingprep.com": {
        "XAG/USD": ["S1"],
        "USD/JPY": ["J1", "J2"],
    },
}


# Configure pytest markers
def pytest_configure(config):
    """Configure custom pytest markers"""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


class FakeClock:
    """Millisecond clock advanced by hand"""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakeAnalyzer:
    """Analyzer returning a scripted result or raising a scripted error"""

    def __init__(self, result: Optional[Dict[str, Any]] = None, error: Optional[Exception] = None):
        self.result = result if result is not None else {
            "signalType": "BUY",
            "direction": "bullish",
            "confidence": 72,
            "entryPrice": 1.0854,
        }
        self.error = error
        self.calls: List[tuple] = []

    async def analyze_symbol(self, symbol: str, timeframe: str, api_key: str, host: str) -> Dict[str, Any]:
        self.calls.append((symbol, timeframe, api_key, host))
        if self.error is not None:
            raise self.error
        return self.result


def make_trend_frame(direction: str = "bullish", bars: int = 60) -> pd.DataFrame:
    """
    Zigzag trend (three bars with the move, two against) ending in a
    breakout bar beyond every previous extreme
    """
    wave = [0, 1, 2, 3, 2, 1]
    closes = [1.1000 + 0.0005 * i + 0.0010 * wave[i % 6] for i in range(bars)]
    closes.append(max(closes) + 0.0100)

    closes = np.array(closes)
    opens = np.concatenate([[closes[0]], closes[:-1]])
    highs = np.maximum(opens, closes) + 0.0002
    lows = np.minimum(opens, closes) - 0.0002

    if direction == "bearish":
        mirror = 2.2
        opens, closes, highs, lows = mirror - opens, mirror - closes, mirror - lows, mirror - highs

    index = pd.date_range("2024-01-01", periods=len(closes), freq="h")
    df = pd.DataFrame({"open": opens, "high": highs, "low": lows, "close": closes}, index=index)
    df.index.name = "timestamp"
    return df


@pytest.fixture
def key_table():
    return {host: {pair: list(keys) for pair, keys in pairs.items()} for host, pairs in KEY_TABLE.items()}


@pytest.fixture
def key_store(key_table):
    return KeyStore(key_table)


@pytest.fixture
def rotator(key_store):
    return KeyRotator(key_store)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def fake_analyzer():
    return FakeAnalyzer()


@pytest.fixture
def test_settings():
    return TestingSettings()


@pytest.fixture
def bullish_frame():
    return make_trend_frame("bullish")


@pytest.fixture
def bearish_frame():
    return make_trend_frame("bearish")


@pytest.fixture
def flat_frame():
    index = pd.date_range("2024-01-01", periods=60, freq="h")
    return pd.DataFrame(
        {"open": 1.25, "high": 1.25, "low": 1.25, "close": 1.25},
        index=index
    )
