"""
Price structure indicators used by the smart money analyzer
Swing points, break of structure, order blocks and fair value gaps
"""

from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd


def calculate_ema(prices: pd.Series, window: int = 20) -> pd.Series:
    """
    Calculate Exponential Moving Average

    Args:
        prices: Series of closing prices
        window: Period for EMA

    Returns:
        Series of EMA values
    """
    return prices.ewm(span=window, adjust=False).mean()


def calculate_atr(data: pd.DataFrame, window: int = 14) -> pd.Series:
    """
    Calculate Average True Range

    Args:
        data: OHLC frame
        window: Smoothing period

    Returns:
        Series of ATR values
    """
    prev_close = data['close'].shift(1)
    true_range = pd.concat([
        data['high'] - data['low'],
        (data['high'] - prev_close).abs(),
        (data['low'] - prev_close).abs(),
    ], axis=1).max(axis=1)
    return true_range.rolling(window=window, min_periods=1).mean()


def find_swing_points(data: pd.DataFrame, lookback: int = 2) -> Tuple[List[Tuple[int, float]], List[Tuple[int, float]]]:
    """
    Locate confirmed swing highs and lows

    A bar is a swing high when its high is the maximum of the `lookback`
    bars on either side (lows likewise). The last `lookback` bars can never
    be confirmed.

    Returns:
        (swing_highs, swing_lows) as lists of (position, price)
    """
    highs = data['high'].to_numpy()
    lows = data['low'].to_numpy()
    swing_highs = []
    swing_lows = []

    for i in range(lookback, len(data) - lookback):
        window_high = highs[i - lookback:i + lookback + 1]
        window_low = lows[i - lookback:i + lookback + 1]
        if highs[i] == window_high.max() and np.argmax(window_high) == lookback:
            swing_highs.append((i, float(highs[i])))
        if lows[i] == window_low.min() and np.argmin(window_low) == lookback:
            swing_lows.append((i, float(lows[i])))

    return swing_highs, swing_lows


def detect_market_structure(data: pd.DataFrame, lookback: int = 2) -> Dict[str, Any]:
    """
    Classify market structure from the last two swing highs and lows

    A close beyond the last swing high/low is reported as a break of
    structure in that direction.
    """
    swing_highs, swing_lows = find_swing_points(data, lookback)
    last_close = float(data['close'].iloc[-1])

    structure = {
        'trend': 'ranging',
        'breakOfStructure': None,
        'lastSwingHigh': swing_highs[-1][1] if swing_highs else None,
        'lastSwingLow': swing_lows[-1][1] if swing_lows else None,
    }

    if len(swing_highs) >= 2 and len(swing_lows) >= 2:
        higher_high = swing_highs[-1][1] > swing_highs[-2][1]
        higher_low = swing_lows[-1][1] > swing_lows[-2][1]
        if higher_high and higher_low:
            structure['trend'] = 'bullish'
        elif not higher_high and not higher_low:
            structure['trend'] = 'bearish'

    if structure['lastSwingHigh'] is not None and last_close > structure['lastSwingHigh']:
        structure['breakOfStructure'] = 'bullish'
    elif structure['lastSwingLow'] is not None and last_close < structure['lastSwingLow']:
        structure['breakOfStructure'] = 'bearish'

    return structure


def find_order_block(data: pd.DataFrame, direction: str, window: int = 30) -> Optional[Dict[str, Any]]:
    """
    Most recent order block within `window` bars

    Bullish: last down candle whose high is closed above by the next candle.
    Bearish: last up candle whose low is closed below by the next candle.
    """
    recent = data.iloc[-window:]
    opens = recent['open'].to_numpy()
    closes = recent['close'].to_numpy()
    highs = recent['high'].to_numpy()
    lows = recent['low'].to_numpy()

    for i in range(len(recent) - 2, -1, -1):
        if direction == 'bullish' and closes[i] < opens[i] and closes[i + 1] > highs[i]:
            return {'type': 'bullish', 'high': float(highs[i]), 'low': float(lows[i]),
                    'time': recent.index[i].isoformat()}
        if direction == 'bearish' and closes[i] > opens[i] and closes[i + 1] < lows[i]:
            return {'type': 'bearish', 'high': float(highs[i]), 'low': float(lows[i]),
                    'time': recent.index[i].isoformat()}

    return None


def find_fair_value_gap(data: pd.DataFrame, window: int = 30) -> Optional[Dict[str, Any]]:
    """
    Most recent three-candle imbalance within `window` bars

    Bullish gap: low of candle i above high of candle i-2.
    Bearish gap: high of candle i below low of candle i-2.
    """
    recent = data.iloc[-window:]
    highs = recent['high'].to_numpy()
    lows = recent['low'].to_numpy()

    for i in range(len(recent) - 1, 1, -1):
        if lows[i] > highs[i - 2]:
            return {'type': 'bullish', 'top': float(lows[i]), 'bottom': float(highs[i - 2]),
                    'time': recent.index[i].isoformat()}
        if highs[i] < lows[i - 2]:
            return {'type': 'bearish', 'top': float(lows[i - 2]), 'bottom': float(highs[i]),
                    'time': recent.index[i].isoformat()}

    return None
