"""
Smart money analyzer
Fetches candles for a pair from its provider with the selected API key and
derives a directional signal from market structure, order blocks and fair
value gaps
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

import aiohttp
import pandas as pd

from signal_gateway.core.exceptions import ProviderError
from signal_gateway.keys import mask_key
from signal_gateway.providers import get_provider
from .indicators import (
    calculate_atr,
    calculate_ema,
    detect_market_structure,
    find_fair_value_gap,
    find_order_block,
)

logger = logging.getLogger(__name__)

# Score weights per confluence factor
WEIGHTS = {
    'break_of_structure': 35,
    'trend': 20,
    'ema_bias': 15,
    'order_block': 15,
    'fair_value_gap': 15,
}

MIN_DIRECTIONAL_SCORE = 40
MIN_SCORE_EDGE = 15
REWARD_MULTIPLE = 2.0
MAX_CONFIDENCE = 95


def score_confluence(data: pd.DataFrame) -> Dict[str, Any]:
    """
    Score bullish and bearish confluence on an OHLC frame

    Returns:
        Dict with bullish/bearish scores and the structure components used
    """
    close = data['close']
    last_close = float(close.iloc[-1])
    ema = calculate_ema(close, min(50, len(close)))

    structure = detect_market_structure(data)
    bullish_ob = find_order_block(data, 'bullish')
    bearish_ob = find_order_block(data, 'bearish')
    fvg = find_fair_value_gap(data)

    bullish = 0
    bearish = 0

    if structure['breakOfStructure'] == 'bullish':
        bullish += WEIGHTS['break_of_structure']
    elif structure['breakOfStructure'] == 'bearish':
        bearish += WEIGHTS['break_of_structure']

    if structure['trend'] == 'bullish':
        bullish += WEIGHTS['trend']
    elif structure['trend'] == 'bearish':
        bearish += WEIGHTS['trend']

    if last_close > float(ema.iloc[-1]):
        bullish += WEIGHTS['ema_bias']
    elif last_close < float(ema.iloc[-1]):
        bearish += WEIGHTS['ema_bias']

    # Price trading at or above a bullish block still respects it
    if bullish_ob and last_close >= bullish_ob['low']:
        bullish += WEIGHTS['order_block']
    if bearish_ob and last_close <= bearish_ob['high']:
        bearish += WEIGHTS['order_block']

    if fvg and fvg['type'] == 'bullish':
        bullish += WEIGHTS['fair_value_gap']
    elif fvg and fvg['type'] == 'bearish':
        bearish += WEIGHTS['fair_value_gap']

    return {
        'bullish': bullish,
        'bearish': bearish,
        'structure': structure,
        'bullish_order_block': bullish_ob,
        'bearish_order_block': bearish_ob,
        'fair_value_gap': fvg,
    }


def build_signal(data: pd.DataFrame, price_decimals: int = 5) -> Dict[str, Any]:
    """
    Turn an OHLC frame into a trade signal

    Direction needs a minimum score and a minimum edge over the opposite
    side; otherwise the signal is NEUTRAL with no levels.
    """
    scores = score_confluence(data)
    bullish, bearish = scores['bullish'], scores['bearish']
    structure = scores['structure']

    entry = float(data['close'].iloc[-1])
    atr = float(calculate_atr(data).iloc[-1])

    if bullish >= MIN_DIRECTIONAL_SCORE and bullish - bearish >= MIN_SCORE_EDGE:
        direction = 'bullish'
    elif bearish >= MIN_DIRECTIONAL_SCORE and bearish - bullish >= MIN_SCORE_EDGE:
        direction = 'bearish'
    else:
        direction = 'neutral'

    stop_loss = None
    take_profit = None
    risk_reward = None
    order_block = None

    if direction == 'bullish':
        order_block = scores['bullish_order_block']
        swing_low = structure['lastSwingLow']
        stop_loss = swing_low if swing_low is not None and swing_low < entry else entry - 1.5 * atr
        take_profit = entry + REWARD_MULTIPLE * (entry - stop_loss)
    elif direction == 'bearish':
        order_block = scores['bearish_order_block']
        swing_high = structure['lastSwingHigh']
        stop_loss = swing_high if swing_high is not None and swing_high > entry else entry + 1.5 * atr
        take_profit = entry - REWARD_MULTIPLE * (stop_loss - entry)

    if stop_loss is not None and stop_loss != entry:
        risk_reward = REWARD_MULTIPLE
    else:
        stop_loss = take_profit = None

    if direction == 'neutral':
        confidence = int(max(bullish, bearish) / 2)
    else:
        confidence = int(min(MAX_CONFIDENCE, max(bullish, bearish)))

    def _round(value: Optional[float]) -> Optional[float]:
        return round(value, price_decimals) if value is not None else None

    return {
        'signalType': {'bullish': 'BUY', 'bearish': 'SELL'}.get(direction, 'NEUTRAL'),
        'direction': direction,
        'confidence': confidence,
        'entryPrice': _round(entry),
        'stopLoss': _round(stop_loss),
        'takeProfit': _round(take_profit),
        'riskReward': risk_reward,
        'marketStructure': structure,
        'orderBlock': order_block,
        'fairValueGap': scores['fair_value_gap'],
        'scores': {'bullish': bullish, 'bearish': bearish},
        'candlesAnalyzed': len(data),
    }


class SmartMoneyAnalyzer:
    """
    Analysis collaborator for the orchestrator

    Upstream quota exhaustion is reported in the result's "error" field
    rather than raised, so the caller can rotate the pair's key and still
    answer the client.
    """

    def __init__(self, timeout_seconds: float = 20.0, min_candles: int = 30):
        self.timeout_seconds = timeout_seconds
        self.min_candles = min_candles
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds)
            )
        return self._session

    async def close(self):
        """Close HTTP session"""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _fetch_json(self, url: str, params: Dict[str, Any]) -> Tuple[int, Any]:
        """GET a JSON document, returning (status, body)"""
        session = await self._get_session()
        try:
            async with session.get(url, params=params) as response:
                try:
                    payload = await response.json(content_type=None)
                except ValueError:
                    payload = None
                return response.status, payload
        except asyncio.TimeoutError as e:
            raise ProviderError(f"Request to {url} timed out after {self.timeout_seconds}s") from e
        except aiohttp.ClientError as e:
            raise ProviderError(f"Request to {url} failed: {e}") from e

    async def analyze_symbol(self, symbol: str, timeframe: str, api_key: str, host: str) -> Dict[str, Any]:
        """
        Analyze a pair on a timeframe using the given provider key

        Args:
            symbol: Normalized pair ("EUR/USD")
            timeframe: Gateway timeframe ("5m", "1h", "1d", ...)
            api_key: Provider key selected by the rotator
            host: Provider host the key belongs to

        Returns:
            Signal dict, or a dict with an "error" field on a usage limit
        """
        provider = get_provider(host)
        if provider is None:
            raise ProviderError(f"No market data adapter registered for {host}", host=host)

        url, params = provider.build_request(symbol, timeframe, api_key)
        logger.debug(f"Fetching {symbol} {timeframe} from {host} with key {mask_key(api_key)}")

        status, payload = await self._fetch_json(url, params)
        timestamp = datetime.now(timezone.utc).isoformat()

        limit = provider.limit_message(status, payload)
        if limit:
            logger.warning(f"{host} usage limit hit for {symbol} with key {mask_key(api_key)}: {limit}")
            return {
                'error': f"API key limit reached for {host}: {limit}",
                'symbol': symbol,
                'timeframe': timeframe,
                'provider': host,
                'timestamp': timestamp,
            }

        message = provider.error_message(payload)
        if status >= 400 or message:
            raise ProviderError(
                f"{host} returned HTTP {status}: {message or 'no details'}",
                host=host,
                status=status
            )

        candles = provider.parse_candles(payload)
        if len(candles) < self.min_candles:
            raise ProviderError(
                f"Not enough price data for {symbol} on {timeframe}: "
                f"{len(candles)} candles, need {self.min_candles}",
                host=host
            )

        decimals = 3 if symbol.endswith("/JPY") else 5
        signal = build_signal(candles, price_decimals=decimals)

        return {
            'symbol': symbol,
            'timeframe': timeframe,
            'provider': host,
            **signal,
            'timestamp': timestamp,
        }
