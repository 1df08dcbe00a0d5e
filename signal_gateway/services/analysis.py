"""
Symbol analysis orchestration
Resolves provider host and API key for a pair, delegates to the analyzer and
rotates the pair's key when the upstream reports a usage limit
"""

import logging
from typing import Any, Callable, Dict, Optional, Protocol

from signal_gateway.core.exceptions import (
    AnalysisFailedError,
    InvalidInputError,
    UnknownSymbolError,
)
from signal_gateway.keys import KeyRotator, KeyStore, normalize_pair

logger = logging.getLogger(__name__)

INVALID_SYMBOL_MESSAGE = 'Invalid symbol. Please provide a valid symbol (e.g., "EURUSD", "BTCUSD").'
INVALID_TIMEFRAME_MESSAGE = 'Invalid timeframe. Please provide a valid timeframe (e.g., "5m", "1h", "1d").'


class SymbolAnalyzer(Protocol):
    """Analysis capability consumed by the orchestrator"""

    async def analyze_symbol(self, symbol: str, timeframe: str, api_key: str, host: str) -> Dict[str, Any]:
        ...


LimitPredicate = Callable[[Any], bool]


def contains_limit_marker(result: Any) -> bool:
    """Default limit classifier: the result's error text mentions "limit" """
    if not isinstance(result, dict):
        return False
    error = result.get("error")
    return isinstance(error, str) and "limit" in error


class AnalysisOrchestrator:
    """
    Runs one symbol analysis against the pair's current provider key.

    A limit condition in the analyzer result rotates the pair's key for the
    next request; the current result is returned unchanged and the request is
    not retried.
    """

    def __init__(
        self,
        key_store: KeyStore,
        rotator: KeyRotator,
        analyzer: SymbolAnalyzer,
        is_limit_error: Optional[LimitPredicate] = None
    ):
        self.key_store = key_store
        self.rotator = rotator
        self.analyzer = analyzer
        self.is_limit_error = is_limit_error or contains_limit_marker

    @staticmethod
    def validate(symbol: Any, timeframe: Any):
        """Raise InvalidInputError unless both values are non-empty strings"""
        if not symbol or not isinstance(symbol, str):
            raise InvalidInputError(INVALID_SYMBOL_MESSAGE)
        if not timeframe or not isinstance(timeframe, str):
            raise InvalidInputError(INVALID_TIMEFRAME_MESSAGE)

    async def analyze(self, symbol: Any, timeframe: Any) -> Dict[str, Any]:
        """
        Analyze a symbol on a timeframe

        Args:
            symbol: Pair as sent by the client ("EUR/USD" or "EURUSD")
            timeframe: Candle timeframe ("5m", "1h", "1d", ...)

        Returns:
            The analyzer result, untouched

        Raises:
            InvalidInputError: symbol or timeframe missing or not a string
            UnknownSymbolError: no provider lists the pair
            AnalysisFailedError: the analyzer raised or returned a non-mapping
        """
        self.validate(symbol, timeframe)

        logger.info(f"Analyzing {symbol} on {timeframe} timeframe...")

        pair = normalize_pair(symbol)
        host = self.key_store.host_for(pair)
        if not host:
            raise UnknownSymbolError(symbol)

        api_key = self.rotator.current_key(pair)

        try:
            result = await self.analyzer.analyze_symbol(pair, timeframe, api_key, host)
        except Exception as e:
            logger.error(f"Analysis failed for {symbol}: {e}")
            raise AnalysisFailedError(str(e), symbol=symbol, timeframe=timeframe) from e

        if not isinstance(result, dict):
            logger.error(f"Analysis failed for {symbol}: analyzer returned {type(result).__name__}")
            raise AnalysisFailedError(
                f"Analyzer returned {type(result).__name__} instead of a result object",
                symbol=symbol,
                timeframe=timeframe
            )

        if self.is_limit_error(result):
            logger.warning(f"Provider {host} reported a usage limit for {pair}, rotating key")
            self.rotator.rotate(pair)

        logger.info(
            f"Analysis completed for {symbol}: "
            f"direction={result.get('signalType') or result.get('direction')}, "
            f"confidence={result.get('confidence')}, "
            f"entry={result.get('entryPrice') or 'N/A'}"
        )

        return result
