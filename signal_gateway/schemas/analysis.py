"""
Pydantic schemas for analysis and system endpoints
"""

from typing import Any, Optional, List

from pydantic import BaseModel, Field


class AnalyzeSymbolRequest(BaseModel):
    """Documented request body for symbol analysis (validated by the orchestrator)"""
    symbol: str = Field(..., description="Pair to analyze, e.g. EUR/USD or EURUSD")
    timeframe: str = Field(..., description="Candle timeframe, e.g. 5m, 1h, 1d")


class ErrorResponse(BaseModel):
    """Invalid input or unknown symbol"""
    error: str


class ThrottledResponse(BaseModel):
    """Request arrived inside the cooldown window"""
    error: str
    details: str
    symbol: Optional[Any] = None
    timeframe: Optional[Any] = None


class AnalysisFailedResponse(BaseModel):
    """Analyzer failure"""
    error: str
    details: str
    symbol: Any
    timeframe: Any
    timestamp: str


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    service: str
    version: str


class NotFoundResponse(BaseModel):
    error: str
    availableEndpoints: List[str]
    timestamp: str
