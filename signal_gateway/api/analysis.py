"""
Symbol analysis endpoint
"""

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from signal_gateway.core.exceptions import ThrottledError
from signal_gateway.schemas.analysis import (
    AnalysisFailedResponse,
    AnalyzeSymbolRequest,
    ErrorResponse,
    ThrottledResponse,
)
from signal_gateway.services.analysis import AnalysisOrchestrator
from signal_gateway.services.throttle import RequestThrottle
from .dependencies import get_orchestrator, get_throttle

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Analysis"])


async def read_json_body(request: Request) -> Dict[str, Any]:
    """Request body as a dict; anything unparsable or non-object becomes {}"""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return body if isinstance(body, dict) else {}


@router.post(
    "/analyze-symbol",
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": AnalyzeSymbolRequest.model_json_schema()}},
            "required": True,
        }
    },
    responses={
        400: {"model": ErrorResponse},
        429: {"model": ThrottledResponse},
        500: {"model": AnalysisFailedResponse},
    },
)
async def analyze_symbol(
    request: Request,
    throttle: RequestThrottle = Depends(get_throttle),
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
) -> Any:
    """
    Analyze a symbol on a timeframe

    The global throttle runs before validation, so malformed requests also
    consume the cooldown window.
    """
    body = await read_json_body(request)
    symbol = body.get("symbol")
    timeframe = body.get("timeframe")

    decision = throttle.admit()
    if not decision.admitted:
        raise ThrottledError(decision.seconds_remaining, symbol=symbol, timeframe=timeframe)

    return await orchestrator.analyze(symbol, timeframe)
