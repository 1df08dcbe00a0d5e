"""
FastAPI dependencies exposing the per-app gateway components
"""

from fastapi import Request

from signal_gateway.services.analysis import AnalysisOrchestrator
from signal_gateway.services.throttle import RequestThrottle


def get_throttle(request: Request) -> RequestThrottle:
    return request.app.state.throttle


def get_orchestrator(request: Request) -> AnalysisOrchestrator:
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise RuntimeError("Analysis orchestrator is not initialized")
    return orchestrator
