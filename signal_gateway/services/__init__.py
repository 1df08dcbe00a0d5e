"""
Gateway services: request throttling, analysis orchestration and the smart
money analyzer.
"""

from .throttle import RequestThrottle, ThrottleDecision
from .analysis import AnalysisOrchestrator, contains_limit_marker
from .smart_money import SmartMoneyAnalyzer

__all__ = [
    "RequestThrottle",
    "ThrottleDecision",
    "AnalysisOrchestrator",
    "contains_limit_marker",
    "SmartMoneyAnalyzer",
]
