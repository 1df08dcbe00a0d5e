"""
Signal Gateway
Version: 1.0

Smart money trading signal proxy: per-pair API key rotation across market
data providers, a process-wide request throttle and symbol analysis
orchestration behind a FastAPI service.
"""

__version__ = "1.0.0"
