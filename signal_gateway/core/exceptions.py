"""
Custom exceptions for the Signal Gateway
"""

from datetime import datetime, timezone
from typing import Optional, Any, Dict


class SignalGatewayError(Exception):
    """Base error for non-HTTP failures inside the gateway"""


class ConfigurationError(SignalGatewayError):
    """Provider keys could not be loaded or are malformed"""


class ProviderError(SignalGatewayError):
    """Upstream market data provider failure"""

    def __init__(self, message: str, host: Optional[str] = None, status: Optional[int] = None):
        self.host = host
        self.status = status
        super().__init__(message)


class APIException(Exception):
    """Base API exception"""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Any] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details
        self.timestamp = datetime.now(timezone.utc)
        super().__init__(self.message)

    def to_response(self) -> Dict[str, Any]:
        """Response body sent to the client"""
        content: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            content["details"] = self.details
        content["timestamp"] = self.timestamp.isoformat()
        return content


class ThrottledError(APIException):
    """Request arrived inside the global cooldown window"""

    def __init__(self, seconds_remaining: int, symbol: Any = None, timeframe: Any = None):
        self.seconds_remaining = seconds_remaining
        self.symbol = symbol
        self.timeframe = timeframe
        super().__init__(
            "Too Many Requests",
            status_code=429,
            details=f"Please wait {seconds_remaining} seconds before making another request."
        )

    def to_response(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "details": self.details,
            "symbol": self.symbol,
            "timeframe": self.timeframe,
        }


class InvalidInputError(APIException):
    """Malformed analysis request"""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)

    def to_response(self) -> Dict[str, Any]:
        return {"error": self.message}


class UnknownSymbolError(InvalidInputError):
    """No provider is configured for the requested pair"""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__("Invalid symbol. No API key found for the provided symbol.")


class AnalysisFailedError(APIException):
    """The analyzer raised while processing a symbol"""

    def __init__(self, details: str, symbol: Any = None, timeframe: Any = None):
        self.symbol = symbol if symbol else "unknown"
        self.timeframe = timeframe if timeframe else "unknown"
        super().__init__("Analysis failed", status_code=500, details=details)

    def to_response(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "details": self.details,
            "symbol": self.symbol,
            "timeframe": self.timeframe,
            "timestamp": self.timestamp.isoformat(),
        }
