"""
Process-wide request throttle
One accepted analysis request per cooldown window, shared by every symbol
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_MS = 15000


def _now_ms() -> float:
    return time.time() * 1000


@dataclass(frozen=True)
class ThrottleDecision:
    """Outcome of a throttle check"""
    admitted: bool
    seconds_remaining: int = 0


class RequestThrottle:
    """
    Global cooldown gate

    A request is rejected when it arrives less than cooldown_ms after the
    last admitted one. Admission records the arrival time immediately, so a
    request that later fails validation or analysis still uses up the window.
    Rejected requests do not move the window.
    """

    def __init__(
        self,
        cooldown_ms: int = DEFAULT_COOLDOWN_MS,
        clock: Callable[[], float] = _now_ms
    ):
        if cooldown_ms < 0:
            raise ValueError("cooldown_ms must be >= 0")
        self.cooldown_ms = cooldown_ms
        self.clock = clock
        self.last_accepted: Optional[float] = None

    def admit(self, now: Optional[float] = None) -> ThrottleDecision:
        """
        Check and consume the cooldown slot

        Args:
            now: Arrival time in milliseconds; defaults to the throttle clock

        Returns:
            ThrottleDecision with admitted flag and whole seconds left to wait
        """
        if now is None:
            now = self.clock()

        if self.last_accepted is not None:
            elapsed = now - self.last_accepted
            if elapsed < self.cooldown_ms:
                remaining = math.ceil((self.cooldown_ms - elapsed) / 1000)
                logger.debug(f"Request throttled, {remaining}s remaining")
                return ThrottleDecision(admitted=False, seconds_remaining=remaining)

        self.last_accepted = now
        return ThrottleDecision(admitted=True)

    def reset(self):
        """Forget the last admission"""
        self.last_accepted = None
