"""
Per-pair round-robin key rotation
"""

import logging
import threading
from typing import Dict, Optional

from .key_store import KeyStore
from .secrets import mask_key

logger = logging.getLogger(__name__)


class KeyRotator:
    """
    Selects the current API key for a pair and advances it on request.

    The key in use is keys[usage % len(keys)], where usage counts rotations
    for the pair since process start. Counters only grow; the modulo wraps
    selection back to the first key.

    Usage:
        rotator = KeyRotator(key_store)
        key = rotator.current_key("EUR/USD")
        ...
        rotator.rotate("EUR/USD")  # upstream reported a usage limit
    """

    def __init__(self, key_store: KeyStore):
        self.key_store = key_store
        self._usage: Dict[str, int] = {}
        self._lock = threading.Lock()

    def current_key(self, pair: str) -> Optional[str]:
        """Key to use for the pair, or None when no provider lists it"""
        host = self.key_store.host_for(pair)
        if not host:
            return None

        keys = self.key_store.keys_for(host, pair)
        with self._lock:
            usage = self._usage.setdefault(pair, 0)
        return keys[usage % len(keys)]

    def rotate(self, pair: str) -> None:
        """Advance the pair to its next key; no-op for unknown pairs"""
        host = self.key_store.host_for(pair)
        if not host:
            return

        with self._lock:
            self._usage[pair] = self._usage.get(pair, 0) + 1
            usage = self._usage[pair]

        keys = self.key_store.keys_for(host, pair)
        logger.warning(
            f"Rotated key for {pair} on {host}: now using key "
            f"{usage % len(keys) + 1}/{len(keys)} ({mask_key(keys[usage % len(keys)])})"
        )

    def usage(self, pair: str) -> int:
        """Number of rotations recorded for the pair"""
        with self._lock:
            return self._usage.get(pair, 0)

    def snapshot(self) -> Dict[str, int]:
        """Rotation counters for every pair seen so far"""
        with self._lock:
            return dict(self._usage)
