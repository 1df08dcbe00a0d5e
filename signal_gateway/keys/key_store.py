"""
Key store: provider host -> pair -> ordered API keys
"""

import logging
import re
from typing import Dict, List, Optional

from .secrets import KeyTable, SecretProvider, validate_key_table

logger = logging.getLogger(__name__)

_COMPACT_PAIR = re.compile(r"^[A-Z]{6}$")


def normalize_pair(symbol: str) -> str:
    """
    Normalize a user supplied symbol to the "BASE/QUOTE" form

    "eurusd" -> "EUR/USD", " xau/usd " -> "XAU/USD". Anything else is only
    upper-cased and stripped.
    """
    pair = symbol.strip().upper()
    if _COMPACT_PAIR.match(pair):
        return f"{pair[:3]}/{pair[3:]}"
    return pair


class KeyStore:
    """
    Read-only table of provider keys

    Hosts and pairs keep their load order. When the same pair is listed by
    several hosts the first host wins.
    """

    def __init__(self, table: KeyTable):
        self._table = validate_key_table(table, "key store")

        duplicates = self._duplicate_pairs()
        if duplicates:
            logger.warning(f"Pairs listed by more than one provider, first host wins: {sorted(duplicates)}")

        logger.info(
            f"Key store loaded: {len(self._table)} providers, "
            f"{len(self.pairs())} pairs"
        )

    @classmethod
    def from_provider(cls, provider: SecretProvider) -> "KeyStore":
        """Build a key store from a secret source"""
        return cls(provider.load_keys())

    def host_for(self, pair: str) -> Optional[str]:
        """First provider host that lists the pair, or None"""
        for host, pairs in self._table.items():
            if pair in pairs:
                return host
        return None

    def keys_for(self, host: str, pair: str) -> List[str]:
        """Ordered keys for the pair at host; empty if either is unknown"""
        return list(self._table.get(host, {}).get(pair, []))

    def hosts(self) -> List[str]:
        return list(self._table.keys())

    def pairs(self) -> List[str]:
        seen: Dict[str, None] = {}
        for pairs in self._table.values():
            for pair in pairs:
                seen.setdefault(pair, None)
        return list(seen)

    def _duplicate_pairs(self) -> set:
        seen = set()
        duplicates = set()
        for pairs in self._table.values():
            for pair in pairs:
                if pair in seen:
                    duplicates.add(pair)
                seen.add(pair)
        return duplicates

    def __contains__(self, pair: str) -> bool:
        return self.host_for(pair) is not None

    def __len__(self) -> int:
        return len(self.pairs())
