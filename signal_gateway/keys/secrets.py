"""
Provider key sources
Loads the host -> pair -> keys table from a secret source instead of source literals
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from signal_gateway.core.config import Settings
from signal_gateway.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

KeyTable = Dict[str, Dict[str, List[str]]]


def mask_key(key: str) -> str:
    """Short, log-safe representation of an API key"""
    if not key:
        return "<empty>"
    if len(key) <= 8:
        return "****"
    return f"{key[:4]}...{key[-4:]}"


def validate_key_table(raw: Any, source: str) -> KeyTable:
    """
    Check the shape of a key table and copy it into plain dicts/lists

    Args:
        raw: Decoded table, expected {host: {pair: [key, ...]}}
        source: Description of where the table came from, for error messages

    Returns:
        Validated key table preserving host and pair order
    """
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"{source}: expected an object of provider hosts")

    table: KeyTable = {}
    for host, pairs in raw.items():
        if not isinstance(host, str) or not host:
            raise ConfigurationError(f"{source}: provider host must be a non-empty string")
        if not isinstance(pairs, Mapping):
            raise ConfigurationError(f"{source}: provider '{host}' must map pairs to key lists")

        table[host] = {}
        for pair, keys in pairs.items():
            if isinstance(keys, str) or not isinstance(keys, (list, tuple)):
                raise ConfigurationError(f"{source}: keys for {host} {pair} must be a list")
            if not keys:
                raise ConfigurationError(f"{source}: {host} {pair} has no keys")
            if not all(isinstance(k, str) and k for k in keys):
                raise ConfigurationError(f"{source}: {host} {pair} contains an empty or non-string key")
            table[host][pair] = list(keys)

    return table


class SecretProvider(ABC):
    """Source of provider API keys"""

    @abstractmethod
    def load_keys(self) -> KeyTable:
        """Return {host: {pair: [key, ...]}}"""


class StaticSecretProvider(SecretProvider):
    """In-memory key table, mainly for tests and embedding"""

    def __init__(self, table: Mapping[str, Mapping[str, List[str]]]):
        self._table = validate_key_table(table, "static key table")

    def load_keys(self) -> KeyTable:
        return {host: {pair: list(keys) for pair, keys in pairs.items()}
                for host, pairs in self._table.items()}


class JsonEnvSecretProvider(SecretProvider):
    """Key table stored as a JSON document in an environment variable"""

    def __init__(self, payload: str, variable: str = "PROVIDER_KEYS_JSON"):
        self.payload = payload
        self.variable = variable

    def load_keys(self) -> KeyTable:
        try:
            raw = json.loads(self.payload)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"{self.variable} is not valid JSON: {e}") from e
        return validate_key_table(raw, self.variable)


class JsonFileSecretProvider(SecretProvider):
    """Key table stored in a JSON file outside the source tree"""

    def __init__(self, path: str):
        self.path = Path(path)

    def load_keys(self) -> KeyTable:
        if not self.path.exists():
            raise ConfigurationError(f"Provider key file not found: {self.path}")

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                raw = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Provider key file {self.path} is not valid JSON: {e}") from e

        return validate_key_table(raw, str(self.path))


def build_secret_provider(settings: Settings) -> SecretProvider:
    """
    Pick the key source configured in settings

    PROVIDER_KEYS_JSON wins over PROVIDER_KEYS_FILE.
    """
    if settings.provider_keys_json:
        logger.info("Loading provider keys from PROVIDER_KEYS_JSON")
        return JsonEnvSecretProvider(settings.provider_keys_json)

    if settings.provider_keys_file:
        logger.info(f"Loading provider keys from {settings.provider_keys_file}")
        return JsonFileSecretProvider(settings.provider_keys_file)

    raise ConfigurationError(
        "No provider keys configured. Set PROVIDER_KEYS_JSON or PROVIDER_KEYS_FILE."
    )
