"""
Provider API key management: key sources, the key store and per-pair rotation.
"""

from .secrets import (
    SecretProvider,
    StaticSecretProvider,
    JsonEnvSecretProvider,
    JsonFileSecretProvider,
    build_secret_provider,
    mask_key,
)
from .key_store import KeyStore, normalize_pair
from .key_rotator import KeyRotator

__all__ = [
    "SecretProvider",
    "StaticSecretProvider",
    "JsonEnvSecretProvider",
    "JsonFileSecretProvider",
    "build_secret_provider",
    "mask_key",
    "KeyStore",
    "normalize_pair",
    "KeyRotator",
]
