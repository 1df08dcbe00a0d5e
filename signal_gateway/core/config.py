"""
Configuration management for the Signal Gateway
Settings for the HTTP service, request throttling and provider key sources
"""

import os
from functools import lru_cache
from typing import List, Optional
from enum import Enum

from pydantic_settings import BaseSettings
from pydantic import Field


class Environment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Application settings"""

    # === BASIC APPLICATION CONFIG ===
    environment: Environment = Environment.DEVELOPMENT
    host: str = "0.0.0.0"
    port: int = Field(default=3003, env="PORT")
    debug: bool = True
    log_level: LogLevel = LogLevel.INFO

    service_name: str = "Trading Signal Bot"
    service_version: str = "1.0.0"

    # Security
    allowed_origins: List[str] = ["*"]

    # === REQUEST THROTTLING ===
    request_cooldown_ms: int = 15000  # one accepted analysis per 15 seconds, process-wide

    # === ANALYZER ===
    analyzer_timeout_seconds: float = 20.0
    analyzer_min_candles: int = 30

    # === PROVIDER KEY SOURCES ===
    # JSON object: {"<host>": {"<pair>": ["<key>", ...]}}
    provider_keys_json: Optional[str] = Field(default=None, env="PROVIDER_KEYS_JSON")
    provider_keys_file: Optional[str] = Field(default=None, env="PROVIDER_KEYS_FILE")

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.environment == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """Check if running in testing"""
        return self.environment == Environment.TESTING

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


class DevelopmentSettings(Settings):
    """Development environment settings"""
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = True
    log_level: LogLevel = LogLevel.DEBUG


class ProductionSettings(Settings):
    """Production environment settings"""
    environment: Environment = Environment.PRODUCTION
    debug: bool = False
    log_level: LogLevel = LogLevel.INFO


class TestingSettings(Settings):
    """Testing environment settings"""
    environment: Environment = Environment.TESTING
    debug: bool = True
    log_level: LogLevel = LogLevel.DEBUG

    # Short network timeout for tests
    analyzer_timeout_seconds: float = 2.0


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance based on environment"""
    return get_settings_for_environment(os.getenv("ENVIRONMENT", "development"))


def get_settings_for_environment(env: str) -> Settings:
    """Get settings for specific environment"""
    if env.lower() == "production":
        return ProductionSettings(environment=Environment.PRODUCTION)
    elif env.lower() == "testing":
        return TestingSettings(environment=Environment.TESTING)
    else:
        return DevelopmentSettings(environment=Environment.DEVELOPMENT)
