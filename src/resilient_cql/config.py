"""
Configuration settings for the resilient CQL data access layer.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

import re

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from resilient_cql.models.enums import ConsistencyLevel


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    
    # === Logging ===
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"
    
    # === Cassandra Connection ===
    CASSANDRA_CONTACT_POINTS: list[str] = ["localhost"]
    CASSANDRA_PORT: int = 9042
    CASSANDRA_KEYSPACE: str = "people"
    CASSANDRA_CONNECT_TIMEOUT: float = 5.0  # seconds
    QUERY_TIMEOUT_SECONDS: float = 0.5  # per attempt, not cumulative across retries
    
    # === Retry & Consistency ===
    MAX_RETRIES: int = 1  # 0 = single attempt
    READ_CONSISTENCY: str = "QUORUM"
    WRITE_CONSISTENCY: str = "ONE"
    BOOTSTRAP_CONSISTENCY: str = "ONE"  # Used for "USE <keyspace>" on connect
    CONSISTENCY_LADDER: list[str] = ["ONE"]  # Levels used on attempts 1, 2, ... (last one repeats)
    
    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True

    @field_validator("MAX_RETRIES")
    @classmethod
    def _max_retries_non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("MAX_RETRIES must be >= 0")
        return value

    @field_validator("CASSANDRA_KEYSPACE")
    @classmethod
    def _plain_identifier(cls, value: str) -> str:
        if not re.fullmatch(r"[A-Za-z][A-Za-z0-9_]{0,47}", value):
            raise ValueError(f"Invalid keyspace name: {value!r}")
        return value

    @field_validator("READ_CONSISTENCY", "WRITE_CONSISTENCY", "BOOTSTRAP_CONSISTENCY")
    @classmethod
    def _known_level(cls, value: str) -> str:
        return ConsistencyLevel(value.upper()).value

    @field_validator("CONSISTENCY_LADDER")
    @classmethod
    def _known_ladder(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("CONSISTENCY_LADDER must not be empty")
        return [ConsistencyLevel(level.upper()).value for level in value]
