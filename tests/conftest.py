"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import pytest

from resilient_cql.config import Settings


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.
    
    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.MAX_RETRIES = 3
    """
    return Settings(
        # === Logging ===
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",
        
        # === Cassandra ===
        CASSANDRA_CONTACT_POINTS=["localhost"],
        CASSANDRA_PORT=9042,
        CASSANDRA_KEYSPACE="people",
        QUERY_TIMEOUT_SECONDS=0.5,
        
        # === Retry & Consistency ===
        MAX_RETRIES=1,
        READ_CONSISTENCY="QUORUM",
        WRITE_CONSISTENCY="ONE",
        BOOTSTRAP_CONSISTENCY="ONE",
        CONSISTENCY_LADDER=["ONE"],
        
        PROMETHEUS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )
