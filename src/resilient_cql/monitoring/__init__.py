"""Monitoring and metrics instrumentation for the resilient CQL layer.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from resilient_cql.monitoring.metrics import (
    consistency_downgrades_total,
    query_attempts_total,
    query_latency_seconds,
    query_retries_exhausted_total,
)

__all__ = [
    "query_attempts_total",
    "consistency_downgrades_total",
    "query_retries_exhausted_total",
    "query_latency_seconds",
]
