"""Custom Prometheus metrics for the resilient CQL layer.

These metrics are registered on the default registry and exposed by whatever
process embeds the layer. Alert rules should be configured for:
- query_retries_exhausted_total (callers are seeing read/write errors)
- consistency_downgrades_total (reads/writes served below requested consistency)
"""

from prometheus_client import Counter, Histogram

# === Attempt Metrics ===

query_attempts_total = Counter(
    "query_attempts_total",
    "Total query attempts by operation, consistency and outcome",
    ["operation", "consistency", "outcome"],
)
"""
Query attempts counter.

Labels:
- operation: read, write
- consistency: consistency level of the attempt (QUORUM, ONE, ...)
- outcome: success, read_timeout, write_timeout, deadline_exceeded, fatal
"""

# === Retry Metrics ===

consistency_downgrades_total = Counter(
    "consistency_downgrades_total",
    "Total attempts issued at a lower consistency than requested",
    ["operation", "from_level", "to_level"],
)
"""
Consistency downgrades counter.

Alert thresholds:
- WARN: downgrade rate > 5% of reads (replica set slow or partially down)
"""

query_retries_exhausted_total = Counter(
    "query_retries_exhausted_total",
    "Total logical queries that failed with a terminal read/write error",
    ["operation", "reason"],
)
"""
Terminal failures counter.

Labels:
- reason: retries_exhausted, timeout_mismatch, deadline_exceeded
"""

# === Latency Metrics ===

query_latency_seconds = Histogram(
    "query_latency_seconds",
    "Latency of logical queries including retries",
    ["operation"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)
