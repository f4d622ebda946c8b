"""
Integration tests for the resilient CQL layer.

Run against a real Cassandra node on localhost:9042 (marked with
@pytest.mark.integration and skipped when no node is reachable).
"""
