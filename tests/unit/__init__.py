"""
Unit tests for the resilient CQL layer.

Test individual components in isolation (no running cluster):
- Consistency ladder and retry policy
- Query executor (retry counts, downgrade order, error mapping)
- Person DAO against an in-memory primed session
- cassandra-driver adapter with a mocked Cluster
- Row decoder, settings, logging
"""
