"""
Resilient CQL data access for Cassandra-compatible clusters.

Runs queries at a tunable consistency level and absorbs transient replica
timeouts:
- Bounded retries per logical query
- Consistency downgrade on retry (e.g. QUORUM -> ONE)
- Typed read/write errors once retries are exhausted

Architecture: PersonDao -> QueryExecutor -> ConsistencyLadder + DriverSession (cassandra-driver)
"""

__version__ = "0.1.0"
