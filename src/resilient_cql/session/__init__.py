"""
Driver session layer.

- base.py: DriverSession protocol consumed by the executor
- cassandra_session.py: cassandra-driver implementation
"""

from resilient_cql.session.base import DriverSession
from resilient_cql.session.cassandra_session import CassandraSession

__all__ = [
    "DriverSession",
    "CassandraSession",
]
