"""
Driver session contract consumed by the query executor.

The executor only needs a narrow surface: run one Query and report a tagged
outcome. Anything that satisfies this protocol (the cassandra-driver adapter,
an in-memory fake in tests) can be plugged in.
"""

from typing import Any, Protocol

from resilient_cql.models.outcome import ExecutionOutcome
from resilient_cql.models.query import Query


class DriverSession(Protocol):
    """
    Protocol for driver sessions.
    
    Implementations own connection pooling, transport-level concerns and
    topology awareness. They must not retry queries themselves and must not
    raise for query failures; failures are reported as ExecutionOutcome.
    """

    @property
    def is_connected(self) -> bool:
        ...

    def connect(self) -> None:
        """Establish (or re-validate) the session. Idempotent."""
        ...

    def disconnect(self) -> None:
        """Release the session and its connections."""
        ...

    def prepare(self, cql: str) -> Any:
        """
        Prepare a statement.
        
        Returns:
            Opaque handle usable as Query.prepared
        
        Raises:
            FatalProtocolError: If the statement cannot be prepared
            SessionError: If the session is not connected
        """
        ...

    def execute(self, query: Query) -> ExecutionOutcome:
        """
        Execute exactly one attempt of a query.
        
        Honors query.consistency and query.timeout.
        """
        ...
