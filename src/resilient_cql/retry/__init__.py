"""
Retry core: bounded retries with consistency downgrade.

A logical query is attempted at the caller's consistency level first. When
the cluster reports a recoverable timeout matching the operation (read
timeout for reads, write timeout for writes), the query is retried at a
weaker level chosen by the ConsistencyLadder, up to MAX_RETRIES times.

Main Components:
    - QueryExecutor: Straight-line attempt loop
    - ConsistencyLadder: Pure (attempt, initial level) -> level mapping
    - RetryPolicy: max_retries + ladder
    - RetryMetadata: Immutable attempt history
    - UnableToRetrieveError / UnableToPersistError: Terminal read/write errors

Usage:
    >>> from resilient_cql.retry import QueryExecutor, RetryPolicy
    >>> executor = QueryExecutor(session, RetryPolicy(max_retries=1))
    >>> rows = executor.execute(query, ConsistencyLevel.QUORUM, OperationKind.READ)
"""

from resilient_cql.retry.exceptions import (
    QueryFailedError,
    UnableToPersistError,
    UnableToRetrieveError,
)
from resilient_cql.retry.executor import QueryExecutor
from resilient_cql.retry.ladder import ConsistencyLadder
from resilient_cql.retry.metadata import RetryMetadata
from resilient_cql.retry.policy import RetryPolicy

__all__ = [
    "QueryExecutor",
    "ConsistencyLadder",
    "RetryPolicy",
    "RetryMetadata",
    "QueryFailedError",
    "UnableToRetrieveError",
    "UnableToPersistError",
]
