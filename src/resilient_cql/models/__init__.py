"""
Data models for the resilient CQL layer.

Includes:
- Enums (ConsistencyLevel, OperationKind, FailureKind)
- Query (immutable per-attempt statement description)
- Execution outcomes (Success, RecoverableFailure, DeadlineExceeded, FatalFailure)
- Person (DAO payload)
"""

from resilient_cql.models.enums import ConsistencyLevel, FailureKind, OperationKind
from resilient_cql.models.outcome import (
    DeadlineExceeded,
    ExecutionOutcome,
    FatalFailure,
    RecoverableFailure,
    Success,
)
from resilient_cql.models.person import Person
from resilient_cql.models.query import Query

__all__ = [
    "ConsistencyLevel",
    "FailureKind",
    "OperationKind",
    "Query",
    "ExecutionOutcome",
    "Success",
    "RecoverableFailure",
    "DeadlineExceeded",
    "FatalFailure",
    "Person",
]
