"""
Tagged outcome of a single query attempt.

The driver session never raises for query failures; it returns one of the
outcome types below and the executor branches on the tag.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from resilient_cql.models.enums import ConsistencyLevel, FailureKind


@dataclass(frozen=True)
class Success:
    """Rows returned by the cluster (empty for writes and schema statements)."""

    rows: list[Any] = field(default_factory=list)


@dataclass(frozen=True)
class RecoverableFailure:
    """
    Cluster-reported timeout: too few replicas answered in time.
    
    Attributes:
        kind: READ_TIMEOUT or WRITE_TIMEOUT
        consistency: Consistency level the coordinator was asked for
        message: Driver error message
        required_responses: Replica acknowledgements needed
        received_responses: Replica acknowledgements received
    """

    kind: FailureKind
    consistency: Optional[ConsistencyLevel]
    message: str
    required_responses: Optional[int] = None
    received_responses: Optional[int] = None

    def as_details(self) -> dict:
        return {
            "kind": self.kind.value,
            "consistency": self.consistency.value if self.consistency else None,
            "message": self.message,
            "required_responses": self.required_responses,
            "received_responses": self.received_responses,
        }


@dataclass(frozen=True)
class DeadlineExceeded:
    """The client-side per-attempt deadline elapsed before the cluster replied."""

    message: str
    timeout: Optional[float] = None


@dataclass(frozen=True)
class FatalFailure:
    """Any failure that must not be retried (bad statement, no hosts, ...)."""

    cause: BaseException


ExecutionOutcome = Union[Success, RecoverableFailure, DeadlineExceeded, FatalFailure]
