"""
Retry metadata tracking.

This module defines the RetryMetadata dataclass that captures the attempt
history of one logical query for logs and terminal errors.
"""

from dataclasses import dataclass, field

from resilient_cql.models.enums import ConsistencyLevel, OperationKind


@dataclass(frozen=True)
class RetryMetadata:
    """
    Attempt history of one logical query.
    
    Attributes:
        operation: Read or write
        attempts: Number of queries issued against the session
        consistency_levels: Consistency used per attempt, in order
        total_latency_ms: Time from first attempt to final outcome (ms)
        recoverable_failures: Details of each cluster-reported timeout
    """

    operation: OperationKind
    attempts: int
    consistency_levels: list[ConsistencyLevel]
    total_latency_ms: int
    recoverable_failures: list[dict] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate metadata invariants."""
        if self.attempts < 0:
            raise ValueError("attempts must be >= 0")
        
        if len(self.consistency_levels) != self.attempts:
            raise ValueError("consistency_levels must hold one level per attempt")
        
        if self.total_latency_ms < 0:
            raise ValueError("total_latency_ms must be >= 0")

    @property
    def downgraded(self) -> bool:
        """True if any attempt ran at a level other than the first one."""
        return len(set(self.consistency_levels)) > 1
