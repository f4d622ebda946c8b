"""
Terminal errors raised by the query executor.

Raised when a read or write cannot be completed: retries exhausted, a
cluster timeout that does not match the operation, or a client deadline hit.
"""

from typing import TYPE_CHECKING, Optional

from resilient_cql.exceptions import DataAccessError

if TYPE_CHECKING:
    from resilient_cql.models.outcome import DeadlineExceeded, RecoverableFailure
    from resilient_cql.retry.metadata import RetryMetadata


class QueryFailedError(DataAccessError):
    """
    Base for the read/write terminal errors.
    
    Attributes:
        retry_metadata: Attempt count, consistency per attempt, failures
        last_failure: Final recoverable failure or deadline expiry
    """

    def __init__(
        self,
        message: str,
        retry_metadata: "RetryMetadata",
        last_failure: Optional["RecoverableFailure | DeadlineExceeded"] = None,
    ) -> None:
        self.retry_metadata = retry_metadata
        self.last_failure = last_failure
        super().__init__(
            f"{message} after {retry_metadata.attempts} attempt(s) "
            f"(consistency: {', '.join(level.value for level in retry_metadata.consistency_levels)})"
            + (f". Last failure: {last_failure.message}" if last_failure else ""),
            details={
                "attempts": retry_metadata.attempts,
                "consistency_levels": [level.value for level in retry_metadata.consistency_levels],
                "recoverable_failures": retry_metadata.recoverable_failures,
            },
        )

    @property
    def attempts(self) -> int:
        return self.retry_metadata.attempts


class UnableToRetrieveError(QueryFailedError):
    """Raised when a read cannot be served at any consistency the ladder allows."""
    pass


class UnableToPersistError(QueryFailedError):
    """Raised when a write cannot be acknowledged, or its call exceeds the deadline."""
    pass
