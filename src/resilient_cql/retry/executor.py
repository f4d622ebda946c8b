"""
Query executor with bounded retries and consistency downgrade.

This module implements the QueryExecutor that runs one logical query as a
straight-line sequence of attempts against a DriverSession.

Attempt loop (attempt i = 0 .. max_retries):
    1. Ask the ConsistencyLadder for the level of attempt i
    2. Issue exactly one Query at that level
    3. Branch on the outcome tag:
       - Success: decode and return
       - RecoverableFailure matching the operation: next attempt, or terminal error
       - RecoverableFailure of the other kind: terminal error, no retry
       - DeadlineExceeded: terminal error, no retry
       - FatalFailure: FatalProtocolError, no retry

Usage:
    executor = QueryExecutor(session, RetryPolicy(max_retries=1))
    rows = executor.execute(Query.simple("select * from person"), ConsistencyLevel.QUORUM, OperationKind.READ)
"""

import threading
import time
from typing import Any, Callable, Optional, TypeVar

import structlog

from resilient_cql.exceptions import FatalProtocolError, QueryCancelledError
from resilient_cql.models.enums import ConsistencyLevel, FailureKind, OperationKind
from resilient_cql.models.outcome import (
    DeadlineExceeded,
    ExecutionOutcome,
    RecoverableFailure,
    Success,
)
from resilient_cql.models.query import Query
from resilient_cql.monitoring.metrics import (
    consistency_downgrades_total,
    query_attempts_total,
    query_latency_seconds,
    query_retries_exhausted_total,
)
from resilient_cql.retry.exceptions import (
    QueryFailedError,
    UnableToPersistError,
    UnableToRetrieveError,
)
from resilient_cql.retry.metadata import RetryMetadata
from resilient_cql.retry.policy import RetryPolicy
from resilient_cql.session.base import DriverSession

logger = structlog.get_logger(__name__)

T = TypeVar("T")

_TERMINAL_ERRORS: dict[OperationKind, type[QueryFailedError]] = {
    OperationKind.READ: UnableToRetrieveError,
    OperationKind.WRITE: UnableToPersistError,
}


class QueryExecutor:
    """
    Runs queries with the retry/downgrade policy.

    Holds no per-call state: one instance can serve concurrent callers that
    share the same session.

    Attributes:
        session: Driver session used for every attempt
        policy: Retry count and consistency ladder
        metrics_enabled: Record Prometheus metrics for attempts
    """

    def __init__(
        self,
        session: DriverSession,
        policy: RetryPolicy | None = None,
        metrics_enabled: bool = True,
    ):
        self.session = session
        self.policy = policy or RetryPolicy()
        self.metrics_enabled = metrics_enabled

        logger.info(
            "QueryExecutor initialized",
            extra={
                "max_retries": self.policy.max_retries,
                "ladder": [step.value for step in self.policy.ladder.steps],
            },
        )

    def execute(
        self,
        query: Query,
        initial_consistency: ConsistencyLevel,
        operation: OperationKind,
        *,
        decoder: Optional[Callable[[Any], T]] = None,
        cancel_event: Optional[threading.Event] = None,
        deadline: Optional[float] = None,
    ) -> list[T] | list[Any]:
        """
        Execute a logical query with retries.

        Args:
            query: Statement description; its consistency is overridden per attempt
            initial_consistency: Level of the first attempt
            operation: READ or WRITE, or its string value (selects retryable
                timeout and terminal error)
            decoder: Optional row mapper applied to the successful rows
            cancel_event: Set by the caller to stop further attempts
            deadline: Absolute time.monotonic() value after which no attempt starts;
                also caps each attempt's timeout

        Returns:
            Rows of the first successful attempt (decoded if a decoder is given)

        Raises:
            UnableToRetrieveError: Read failed (retries exhausted, deadline, mismatched timeout)
            UnableToPersistError: Write failed (retries exhausted, deadline, mismatched timeout)
            FatalProtocolError: Non-recoverable failure or decode error
            QueryCancelledError: Cancelled or deadline passed before an attempt
        """
        initial_consistency = ConsistencyLevel(initial_consistency)
        operation = OperationKind(operation)
        retryable = FailureKind.for_operation(operation)
        start_time = time.monotonic()
        levels: list[ConsistencyLevel] = []
        failures: list[dict] = []
        last_failure: RecoverableFailure | None = None

        try:
            for attempt_index in range(self.policy.max_attempts):
                self._ensure_not_cancelled(operation, levels, failures, start_time, cancel_event, deadline)

                level = self.policy.ladder.level_for(attempt_index, initial_consistency)
                attempt = self._bound_to_deadline(query.with_consistency(level), deadline)
                levels.append(level)

                if level != initial_consistency:
                    logger.warning(
                        f"Downgrading consistency {initial_consistency.value} -> {level.value}",
                        extra={"operation": operation.value, "attempt": attempt_index + 1},
                    )
                    self._record_downgrade(operation, initial_consistency, level)

                logger.info(
                    f"Executing {operation.value} attempt {attempt_index + 1}/{self.policy.max_attempts}",
                    extra={
                        "query": attempt.text,
                        "consistency": level.value,
                        "timeout": attempt.timeout,
                    },
                )

                outcome = self.session.execute(attempt)
                self._record_attempt(operation, level, outcome)

                if isinstance(outcome, Success):
                    logger.info(
                        f"{operation.value.capitalize()} succeeded",
                        extra={
                            "attempts": len(levels),
                            "consistency": level.value,
                            "rows": len(outcome.rows),
                        },
                    )
                    return self._decode(outcome.rows, decoder)

                if isinstance(outcome, RecoverableFailure):
                    last_failure = outcome
                    failures.append(outcome.as_details())

                    if outcome.kind is not retryable:
                        logger.error(
                            f"{outcome.kind.value} reported for a {operation.value}, not retrying",
                            extra={"attempt": attempt_index + 1, "error": outcome.message},
                        )
                        raise self._terminal(
                            operation, "timeout_mismatch", levels, failures, start_time, outcome
                        )

                    logger.warning(
                        f"{outcome.kind.value} on attempt {attempt_index + 1}",
                        extra={
                            "consistency": level.value,
                            "required_responses": outcome.required_responses,
                            "received_responses": outcome.received_responses,
                            "retries_left": self.policy.max_attempts - attempt_index - 1,
                        },
                    )
                    continue

                if isinstance(outcome, DeadlineExceeded):
                    logger.error(
                        f"{operation.value.capitalize()} exceeded its deadline, not retrying",
                        extra={"attempt": attempt_index + 1, "timeout": outcome.timeout},
                    )
                    raise self._terminal(
                        operation, "deadline_exceeded", levels, failures, start_time, outcome
                    )

                # FatalFailure
                logger.error(
                    f"Fatal error during {operation.value}",
                    extra={
                        "attempt": attempt_index + 1,
                        "error_type": type(outcome.cause).__name__,
                        "error": str(outcome.cause),
                    },
                )
                raise FatalProtocolError(
                    f"{operation.value.capitalize()} failed: {outcome.cause}",
                    cause=outcome.cause,
                    details={"attempts": len(levels), "query": attempt.text},
                )

            logger.error(
                f"Retries exhausted for {operation.value}",
                extra={
                    "attempts": len(levels),
                    "consistency_levels": [level.value for level in levels],
                },
            )
            raise self._terminal(
                operation, "retries_exhausted", levels, failures, start_time, last_failure
            )
        finally:
            if self.metrics_enabled:
                query_latency_seconds.labels(operation=operation.value).observe(
                    time.monotonic() - start_time
                )

    def _terminal(
        self,
        operation: OperationKind,
        reason: str,
        levels: list[ConsistencyLevel],
        failures: list[dict],
        start_time: float,
        last_failure: RecoverableFailure | DeadlineExceeded | None,
    ) -> QueryFailedError:
        if self.metrics_enabled:
            query_retries_exhausted_total.labels(operation=operation.value, reason=reason).inc()

        error_class = _TERMINAL_ERRORS[operation]
        action = "retrieve" if operation is OperationKind.READ else "persist"
        return error_class(
            f"Unable to {action} ({reason.replace('_', ' ')})",
            retry_metadata=self._metadata(operation, levels, failures, start_time),
            last_failure=last_failure,
        )

    def _ensure_not_cancelled(
        self,
        operation: OperationKind,
        levels: list[ConsistencyLevel],
        failures: list[dict],
        start_time: float,
        cancel_event: Optional[threading.Event],
        deadline: Optional[float],
    ) -> None:
        if cancel_event is not None and cancel_event.is_set():
            reason = "cancelled"
        elif deadline is not None and time.monotonic() >= deadline:
            reason = "deadline passed"
        else:
            return

        metadata = self._metadata(operation, levels, failures, start_time)
        logger.warning(
            f"{operation.value.capitalize()} {reason} before attempt {len(levels) + 1}",
            extra={"attempts": metadata.attempts},
        )
        raise QueryCancelledError(
            f"{operation.value.capitalize()} {reason} after {metadata.attempts} attempt(s)",
            details={
                "attempts": metadata.attempts,
                "consistency_levels": [level.value for level in levels],
            },
        )

    @staticmethod
    def _bound_to_deadline(query: Query, deadline: Optional[float]) -> Query:
        if deadline is None:
            return query
        remaining = max(deadline - time.monotonic(), 0.001)
        if query.timeout is None or query.timeout > remaining:
            return query.with_timeout(remaining)
        return query

    @staticmethod
    def _decode(rows: list, decoder: Optional[Callable[[Any], T]]) -> list[T] | list[Any]:
        if decoder is None:
            return rows
        try:
            return [decoder(row) for row in rows]
        except Exception as e:
            logger.error("Failed to decode row", extra={"error_type": type(e).__name__, "error": str(e)})
            raise FatalProtocolError(f"Unable to decode row: {e}", cause=e) from e

    @staticmethod
    def _metadata(
        operation: OperationKind,
        levels: list[ConsistencyLevel],
        failures: list[dict],
        start_time: float,
    ) -> RetryMetadata:
        return RetryMetadata(
            operation=operation,
            attempts=len(levels),
            consistency_levels=list(levels),
            total_latency_ms=int((time.monotonic() - start_time) * 1000),
            recoverable_failures=list(failures),
        )

    def _record_attempt(
        self, operation: OperationKind, level: ConsistencyLevel, outcome: ExecutionOutcome
    ) -> None:
        if not self.metrics_enabled:
            return
        if isinstance(outcome, Success):
            label = "success"
        elif isinstance(outcome, RecoverableFailure):
            label = outcome.kind.value
        elif isinstance(outcome, DeadlineExceeded):
            label = "deadline_exceeded"
        else:
            label = "fatal"
        query_attempts_total.labels(
            operation=operation.value, consistency=level.value, outcome=label
        ).inc()

    def _record_downgrade(
        self, operation: OperationKind, from_level: ConsistencyLevel, to_level: ConsistencyLevel
    ) -> None:
        if self.metrics_enabled:
            consistency_downgrades_total.labels(
                operation=operation.value, from_level=from_level.value, to_level=to_level.value
            ).inc()
