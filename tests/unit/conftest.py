"""Unit test fixtures (mocks and stubs).

Provides an in-memory driver session that can be primed with outcomes per
CQL text and records every attempt it receives, so retry behaviour can be
asserted without a running cluster.
"""

from dataclasses import dataclass
from typing import Callable, Union

import pytest

from resilient_cql.exceptions import SessionError
from resilient_cql.models.outcome import DeadlineExceeded, ExecutionOutcome, Success
from resilient_cql.models.query import Query


@dataclass(frozen=True)
class PreparedHandle:
    """Stand-in for cassandra.query.PreparedStatement."""

    query_string: str


Prime = Union[ExecutionOutcome, Callable[[Query], ExecutionOutcome]]


class PrimedSession:
    """
    In-memory DriverSession.
    
    - prime(cql, *outcomes): outcomes are returned in order, the last one repeats
    - unprimed statements succeed with no rows
    - every execute() call is recorded in `queries`
    """

    def __init__(self):
        self.connections = 0
        self.disconnections = 0
        self.queries: list[Query] = []
        self.prepared: list[str] = []
        self._connected = False
        self._primes: dict[str, list[Prime]] = {}

    @property
    def is_connected(self) -> bool:
        return self._connected

    def connect(self) -> None:
        if not self._connected:
            self._connected = True
            self.connections += 1

    def disconnect(self) -> None:
        self._connected = False
        self.disconnections += 1

    def prime(self, cql: str, *outcomes: Prime) -> None:
        self._primes[cql] = list(outcomes)

    def prepare(self, cql: str) -> PreparedHandle:
        if not self._connected:
            raise SessionError("not connected")
        self.prepared.append(cql)
        return PreparedHandle(cql)

    def execute(self, query: Query) -> ExecutionOutcome:
        if not self._connected:
            raise SessionError("not connected")
        self.queries.append(query)

        primes = self._primes.get(query.text)
        if not primes:
            return Success(rows=[])
        outcome = primes.pop(0) if len(primes) > 1 else primes[0]
        if callable(outcome):
            return outcome(query)
        return outcome

    def executed(self, cql: str) -> list[Query]:
        return [query for query in self.queries if query.text == cql]

    def clear_activity(self) -> None:
        self.queries.clear()
        self.prepared.clear()


def slow(delay: float, rows: list | None = None) -> Callable[[Query], ExecutionOutcome]:
    """Prime that answers after `delay` seconds (simulated against query.timeout)."""
    def respond(query: Query) -> ExecutionOutcome:
        if query.timeout is not None and query.timeout < delay:
            return DeadlineExceeded(
                message="Client request timeout. See Session.execute[_async](timeout)",
                timeout=query.timeout,
            )
        return Success(rows=list(rows or []))
    return respond


@pytest.fixture
def primed_session() -> PrimedSession:
    """Connected in-memory session."""
    session = PrimedSession()
    session.connect()
    return session


@pytest.fixture
def slow_prime():
    """Factory for delayed primes."""
    return slow


@pytest.fixture
def idle_session() -> PrimedSession:
    """In-memory session that has not been connected yet."""
    return PrimedSession()
