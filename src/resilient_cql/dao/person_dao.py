"""
Person data access object.

Reads and writes the `person` table through the QueryExecutor, so transient
replica timeouts are retried with a consistency downgrade before callers see
an UnableToRetrieveError / UnableToPersistError.

Statements:
- select * from person                                   (read, READ_CONSISTENCY)
- select * from person where name = ?                    (read, prepared)
- insert into person(name, age, interesting_dates) ...   (write, WRITE_CONSISTENCY, prepared)
"""

import threading
from typing import Any, Optional

import structlog

from resilient_cql.config import Settings
from resilient_cql.dao.decoder import decode_person
from resilient_cql.exceptions import SessionError
from resilient_cql.models.enums import ConsistencyLevel, OperationKind
from resilient_cql.models.outcome import Success
from resilient_cql.models.person import Person
from resilient_cql.models.query import Query
from resilient_cql.retry.executor import QueryExecutor
from resilient_cql.retry.policy import RetryPolicy
from resilient_cql.session.base import DriverSession
from resilient_cql.session.cassandra_session import CassandraSession

logger = structlog.get_logger(__name__)


class PersonDao:
    """
    DAO for the person table.
    
    The session is passed in explicitly; retry count and consistency levels
    are fixed at construction time from Settings.
    
    Attributes:
        session: Driver session
        settings: Application settings
        executor: QueryExecutor shared by all operations
    """
    
    SELECT_ALL = "select * from person"
    SELECT_BY_NAME = "select * from person where name = ?"
    INSERT = "insert into person(name, age, interesting_dates) values (?,?,?)"
    
    def __init__(
        self,
        session: DriverSession,
        settings: Optional[Settings] = None,
        policy: Optional[RetryPolicy] = None,
    ):
        """
        Initialize the DAO.
        
        Args:
            session: Driver session (not yet connected)
            settings: Application settings (defaults loaded from environment)
            policy: Retry policy (defaults to MAX_RETRIES / CONSISTENCY_LADDER)
        """
        self.session = session
        self.settings = settings or Settings()
        self.executor = QueryExecutor(
            session,
            policy or RetryPolicy.from_settings(self.settings),
            metrics_enabled=self.settings.PROMETHEUS_ENABLED,
        )
        self.read_consistency = ConsistencyLevel(self.settings.READ_CONSISTENCY)
        self.write_consistency = ConsistencyLevel(self.settings.WRITE_CONSISTENCY)
        self.bootstrap_consistency = ConsistencyLevel(self.settings.BOOTSTRAP_CONSISTENCY)
        self.query_timeout = self.settings.QUERY_TIMEOUT_SECONDS
        self._bootstrapped = False
    
    @classmethod
    def from_settings(cls, settings: Settings) -> "PersonDao":
        """Build a DAO with a cassandra-driver session."""
        return cls(CassandraSession.from_settings(settings), settings)
    
    def connect(self) -> None:
        """
        Connect and select the keyspace.
        
        Idempotent: while connected, repeated calls issue no statement.
        
        Raises:
            SessionError: If the session cannot connect or the keyspace
                cannot be selected
        """
        if self._bootstrapped and self.session.is_connected:
            return
        
        self.session.connect()
        
        keyspace = self.settings.CASSANDRA_KEYSPACE
        outcome = self.session.execute(
            Query(cql=f"USE {keyspace}", consistency=self.bootstrap_consistency)
        )
        if not isinstance(outcome, Success):
            logger.error(
                "Keyspace bootstrap failed",
                extra={"keyspace": keyspace, "outcome": type(outcome).__name__},
            )
            raise SessionError(
                f"Unable to select keyspace {keyspace}",
                details={"outcome": repr(outcome)},
            )
        
        self._bootstrapped = True
        logger.info("PersonDao connected", extra={"keyspace": keyspace})
    
    def disconnect(self) -> None:
        """Release the session; the next connect() bootstraps again."""
        self.session.disconnect()
        self._bootstrapped = False
    
    def retrieve_people(self, cancel_event: Optional[threading.Event] = None) -> list[Person]:
        """
        Read every person.
        
        Raises:
            SessionError: If connect() has not been called
            UnableToRetrieveError: If retries are exhausted
            FatalProtocolError: On a non-recoverable failure
        """
        self._require_bootstrap()
        query = Query.simple(self.SELECT_ALL, timeout=self.query_timeout)
        return self.executor.execute(
            query,
            self.read_consistency,
            OperationKind.READ,
            decoder=decode_person,
            cancel_event=cancel_event,
        )
    
    def retrieve_people_by_name(
        self, name: str, cancel_event: Optional[threading.Event] = None
    ) -> list[Person]:
        """Read people by name through a prepared statement."""
        query = Query.bound(self._prepare(self.SELECT_BY_NAME), name, timeout=self.query_timeout)
        return self.executor.execute(
            query,
            self.read_consistency,
            OperationKind.READ,
            decoder=decode_person,
            cancel_event=cancel_event,
        )
    
    def store_person(self, person: Person, cancel_event: Optional[threading.Event] = None) -> None:
        """
        Insert a person.
        
        Raises:
            UnableToPersistError: If retries are exhausted or the call exceeds
                QUERY_TIMEOUT_SECONDS
            FatalProtocolError: On a non-recoverable failure
        """
        query = Query.bound(
            self._prepare(self.INSERT),
            person.name,
            person.age,
            list(person.interesting_dates),
            timeout=self.query_timeout,
        )
        self.executor.execute(
            query,
            self.write_consistency,
            OperationKind.WRITE,
            cancel_event=cancel_event,
        )
        logger.info("Stored person", extra={"name": person.name})
    
    def _require_bootstrap(self) -> None:
        if not self._bootstrapped:
            raise SessionError("PersonDao is not connected; call connect() first")
    
    def _prepare(self, cql: str) -> Any:
        self._require_bootstrap()
        return self.session.prepare(cql)
