"""
cassandra-driver implementation of the DriverSession protocol.

Wraps a Cluster/Session pair and translates driver exceptions into tagged
outcomes. The driver's own retry policy is disabled (FallthroughRetryPolicy)
so that every retry is decided, counted and downgraded by the QueryExecutor.
"""

from typing import Any, Optional

import structlog
from cassandra import DriverException, OperationTimedOut, ReadTimeout, WriteTimeout
from cassandra.cluster import EXEC_PROFILE_DEFAULT, Cluster, ExecutionProfile, NoHostAvailable, Session
from cassandra.policies import FallthroughRetryPolicy
from cassandra.query import SimpleStatement, dict_factory

from resilient_cql.config import Settings
from resilient_cql.exceptions import FatalProtocolError, SessionError
from resilient_cql.models.enums import ConsistencyLevel, FailureKind
from resilient_cql.models.outcome import (
    DeadlineExceeded,
    ExecutionOutcome,
    FatalFailure,
    RecoverableFailure,
    Success,
)
from resilient_cql.models.query import Query

logger = structlog.get_logger(__name__)


class CassandraSession:
    """
    DriverSession backed by cassandra-driver.
    
    Attributes:
        contact_points: Cluster contact points
        port: Native protocol port
        connect_timeout: Seconds to wait for the initial connection
        default_timeout: Per-request timeout used when a Query has none
    """

    def __init__(
        self,
        contact_points: list[str],
        port: int = 9042,
        connect_timeout: float = 5.0,
        default_timeout: Optional[float] = None,
    ):
        self.contact_points = list(contact_points)
        self.port = port
        self.connect_timeout = connect_timeout
        self.default_timeout = default_timeout
        self._cluster: Optional[Cluster] = None
        self._session: Optional[Session] = None
        self._prepared: dict[str, Any] = {}

    @classmethod
    def from_settings(cls, settings: Settings) -> "CassandraSession":
        """Build a session from CASSANDRA_* and QUERY_TIMEOUT_SECONDS."""
        return cls(
            contact_points=settings.CASSANDRA_CONTACT_POINTS,
            port=settings.CASSANDRA_PORT,
            connect_timeout=settings.CASSANDRA_CONNECT_TIMEOUT,
            default_timeout=settings.QUERY_TIMEOUT_SECONDS,
        )

    @property
    def is_connected(self) -> bool:
        return self._session is not None and not self._session.is_shutdown

    def connect(self) -> None:
        """
        Connect to the cluster.
        
        Idempotent: a live session is reused.
        
        Raises:
            SessionError: If no contact point can be reached
        """
        if self.is_connected:
            return

        profile = ExecutionProfile(
            retry_policy=FallthroughRetryPolicy(),
            row_factory=dict_factory,
        )

        self._cluster = Cluster(
            self.contact_points,
            port=self.port,
            connect_timeout=self.connect_timeout,
            execution_profiles={EXEC_PROFILE_DEFAULT: profile},
        )
        try:
            self._session = self._cluster.connect()
        except (DriverException, NoHostAvailable) as e:
            self._cluster.shutdown()
            self._cluster = None
            logger.error(
                "Failed to connect to Cassandra",
                extra={"contact_points": self.contact_points, "port": self.port, "error": str(e)},
            )
            raise SessionError(
                f"Unable to connect to Cassandra at {self.contact_points}:{self.port}",
                details={"error": str(e)},
            ) from e

        self._prepared.clear()
        logger.info(
            "Connected to Cassandra",
            extra={"contact_points": self.contact_points, "port": self.port},
        )

    def disconnect(self) -> None:
        """Shut down the cluster connection (no-op when not connected)."""
        if self._cluster is not None:
            self._cluster.shutdown()
            logger.info("Disconnected from Cassandra", extra={"contact_points": self.contact_points})
        self._cluster = None
        self._session = None
        self._prepared.clear()

    def prepare(self, cql: str) -> Any:
        """
        Prepare a statement, caching the handle per CQL text.
        
        Raises:
            SessionError: If not connected
            FatalProtocolError: If the cluster rejects the statement
        """
        session = self._require_session()
        if cql in self._prepared:
            return self._prepared[cql]

        try:
            handle = session.prepare(cql)
        except (DriverException, NoHostAvailable) as e:
            logger.error("Failed to prepare statement", extra={"cql": cql, "error": str(e)})
            raise FatalProtocolError(f"Unable to prepare statement: {cql}", cause=e) from e

        self._prepared[cql] = handle
        logger.debug("Prepared statement", extra={"cql": cql})
        return handle

    def execute(self, query: Query) -> ExecutionOutcome:
        """
        Execute one attempt and classify the result.
        
        Returns:
            Success with rows as dicts, RecoverableFailure for cluster
            read/write timeouts, DeadlineExceeded when the client-side timeout
            fires, FatalFailure for everything else
        """
        session = self._require_session()
        timeout = query.timeout if query.timeout is not None else self.default_timeout
        options = {"timeout": timeout} if timeout is not None else {}

        try:
            statement = self._build_statement(query)
            if query.is_prepared:
                result = session.execute(statement, **options)
            else:
                result = session.execute(statement, query.parameters or None, **options)
        except ReadTimeout as e:
            return self._recoverable(FailureKind.READ_TIMEOUT, e)
        except WriteTimeout as e:
            return self._recoverable(FailureKind.WRITE_TIMEOUT, e)
        except OperationTimedOut as e:
            return DeadlineExceeded(message=str(e) or "Client-side timeout", timeout=timeout)
        except (DriverException, NoHostAvailable) as e:
            return FatalFailure(cause=e)
        except (TypeError, ValueError) as e:
            # Parameters the column types cannot serialize
            logger.error(
                "Unable to bind statement parameters",
                extra={"query": query.text, "error_type": type(e).__name__, "error": str(e)},
            )
            return FatalFailure(cause=e)

        return Success(rows=list(result) if result is not None else [])

    def _require_session(self) -> Session:
        if not self.is_connected:
            raise SessionError("Cassandra session is not connected; call connect() first")
        return self._session

    def _build_statement(self, query: Query) -> Any:
        consistency = query.consistency.to_driver()
        if query.is_prepared:
            bound = query.prepared.bind(query.parameters)
            bound.consistency_level = consistency
            return bound
        return SimpleStatement(query.cql, consistency_level=consistency)

    @staticmethod
    def _recoverable(kind: FailureKind, error: ReadTimeout | WriteTimeout) -> RecoverableFailure:
        consistency = getattr(error, "consistency", None)
        return RecoverableFailure(
            kind=kind,
            consistency=ConsistencyLevel.from_driver(consistency) if consistency is not None else None,
            message=str(error),
            required_responses=getattr(error, "required_responses", None),
            received_responses=getattr(error, "received_responses", None),
        )
