"""
Unit tests for the cassandra-driver session adapter.

The Cluster is mocked; tests cover statement construction, timeout
handling and exception classification.
"""

from unittest.mock import MagicMock, patch

import pytest
from cassandra import (
    ConsistencyLevel as DriverConsistencyLevel,
    InvalidRequest,
    OperationTimedOut,
    ReadTimeout,
    Unavailable,
    WriteTimeout,
)
from cassandra.cluster import NoHostAvailable
from cassandra.policies import FallthroughRetryPolicy
from cassandra.query import SimpleStatement

from resilient_cql.dao.person_dao import PersonDao
from resilient_cql.exceptions import FatalProtocolError, SessionError
from resilient_cql.models.enums import ConsistencyLevel, FailureKind
from resilient_cql.models.outcome import DeadlineExceeded, FatalFailure, RecoverableFailure, Success
from resilient_cql.models.person import Person
from resilient_cql.models.query import Query
from resilient_cql.session.cassandra_session import CassandraSession


@pytest.fixture
def mock_cluster():
    """Patch Cluster and return the mocked driver session."""
    with patch("resilient_cql.session.cassandra_session.Cluster") as cluster_class:
        driver_session = MagicMock()
        driver_session.is_shutdown = False
        cluster_class.return_value.connect.return_value = driver_session
        yield cluster_class, driver_session


@pytest.fixture
def connected(mock_cluster):
    session = CassandraSession(["127.0.0.1"], port=8042, default_timeout=0.5)
    session.connect()
    return session


def test_connect_builds_cluster_without_driver_retries(mock_cluster):
    cluster_class, _ = mock_cluster
    session = CassandraSession(["127.0.0.1"], port=8042, connect_timeout=2.0)

    session.connect()

    args, kwargs = cluster_class.call_args
    assert args == (["127.0.0.1"],)
    assert kwargs["port"] == 8042
    assert kwargs["connect_timeout"] == 2.0
    profile = next(iter(kwargs["execution_profiles"].values()))
    assert isinstance(profile.retry_policy, FallthroughRetryPolicy)
    assert session.is_connected


def test_connect_is_idempotent(mock_cluster):
    cluster_class, _ = mock_cluster
    session = CassandraSession(["127.0.0.1"])

    session.connect()
    session.connect()

    cluster_class.assert_called_once()
    cluster_class.return_value.connect.assert_called_once()


def test_connect_failure_raises_session_error(mock_cluster):
    cluster_class, _ = mock_cluster
    cluster_class.return_value.connect.side_effect = NoHostAvailable("Unable to connect", {})
    session = CassandraSession(["127.0.0.1"])

    with pytest.raises(SessionError):
        session.connect()

    cluster_class.return_value.shutdown.assert_called_once()
    assert not session.is_connected


def test_disconnect_shuts_down_cluster(connected, mock_cluster):
    cluster_class, _ = mock_cluster

    connected.disconnect()

    cluster_class.return_value.shutdown.assert_called_once()
    assert not connected.is_connected


def test_execute_requires_connection():
    session = CassandraSession(["127.0.0.1"])

    with pytest.raises(SessionError):
        session.execute(Query.simple("select * from person"))


def test_simple_statement_carries_consistency_and_timeout(connected, mock_cluster):
    _, driver_session = mock_cluster
    driver_session.execute.return_value = [{"name": "Chris", "age": 29}]
    query = Query.simple("select * from person", timeout=0.25).with_consistency(ConsistencyLevel.QUORUM)

    outcome = connected.execute(query)

    assert outcome == Success(rows=[{"name": "Chris", "age": 29}])
    statement, parameters = driver_session.execute.call_args.args
    assert isinstance(statement, SimpleStatement)
    assert statement.query_string == "select * from person"
    assert statement.consistency_level == DriverConsistencyLevel.QUORUM
    assert parameters is None
    assert driver_session.execute.call_args.kwargs == {"timeout": 0.25}


def test_default_timeout_used_when_query_has_none(connected, mock_cluster):
    _, driver_session = mock_cluster
    driver_session.execute.return_value = []

    connected.execute(Query.simple("select * from person"))

    assert driver_session.execute.call_args.kwargs == {"timeout": 0.5}


def test_prepared_statement_bound_with_consistency(connected, mock_cluster):
    _, driver_session = mock_cluster
    prepared = MagicMock()
    driver_session.prepare.return_value = prepared
    driver_session.execute.return_value = None

    handle = connected.prepare("select * from person where name = ?")
    outcome = connected.execute(Query.bound(handle, "Chris").with_consistency(ConsistencyLevel.ONE))

    prepared.bind.assert_called_once_with(("Chris",))
    bound = prepared.bind.return_value
    assert bound.consistency_level == DriverConsistencyLevel.ONE
    driver_session.execute.assert_called_once_with(bound, timeout=0.5)
    assert outcome == Success(rows=[])


def test_prepare_is_cached(connected, mock_cluster):
    _, driver_session = mock_cluster

    first = connected.prepare("select * from person where name = ?")
    second = connected.prepare("select * from person where name = ?")

    assert first is second
    driver_session.prepare.assert_called_once()


def test_prepare_failure_is_fatal(connected, mock_cluster):
    _, driver_session = mock_cluster
    driver_session.prepare.side_effect = InvalidRequest("unconfigured table persons")

    with pytest.raises(FatalProtocolError):
        connected.prepare("select * from persons")


def test_read_timeout_is_recoverable(connected, mock_cluster):
    _, driver_session = mock_cluster
    driver_session.execute.side_effect = ReadTimeout(
        "Operation timed out",
        consistency=DriverConsistencyLevel.QUORUM,
        required_responses=2,
        received_responses=1,
        data_retrieved=False,
    )

    outcome = connected.execute(Query.simple("select * from person"))

    assert isinstance(outcome, RecoverableFailure)
    assert outcome.kind == FailureKind.READ_TIMEOUT
    assert outcome.consistency == ConsistencyLevel.QUORUM
    assert outcome.required_responses == 2
    assert outcome.received_responses == 1


def test_write_timeout_is_recoverable(connected, mock_cluster):
    _, driver_session = mock_cluster
    driver_session.execute.side_effect = WriteTimeout(
        "Operation timed out",
        consistency=DriverConsistencyLevel.ONE,
        required_responses=1,
        received_responses=0,
        write_type=0,
    )

    outcome = connected.execute(Query.simple("insert into person(name) values ('x')"))

    assert isinstance(outcome, RecoverableFailure)
    assert outcome.kind == FailureKind.WRITE_TIMEOUT
    assert outcome.consistency == ConsistencyLevel.ONE


def test_client_timeout_is_deadline_exceeded(connected, mock_cluster):
    _, driver_session = mock_cluster
    driver_session.execute.side_effect = OperationTimedOut({}, None)

    outcome = connected.execute(Query.simple("select * from person", timeout=0.1))

    assert isinstance(outcome, DeadlineExceeded)
    assert outcome.timeout == 0.1


@pytest.mark.parametrize(
    "error",
    [
        Unavailable("Cannot achieve consistency level QUORUM", consistency=4, required_replicas=2, alive_replicas=1),
        InvalidRequest("unconfigured table persons"),
        NoHostAvailable("Unable to complete the operation against any hosts", {}),
    ],
)
def test_other_errors_are_fatal(connected, mock_cluster, error):
    _, driver_session = mock_cluster
    driver_session.execute.side_effect = error

    outcome = connected.execute(Query.simple("select * from person"))

    assert isinstance(outcome, FatalFailure)
    assert outcome.cause is error


def test_from_settings(test_settings):
    session = CassandraSession.from_settings(test_settings)

    assert session.contact_points == ["localhost"]
    assert session.port == 9042
    assert session.default_timeout == 0.5


def test_unbindable_parameters_are_fatal(connected, mock_cluster):
    _, driver_session = mock_cluster
    prepared = MagicMock()
    bind_error = TypeError('Received an argument of invalid type for column "age". Expected: Int32Type')
    prepared.bind.side_effect = bind_error
    driver_session.prepare.return_value = prepared

    handle = connected.prepare("insert into person(name, age, interesting_dates) values (?,?,?)")
    outcome = connected.execute(Query.bound(handle, "Christopher", 2**40, []))

    assert isinstance(outcome, FatalFailure)
    assert outcome.cause is bind_error
    driver_session.execute.assert_not_called()


def test_unencodable_simple_parameters_are_fatal(connected, mock_cluster):
    _, driver_session = mock_cluster
    driver_session.execute.side_effect = ValueError("unsupported parameter")

    outcome = connected.execute(Query.simple("select * from person where name = %s", object()))

    assert isinstance(outcome, FatalFailure)
    assert isinstance(outcome.cause, ValueError)


def test_store_person_out_of_range_age_raises_fatal_protocol_error(mock_cluster, test_settings):
    _, driver_session = mock_cluster
    driver_session.prepare.return_value.bind.side_effect = TypeError(
        "'i' format requires -2147483648 <= number <= 2147483647"
    )
    test_settings.MAX_RETRIES = 2
    dao = PersonDao.from_settings(test_settings)
    dao.connect()

    with pytest.raises(FatalProtocolError) as exc_info:
        dao.store_person(Person(name="Christopher", age=2**40))

    assert isinstance(exc_info.value.cause, TypeError)
    # USE people only; the insert never reached the cluster
    assert driver_session.execute.call_count == 1
