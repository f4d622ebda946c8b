"""Integration test fixtures (service checks and prerequisites).

Provides fixtures for checking if external services are available.
Integration tests are skipped if required services are not running.
"""

import pytest
from cassandra.cluster import Cluster, NoHostAvailable

from resilient_cql.config import Settings
from resilient_cql.dao.person_dao import PersonDao

KEYSPACE = "people_it"


@pytest.fixture(scope="session")
def check_cassandra():
    """Check if Cassandra is available at localhost:9042 and create the schema.
    
    Skips tests if Cassandra is not reachable.
    """
    try:
        cluster = Cluster(["127.0.0.1"], port=9042, connect_timeout=3)
        session = cluster.connect()
    except NoHostAvailable as e:
        pytest.skip(f"Cassandra not available: {e}")

    session.execute(
        f"CREATE KEYSPACE IF NOT EXISTS {KEYSPACE} "
        "WITH replication = {'class': 'SimpleStrategy', 'replication_factor': 1}"
    )
    session.execute(
        f"CREATE TABLE IF NOT EXISTS {KEYSPACE}.person "
        "(name text PRIMARY KEY, age int, interesting_dates list<timestamp>)"
    )
    session.execute(f"TRUNCATE {KEYSPACE}.person")
    yield
    cluster.shutdown()


@pytest.fixture
def integration_settings(check_cassandra) -> Settings:
    return Settings(
        _env_file=None,
        CASSANDRA_CONTACT_POINTS=["127.0.0.1"],
        CASSANDRA_PORT=9042,
        CASSANDRA_KEYSPACE=KEYSPACE,
        QUERY_TIMEOUT_SECONDS=5.0,
        PROMETHEUS_ENABLED=False,
    )


@pytest.fixture
def real_person_dao(integration_settings):
    """PersonDao connected to the local node."""
    dao = PersonDao.from_settings(integration_settings)
    dao.connect()
    yield dao
    dao.disconnect()
