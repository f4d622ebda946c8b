"""
Enumerations for the query execution data model.

All enums are closed vocabularies - no values outside these sets are permitted.
"""

from enum import Enum

from cassandra import ConsistencyLevel as DriverConsistencyLevel


class ConsistencyLevel(str, Enum):
    """
    CQL consistency levels.
    
    Values match the names used by the native protocol and cqlsh, so a level
    can be read straight from configuration ("QUORUM", "one", ...).
    No ordering is implied here; only the ConsistencyLadder ranks levels.
    """
    
    ANY = "ANY"
    ONE = "ONE"
    TWO = "TWO"
    THREE = "THREE"
    QUORUM = "QUORUM"
    ALL = "ALL"
    LOCAL_QUORUM = "LOCAL_QUORUM"
    EACH_QUORUM = "EACH_QUORUM"
    SERIAL = "SERIAL"
    LOCAL_SERIAL = "LOCAL_SERIAL"
    LOCAL_ONE = "LOCAL_ONE"
    
    def to_driver(self) -> int:
        """Integer code understood by cassandra-driver statements."""
        return DriverConsistencyLevel.name_to_value[self.value]
    
    @classmethod
    def from_driver(cls, value: int) -> "ConsistencyLevel":
        """Map a cassandra-driver integer code back to the enum."""
        return cls(DriverConsistencyLevel.value_to_name[value])


class OperationKind(str, Enum):
    """
    Whether a logical query reads or writes.
    
    Decides which recoverable failure is retried and which terminal
    error is raised once retries run out.
    """
    
    READ = "read"
    WRITE = "write"


class FailureKind(str, Enum):
    """Cluster-reported recoverable timeouts (not enough replicas answered in time)."""
    
    READ_TIMEOUT = "read_timeout"
    WRITE_TIMEOUT = "write_timeout"
    
    @classmethod
    def for_operation(cls, operation: OperationKind) -> "FailureKind":
        """The failure kind that is retryable for the given operation."""
        if operation is OperationKind.READ:
            return cls.READ_TIMEOUT
        return cls.WRITE_TIMEOUT
