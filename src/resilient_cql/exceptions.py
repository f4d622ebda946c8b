"""
Custom exceptions for the data access layer.

These exceptions give callers a small, typed surface: driver exceptions never
escape the session adapter, and retry mechanics only show up through the
attempt metadata carried by the terminal read/write errors.
"""


class DataAccessError(Exception):
    """
    Base exception for all data access errors.
    
    All domain-specific exceptions inherit from this to allow catching
    any data access error with a single except clause.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class FatalProtocolError(DataAccessError):
    """
    Raised for failures that are never retried.
    
    Examples:
    - Malformed or invalid statement
    - No host available / connection lost
    - Unavailable replicas
    - Row decode failure
    
    Propagated on first occurrence.
    """
    def __init__(self, message: str, cause: BaseException | None = None, details: dict | None = None):
        super().__init__(message, details)
        self.cause = cause


class QueryCancelledError(DataAccessError):
    """
    Raised when the caller cancelled the query or its deadline passed.
    
    No further attempt is issued once cancellation is observed.
    """
    pass


class SessionError(DataAccessError):
    """
    Raised when the session cannot be used.
    
    Examples:
    - Keyspace bootstrap statement failed on connect
    - Query issued on a disconnected session
    """
    pass
