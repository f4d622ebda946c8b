"""
Query value passed to the driver session for a single attempt.

A logical query issued by the DAO is described once; the executor derives
one Query per attempt that differs only in consistency level.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from resilient_cql.models.enums import ConsistencyLevel


class Query(BaseModel):
    """
    Immutable description of one CQL execution.
    
    Exactly one of `cql` (simple statement) or `prepared` (handle returned by
    DriverSession.prepare) is set. Parameters are bound positionally.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)
    
    cql: Optional[str] = Field(default=None, description="CQL text for a simple statement")
    prepared: Optional[Any] = Field(default=None, description="Prepared statement handle")
    parameters: tuple[Any, ...] = Field(default=(), description="Positional bound values")
    consistency: ConsistencyLevel = Field(default=ConsistencyLevel.ONE, description="Consistency for this attempt")
    timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Per-attempt client deadline in seconds (None = driver default)"
    )
    
    @model_validator(mode="after")
    def _exactly_one_statement(self) -> "Query":
        if (self.cql is None) == (self.prepared is None):
            raise ValueError("Query needs exactly one of 'cql' or 'prepared'")
        return self
    
    @classmethod
    def simple(cls, cql: str, *parameters: Any, timeout: Optional[float] = None) -> "Query":
        """Build a simple-statement query."""
        return cls(cql=cql, parameters=parameters, timeout=timeout)
    
    @classmethod
    def bound(cls, prepared: Any, *parameters: Any, timeout: Optional[float] = None) -> "Query":
        """Build a query for a prepared statement with bound values."""
        return cls(prepared=prepared, parameters=parameters, timeout=timeout)
    
    @property
    def is_prepared(self) -> bool:
        return self.prepared is not None
    
    @property
    def text(self) -> str:
        """CQL text, also for prepared statements (used in logs)."""
        if self.cql is not None:
            return self.cql
        return getattr(self.prepared, "query_string", str(self.prepared))
    
    def with_consistency(self, consistency: ConsistencyLevel) -> "Query":
        return self.model_copy(update={"consistency": consistency})
    
    def with_timeout(self, timeout: Optional[float]) -> "Query":
        return self.model_copy(update={"timeout": timeout})
