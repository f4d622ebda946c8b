"""
Retry policy configuration.
"""

from dataclasses import dataclass, field

from resilient_cql.config import Settings
from resilient_cql.retry.ladder import ConsistencyLadder


@dataclass(frozen=True)
class RetryPolicy:
    """
    How many times to retry and how to downgrade consistency.
    
    Attributes:
        max_retries: Retries after the first attempt (0 = exactly one attempt)
        ladder: Consistency level per attempt
    """

    max_retries: int = 1
    ladder: ConsistencyLadder = field(default_factory=ConsistencyLadder)

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        """Build the policy from MAX_RETRIES and CONSISTENCY_LADDER."""
        return cls(
            max_retries=settings.MAX_RETRIES,
            ladder=ConsistencyLadder(settings.CONSISTENCY_LADDER),
        )
