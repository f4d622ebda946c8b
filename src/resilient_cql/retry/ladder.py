"""
Consistency downgrade ladder.

Maps (attempt index, initial level) to the consistency level used for that
attempt. Attempt 0 always runs at the caller's level; later attempts walk the
configured downgrade steps and then stay on the last one, so the ladder never
runs out before the retry budget does.

Example with the default steps [ONE]:
    attempt 0 -> QUORUM, attempt 1 -> ONE, attempt 2 -> ONE, ...
"""

from typing import Iterable, Sequence

from resilient_cql.models.enums import ConsistencyLevel

# Replica acknowledgements roughly required by each level; only used to avoid
# "downgrading" to a stronger level than the caller asked for.
_STRENGTH: dict[ConsistencyLevel, int] = {
    ConsistencyLevel.ANY: 0,
    ConsistencyLevel.ONE: 1,
    ConsistencyLevel.LOCAL_ONE: 1,
    ConsistencyLevel.TWO: 2,
    ConsistencyLevel.THREE: 3,
    ConsistencyLevel.LOCAL_QUORUM: 4,
    ConsistencyLevel.LOCAL_SERIAL: 4,
    ConsistencyLevel.QUORUM: 5,
    ConsistencyLevel.SERIAL: 5,
    ConsistencyLevel.EACH_QUORUM: 6,
    ConsistencyLevel.ALL: 7,
}


class ConsistencyLadder:
    """
    Pure policy object: which consistency to use on each attempt.
    
    Attributes:
        steps: Downgrade levels for attempts 1, 2, ... (last one repeats)
    """

    def __init__(self, steps: Iterable[ConsistencyLevel | str] = (ConsistencyLevel.ONE,)):
        self.steps: tuple[ConsistencyLevel, ...] = tuple(ConsistencyLevel(step) for step in steps)
        if not self.steps:
            raise ValueError("ConsistencyLadder needs at least one downgrade step")

    def level_for(self, attempt_index: int, initial_level: ConsistencyLevel) -> ConsistencyLevel:
        """
        Consistency level for the given attempt.
        
        Args:
            attempt_index: 0 for the first attempt, 1 for the first retry, ...
            initial_level: Level requested by the caller
        
        Returns:
            The caller's level on attempt 0, a downgrade step afterwards
        
        Raises:
            ValueError: If attempt_index is negative
        """
        if attempt_index < 0:
            raise ValueError(f"attempt_index must be >= 0, got {attempt_index}")

        initial_level = ConsistencyLevel(initial_level)
        if attempt_index == 0:
            return initial_level

        downgrades = self._downgrades_from(initial_level)
        if not downgrades:
            return initial_level
        return downgrades[min(attempt_index - 1, len(downgrades) - 1)]

    def sequence(self, initial_level: ConsistencyLevel, attempts: int) -> list[ConsistencyLevel]:
        """Levels for the first `attempts` attempts, in order."""
        return [self.level_for(index, initial_level) for index in range(attempts)]

    def _downgrades_from(self, initial_level: ConsistencyLevel) -> Sequence[ConsistencyLevel]:
        ceiling = _STRENGTH[initial_level]
        return [step for step in self.steps if _STRENGTH[step] <= ceiling]

    def __repr__(self) -> str:
        return f"ConsistencyLadder(steps={[step.value for step in self.steps]})"
