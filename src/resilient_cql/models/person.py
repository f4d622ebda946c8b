"""
Person payload stored in the `person` table.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Person(BaseModel):
    """A row of the person table."""
    
    model_config = ConfigDict(frozen=True)
    
    name: str = Field(..., description="Person name (partition key)")
    age: int = Field(..., description="Age in years")
    interesting_dates: list[datetime] = Field(
        default_factory=list,
        description="Ordered list of timestamps"
    )
