"""
Row decoding for the person table.

Rows arrive as mappings of column name to value (cassandra-driver
dict_factory). Type coercions live here, not in the retry core.
"""

from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Any

from resilient_cql.models.person import Person

# cassandra-driver returns naive UTC datetimes for timestamp columns
_EPOCH = datetime(1970, 1, 1)


def to_timestamp(value: Any) -> datetime:
    """
    Coerce a CQL timestamp value to a naive UTC datetime.
    
    Accepts datetimes (returned unchanged) and integers holding
    milliseconds since the epoch (the wire representation).
    
    Raises:
        TypeError: For any other type
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return _EPOCH + timedelta(milliseconds=value)
    raise TypeError(f"Cannot convert {type(value).__name__} to timestamp")


def decode_person(row: Mapping[str, Any]) -> Person:
    """
    Map a person row to a Person.
    
    Older rows carry `first_name` instead of `name`; it is used as the name
    when `name` is absent.
    
    Raises:
        KeyError: If neither name column nor `age` is present
        TypeError: If a timestamp has an unsupported type
    """
    name = row.get("name")
    if name is None:
        name = row["first_name"]

    dates = row.get("interesting_dates") or []
    return Person(
        name=name,
        age=row["age"],
        interesting_dates=[to_timestamp(value) for value in dates],
    )
