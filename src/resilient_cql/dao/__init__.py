"""
DAO layer.

- person_dao.py: PersonDao (retrieve/store people with retries)
- decoder.py: row -> Person mapping
"""

from resilient_cql.dao.decoder import decode_person, to_timestamp
from resilient_cql.dao.person_dao import PersonDao

__all__ = [
    "PersonDao",
    "decode_person",
    "to_timestamp",
]
