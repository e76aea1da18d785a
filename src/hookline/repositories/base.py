"""
Store interface shared by every record collection.

All methods are coroutines returning ``(error, result)`` pairs. Ordinary
misses are not errors: ``find_one`` returns ``(None, None)``.

Criteria are mappings of field -> value, or field -> ``{"$in": [...]}``.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Tuple


Result = Tuple[Optional[Exception], Any]


def matches(record: Mapping[str, Any], criteria: Optional[Mapping[str, Any]]) -> bool:
    if not criteria:
        return True

    for field, expected in criteria.items():
        value = record.get(field)
        if isinstance(expected, Mapping) and "$in" in expected:
            if value not in expected["$in"]:
                return False
        elif value != expected:
            return False

    return True


class Store(ABC):
    """Abstract record store."""

    primary_key = "id"

    @abstractmethod
    async def find(self, criteria: Optional[Mapping[str, Any]] = None) -> Result:
        """All records matching ``criteria`` (a list)."""

    @abstractmethod
    async def find_one(self, criteria: Mapping[str, Any]) -> Result:
        """First matching record or None."""

    @abstractmethod
    async def insert(self, record: Mapping[str, Any]) -> Result:
        """Inserted record."""

    @abstractmethod
    async def update(self, record: Mapping[str, Any], criteria: Mapping[str, Any]) -> Result:
        """Number of updated records."""

    @abstractmethod
    async def delete(self, criteria: Mapping[str, Any]) -> Result:
        """Number of deleted records."""
