"""
In-memory store, used for development and tests.
"""

import copy
from typing import Any, Dict, Mapping, Optional

from hookline.auth.errors import StoreError

from .base import Result, Store, matches


class InMemoryStore(Store):
    """
    Keeps records in a dict keyed by primary key.

    Records are copied in and out so callers never share state with the
    store. Writes are applied in call order (last write wins).
    """

    def __init__(self, name: str = "records"):
        self.name = name
        self.records: Dict[Any, dict] = {}

    async def find(self, criteria: Optional[Mapping[str, Any]] = None) -> Result:
        return None, [copy.deepcopy(r) for r in self.records.values() if matches(r, criteria)]

    async def find_one(self, criteria: Mapping[str, Any]) -> Result:
        for record in self.records.values():
            if matches(record, criteria):
                return None, copy.deepcopy(record)
        return None, None

    async def insert(self, record: Mapping[str, Any]) -> Result:
        key = record.get(self.primary_key)
        if key is None:
            return StoreError(f"{self.name}: missing primary key '{self.primary_key}'"), None
        if key in self.records:
            return StoreError(f"{self.name}: duplicate entry '{key}'"), None

        self.records[key] = copy.deepcopy(dict(record))
        return None, copy.deepcopy(self.records[key])

    async def update(self, record: Mapping[str, Any], criteria: Mapping[str, Any]) -> Result:
        changes = {k: v for k, v in record.items() if k != self.primary_key}
        count = 0

        for stored in self.records.values():
            if matches(stored, criteria):
                stored.update(copy.deepcopy(changes))
                count += 1

        return None, count

    async def delete(self, criteria: Mapping[str, Any]) -> Result:
        keys = [key for key, record in self.records.items() if matches(record, criteria)]
        for key in keys:
            del self.records[key]
        return None, len(keys)

    def __len__(self) -> int:
        return len(self.records)
