"""In-memory document store."""

import copy
import uuid
from typing import Any

from entityrest.filters.matcher import matches, sort_records


class MemoryStore:
    """Dict-backed store. Useful for tests and for running without a database."""

    def __init__(self, collection: str, records: list[dict[str, Any]] | None = None):
        self.collection = collection
        self._records: dict[str, dict[str, Any]] = {}
        for record in records or []:
            self.insert(record)

    def __len__(self) -> int:
        return len(self._records)

    def get(self, id: str) -> dict[str, Any] | None:
        record = self._records.get(id)
        return copy.deepcopy(record) if record is not None else None

    def query(
        self,
        filter: dict[str, Any] | None = None,
        limit: int | None = None,
        skip: int = 0,
        sort: dict[str, int] | None = None,
    ) -> list[dict[str, Any]]:
        found = [r for r in self._records.values() if matches(filter, r)]
        found = sort_records(found, sort)
        end = skip + limit if limit is not None else None
        return copy.deepcopy(found[skip:end])

    def insert(self, data: dict[str, Any]) -> dict[str, Any]:
        """Insert a record, generating an id when none is given."""
        record = copy.deepcopy(data)
        if record.get("id") is None:
            record["id"] = uuid.uuid4().hex
        record["id"] = str(record["id"])
        if record["id"] in self._records:
            raise ValueError(f"Duplicate id '{record['id']}' in {self.collection}")
        self._records[record["id"]] = record
        return copy.deepcopy(record)

    def update(self, id: str, data: dict[str, Any]) -> dict[str, Any] | None:
        """Merge ``data`` into the stored record."""
        record = self._records.get(id)
        if record is None:
            return None
        record.update(copy.deepcopy(data))
        record["id"] = id
        return copy.deepcopy(record)

    def replace(self, id: str, data: dict[str, Any]) -> dict[str, Any] | None:
        if id not in self._records:
            return None
        record = copy.deepcopy(data)
        record["id"] = id
        self._records[id] = record
        return copy.deepcopy(record)

    def delete(self, id: str) -> bool:
        return self._records.pop(id, None) is not None

    def close(self) -> None:
        pass
