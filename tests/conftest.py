"""Shared fixtures: a call-recording in-memory Entity."""

import pytest

from entityrest.core.sink import ResponseSink
from entityrest.core.types import UNSET
from entityrest.entity.capabilities import EntityCapabilities


class RecordingEntity:
    """Minimal Entity over a dict. Records every storage call in ``calls``.

    ``locked`` is read-only. A record whose ``name`` is empty is invalid.
    """

    plural_name = "widgets"
    read_only = ("locked",)

    def __init__(self, records=None):
        self.records = {r["id"]: dict(r) for r in records or []}
        self.calls = []
        self._next_id = 100

    def find_by_id(self, id):
        self.calls.append(("find_by_id", id))
        record = self.records.get(id)
        return dict(record) if record is not None else None

    def find(self, filter, *, limit=None, skip=0, sort=None):
        self.calls.append(("find", filter, limit, skip, sort))
        found = [
            dict(r) for r in self.records.values()
            if all(r.get(k) == v for k, v in filter.items())
        ]
        end = skip + limit if limit is not None else None
        return found[skip:end]

    def create_one(self, props):
        self.calls.append(("create_one", props))
        self._next_id += 1
        record = {**props, "id": str(self._next_id)}
        self.records[record["id"]] = record
        return dict(record)

    def update_one(self, props):
        self.calls.append(("update_one", props))
        record = {**self.records[props["id"]], **props}
        self.records[props["id"]] = record
        return dict(record)

    def replace_one(self, props):
        self.calls.append(("replace_one", props))
        self.records[props["id"]] = dict(props)
        return dict(props)

    def delete_one(self, record):
        self.calls.append(("delete_one", record["id"]))
        del self.records[record["id"]]

    def reset_read_only(self, incoming, existing):
        props = dict(incoming)
        for name in self.read_only:
            props[name] = existing.get(name, UNSET)
        return props

    def assert_valid(self, props, error):
        if props.get("name") == "":
            raise error.error([{"path": "/name", "message": "name must not be empty"}])

    def call_names(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def entity():
    return RecordingEntity([
        {"id": "1", "name": "alpha", "status": True, "locked": True},
        {"id": "2", "name": "beta", "status": False, "locked": False},
        {"id": "3", "name": "gamma", "status": True, "locked": False},
    ])


@pytest.fixture
def capabilities(entity):
    return EntityCapabilities.bind(entity)


@pytest.fixture
def sink():
    return ResponseSink()
