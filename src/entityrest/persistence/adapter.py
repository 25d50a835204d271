"""DocumentStore Protocol: shared interface for the reference stores."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class DocumentStore(Protocol):
    """Interface all document stores must implement.

    Records are plain JSON-compatible dicts keyed by a string ``id``.
    Stores return copies; callers may mutate what they receive.
    """

    collection: str

    def get(self, id: str) -> dict[str, Any] | None: ...

    def query(
        self,
        filter: dict[str, Any] | None = None,
        limit: int | None = None,
        skip: int = 0,
        sort: dict[str, int] | None = None,
    ) -> list[dict[str, Any]]: ...

    def insert(self, data: dict[str, Any]) -> dict[str, Any]: ...

    def update(self, id: str, data: dict[str, Any]) -> dict[str, Any] | None: ...

    def replace(self, id: str, data: dict[str, Any]) -> dict[str, Any] | None: ...

    def delete(self, id: str) -> bool: ...

    def close(self) -> None: ...
