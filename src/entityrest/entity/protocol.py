"""Entity Protocol: the per-resource collaborator the pipeline drives."""

from typing import Any, Protocol, runtime_checkable

from entityrest.errors import ErrorSpec

# Names of the optional capabilities an Entity may provide. Anything not
# implemented falls back to an identity / no-op default (see capabilities).
OPTIONAL_CAPABILITIES = (
    "export_one",
    "export_many",
    "prepare_create",
    "prepare_update",
    "should_create",
    "should_update",
    "should_delete",
    "did_create",
    "did_update",
    "did_delete",
)


@runtime_checkable
class Entity(Protocol):
    """Interface every resource type must implement.

    Each method may be a plain function or a coroutine function; the
    pipeline awaits results that are awaitable.

    Optional capabilities (export_one, export_many, prepare_create,
    prepare_update, should_create, should_update, should_delete,
    did_create, did_update, did_delete) are looked up by name once, when
    the Entity is bound to a route.
    """

    # Used for collection self links and the embedded collection key.
    plural_name: str

    def find_by_id(self, id: str) -> Any: ...

    def find(
        self,
        filter: dict[str, Any],
        *,
        limit: int | None = None,
        skip: int = 0,
        sort: dict[str, int] | None = None,
    ) -> Any: ...

    def create_one(self, props: dict[str, Any]) -> Any: ...

    def update_one(self, props: dict[str, Any]) -> Any: ...

    def replace_one(self, props: dict[str, Any]) -> Any: ...

    def delete_one(self, record: dict[str, Any]) -> Any: ...

    def reset_read_only(
        self, incoming: dict[str, Any], existing: dict[str, Any]
    ) -> dict[str, Any]: ...

    def assert_valid(self, props: dict[str, Any], error: ErrorSpec) -> Any: ...
