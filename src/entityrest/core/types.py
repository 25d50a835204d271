"""Core request-side types shared by the pipeline and the transports."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

# Keys that only ever appear in responses; stripped from every client body.
RESPONSE_ONLY_KEYS = ("_embedded", "_links")

# Id used to validate a create candidate before storage has assigned one.
PLACEHOLDER_ID = "123456789012345678901234"


class _Unset:
    """Marker for an absent ("undefined") value inside a candidate record."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class RequestView:
    """Transport-independent view of one incoming request.

    Attributes:
        url_params: Path parameters (``entityId`` for single-entity routes)
        query: Query-string parameters, one string value per key
        body: Parsed JSON body (object, array, or scalar)
        user: Authenticated principal supplied by the transport, if any
    """

    url_params: Mapping[str, str] = field(default_factory=dict)
    query: Mapping[str, Any] = field(default_factory=dict)
    body: Any = field(default_factory=dict)
    user: Any = None

    @classmethod
    def build(
        cls,
        url_params: Mapping[str, str] | None = None,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        user: Any = None,
    ) -> RequestView:
        """Build a view, defaulting absent parts to empty objects."""
        return cls(
            url_params=dict(url_params or {}),
            query=dict(query or {}),
            body=body if body is not None else {},
            user=user,
        )

    @property
    def entity_id(self) -> str | None:
        return self.url_params.get("entityId")


# Endpoint callables may be plain functions or coroutine functions.
RequestCheck = Callable[..., Any]
RequestQuery = Callable[[RequestView], Mapping[str, Any] | Awaitable[Mapping[str, Any]]]
RequestSet = Callable[[RequestView], Mapping[str, Any] | Awaitable[Mapping[str, Any]]]


@dataclass(frozen=True)
class EndpointSpec:
    """Per-route customisation of a standard operation.

    Attributes:
        authenticate: ``(request, *args)``; raising rejects the request (401)
        validate: ``(request, *args)``; raising rejects the request (400)
        query: Extra filter conditions merged over the query-string filter
        set: Fields forced onto every candidate record
    """

    authenticate: RequestCheck | None = None
    validate: RequestCheck | None = None
    query: RequestQuery | None = None
    set: RequestSet | None = None

    async def extra_query(self, request: RequestView) -> dict[str, Any]:
        if self.query is None:
            return {}
        return dict(await resolve(self.query(request)) or {})

    async def forced_set(self, request: RequestView) -> dict[str, Any]:
        if self.set is None:
            return {}
        return dict(await resolve(self.set(request)) or {})


async def resolve(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


def strip_unset(props: Mapping[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is UNSET."""
    return {key: value for key, value in props.items() if value is not UNSET}
