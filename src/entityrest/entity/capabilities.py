"""Resolve an Entity's optional capabilities once, at route registration.

The pipeline never probes the Entity per request. ``EntityCapabilities``
looks every optional hook up a single time and substitutes the defaults:

- export_one: identity
- export_many: export_one applied to each record
- prepare_create / prepare_update: identity
- should_* guards: absent (the operation proceeds)
- did_* notifications: absent (nothing is scheduled)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from entityrest.core.types import RequestView, resolve
from entityrest.entity.protocol import OPTIONAL_CAPABILITIES, Entity
from entityrest.errors import ErrorSpec

logger = logging.getLogger(__name__)

_REQUIRED = (
    "find_by_id",
    "find",
    "create_one",
    "update_one",
    "replace_one",
    "delete_one",
    "reset_read_only",
    "assert_valid",
)


def _identity(value: Any) -> Any:
    return value


@dataclass(frozen=True)
class EntityCapabilities:
    """An Entity plus its resolved optional hooks.

    Every method is a coroutine; the underlying Entity methods may be
    synchronous or asynchronous.
    """

    entity: Any
    plural_name: str
    _export_one: Callable[..., Any]
    _export_many: Callable[..., Any] | None
    _prepare_create: Callable[..., Any]
    _prepare_update: Callable[..., Any]
    _should_create: Callable[..., Any] | None
    _should_update: Callable[..., Any] | None
    _should_delete: Callable[..., Any] | None
    did_create: Callable[..., Any] | None
    did_update: Callable[..., Any] | None
    did_delete: Callable[..., Any] | None

    @classmethod
    def bind(cls, entity: Entity) -> EntityCapabilities:
        """Check the required interface and resolve optional hooks.

        Raises:
            TypeError: If a required Entity method is missing
        """
        missing = [name for name in _REQUIRED if not callable(getattr(entity, name, None))]
        if missing:
            raise TypeError(
                f"{type(entity).__name__} is missing required Entity methods: "
                + ", ".join(missing)
            )

        hooks = {name: getattr(entity, name, None) for name in OPTIONAL_CAPABILITIES}
        hooks = {name: fn if callable(fn) else None for name, fn in hooks.items()}

        plural_name = getattr(entity, "plural_name", None) or ""
        logger.debug(
            "Bound entity %s (%s) with hooks: %s",
            type(entity).__name__,
            plural_name or "<no plural name>",
            ", ".join(name for name, fn in hooks.items() if fn) or "none",
        )

        return cls(
            entity=entity,
            plural_name=plural_name,
            _export_one=hooks["export_one"] or _identity,
            _export_many=hooks["export_many"],
            _prepare_create=hooks["prepare_create"] or _identity,
            _prepare_update=hooks["prepare_update"] or _identity,
            _should_create=hooks["should_create"],
            _should_update=hooks["should_update"],
            _should_delete=hooks["should_delete"],
            did_create=hooks["did_create"],
            did_update=hooks["did_update"],
            did_delete=hooks["did_delete"],
        )

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    async def find_by_id(self, id: str) -> dict[str, Any] | None:
        return await resolve(self.entity.find_by_id(id))

    async def find(
        self,
        filter: dict[str, Any],
        *,
        limit: int | None = None,
        skip: int = 0,
        sort: dict[str, int] | None = None,
    ) -> list[dict[str, Any]]:
        records = await resolve(
            self.entity.find(filter, limit=limit, skip=skip, sort=sort)
        )
        return list(records or [])

    async def create_one(self, props: dict[str, Any]) -> dict[str, Any]:
        return await resolve(self.entity.create_one(props))

    async def update_one(self, props: dict[str, Any]) -> dict[str, Any]:
        return await resolve(self.entity.update_one(props))

    async def replace_one(self, props: dict[str, Any]) -> dict[str, Any]:
        return await resolve(self.entity.replace_one(props))

    async def delete_one(self, record: dict[str, Any]) -> None:
        await resolve(self.entity.delete_one(record))

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    async def reset_read_only(
        self, incoming: dict[str, Any], existing: dict[str, Any]
    ) -> dict[str, Any]:
        return dict(await resolve(self.entity.reset_read_only(incoming, existing)))

    async def assert_valid(self, props: dict[str, Any], error: ErrorSpec) -> None:
        await resolve(self.entity.assert_valid(props, error))

    # ------------------------------------------------------------------
    # Shaping and lifecycle
    # ------------------------------------------------------------------

    async def export_one(self, record: Any) -> Any:
        return await resolve(self._export_one(record))

    async def export_many(self, records: list[Any]) -> Any:
        if self._export_many is not None:
            return await resolve(self._export_many(records))
        return list(await asyncio.gather(*(self.export_one(r) for r in records)))

    async def prepare_create(self, props: dict[str, Any]) -> dict[str, Any]:
        return await resolve(self._prepare_create(props))

    async def prepare_update(self, props: dict[str, Any]) -> dict[str, Any]:
        return await resolve(self._prepare_update(props))

    async def should_create(self, props: dict[str, Any], request: RequestView) -> None:
        if self._should_create is not None:
            await resolve(self._should_create(props, request))

    async def should_update(self, props: dict[str, Any], request: RequestView) -> None:
        if self._should_update is not None:
            await resolve(self._should_update(props, request))

    async def should_delete(self, record: dict[str, Any], request: RequestView) -> None:
        if self._should_delete is not None:
            await resolve(self._should_delete(record, request))
