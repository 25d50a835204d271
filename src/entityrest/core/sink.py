"""Response sink handed to every operation.

An operation writes exactly one response through ``respond`` and may queue
notification callbacks with ``after_response``. Queued callbacks run only
once the transport has dispatched the response (``run_deferred``), and
their failures are logged, never raised.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

from entityrest.core.types import resolve

logger = logging.getLogger(__name__)

HAL_JSON = "application/hal+json"

_EMPTY_OBJECT = object()


class ResponseSink:
    """Collects the status, body and post-response callbacks of one call."""

    def __init__(self) -> None:
        self.status: int | None = None
        self.data: Any = None
        self._deferred: list[tuple[Callable[..., Any], tuple[Any, ...]]] = []

    @property
    def responded(self) -> bool:
        return self.status is not None

    @property
    def is_json(self) -> bool:
        return isinstance(self.data, (dict, list))

    @property
    def media_type(self) -> str | None:
        return HAL_JSON if self.is_json else None

    def respond(self, status: int = 200, data: Any = _EMPTY_OBJECT) -> None:
        """Record the response.

        Objects and arrays are sent as ``application/hal+json``; anything
        else is sent as a raw body (empty when falsy).
        """
        if self.responded:
            raise RuntimeError("A response has already been written for this request")
        if data is _EMPTY_OBJECT:
            data = {}
        self.status = status
        self.data = data

    def body(self) -> bytes:
        """Serialised response body."""
        if self.is_json:
            return json.dumps(self.data, default=str).encode("utf-8")
        if not self.data:
            return b""
        if isinstance(self.data, bytes):
            return self.data
        return str(self.data).encode("utf-8")

    def after_response(self, callback: Callable[..., Any], *args: Any) -> None:
        """Queue a notification to run after the response is dispatched."""
        self._deferred.append((callback, args))

    @property
    def deferred(self) -> list[tuple[Callable[..., Any], tuple[Any, ...]]]:
        return list(self._deferred)

    async def run_deferred(self) -> None:
        """Run queued notifications in order, logging (not raising) failures."""
        pending, self._deferred = self._deferred, []
        for callback, args in pending:
            await run_notification(callback, *args)


async def run_notification(callback: Callable[..., Any], *args: Any) -> None:
    """Run one notification hook; failures are logged and swallowed."""
    name = getattr(callback, "__qualname__", repr(callback))
    try:
        await resolve(callback(*args))
    except Exception as e:
        logger.error("Notification hook '%s' failed: %s", name, e, exc_info=True)
