"""Bind one operation to a request/response cycle.

``EndpointHandler`` is created once per route and is stateless; every call
receives its request view and response sink explicitly:

    handler = EndpointHandler(patch_one, capabilities, EndpointSpec(authenticate=check))
    sink = ResponseSink()
    await handler.handle(request_view, sink)

Authentication and request-validation failures that carry no status of
their own are re-raised as 401 and 400 respectively. Errors are never
written to the sink; they propagate to the transport's error handler.
"""

import logging
from collections.abc import Callable
from typing import Any

from entityrest.core.sink import ResponseSink
from entityrest.core.types import EndpointSpec, RequestView, resolve
from entityrest.entity.capabilities import EntityCapabilities
from entityrest.errors import (
    AuthenticationError,
    EntityRestError,
    RequestValidationError,
    error_details,
    error_message,
    error_status,
)
from entityrest.pipeline.operations import DEFAULT_OPTIONS, Operation, OperationOptions

logger = logging.getLogger(__name__)


async def _run_check(
    check: Callable[..., Any],
    request: RequestView,
    args: tuple[Any, ...],
    error_cls: type[EntityRestError],
) -> None:
    try:
        await resolve(check(request, *args))
    except Exception as e:
        if error_status(e) is not None:
            raise
        logger.warning("%s: %s", error_cls.__name__, e)
        raise error_cls(error_message(e), details=error_details(e)) from e


class EndpointHandler:
    """One operation plus its endpoint specification.

    Args:
        operation: One of the pipeline operations
        entity: Entity capabilities bound at route registration
        spec: Endpoint specification (authenticate, validate, query, set)
        options: Limits shared by the route's operations
        args: Extra positional arguments for authenticate / validate.
            Defaults to the Entity itself.
    """

    def __init__(
        self,
        operation: Operation,
        entity: EntityCapabilities,
        spec: EndpointSpec | None = None,
        options: OperationOptions = DEFAULT_OPTIONS,
        args: tuple[Any, ...] | None = None,
    ):
        self.operation = operation
        self.entity = entity
        self.spec = spec or EndpointSpec()
        self.options = options
        self.args = args if args is not None else (entity.entity,)

    @property
    def name(self) -> str:
        return getattr(self.operation, "__name__", repr(self.operation))

    async def handle(self, request: RequestView, sink: ResponseSink) -> None:
        """Authenticate, validate, then run the operation.

        Raises:
            AuthenticationError: authenticate failed without its own status
            RequestValidationError: validate failed without its own status
            Exception: anything raised by the operation, unchanged
        """
        if self.spec.authenticate is not None:
            await _run_check(self.spec.authenticate, request, self.args, AuthenticationError)

        if self.spec.validate is not None:
            await _run_check(self.spec.validate, request, self.args, RequestValidationError)

        await self.operation(request, sink, self.spec, self.entity, self.options)
        logger.debug("%s %s -> %s", self.name, self.entity.plural_name, sink.status)
