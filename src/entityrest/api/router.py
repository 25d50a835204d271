"""FastAPI binding for the entity operations.

``create_entity_router`` mounts the seven standard routes for one Entity:

    GET    /{plural}             get_many
    POST   /{plural}             post_one
    PATCH  /{plural}             patch_many
    GET    /{plural}/{entityId}  get_one
    PUT    /{plural}/{entityId}  put_one
    PATCH  /{plural}/{entityId}  patch_one
    DELETE /{plural}/{entityId}  delete_one

Each route translates the Starlette request into a ``RequestView``, runs
its ``EndpointHandler`` against a fresh ``ResponseSink`` and turns the sink
into a Response. Queued notifications run as background tasks, after the
response has been sent.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.background import BackgroundTasks

from entityrest.core.sink import ResponseSink, run_notification
from entityrest.core.types import EndpointSpec, RequestView
from entityrest.entity.capabilities import EntityCapabilities
from entityrest.errors import (
    EntityRestError,
    RequestValidationError,
    error_details,
    error_message,
    error_status,
)
from entityrest.http.adapter import EndpointHandler
from entityrest.pipeline import OPERATIONS
from entityrest.pipeline.operations import DEFAULT_OPTIONS, OperationOptions

logger = logging.getLogger(__name__)

ROUTES = (
    ("GET", "", "get_many"),
    ("POST", "", "post_one"),
    ("PATCH", "", "patch_many"),
    ("GET", "/{entityId}", "get_one"),
    ("PUT", "/{entityId}", "put_one"),
    ("PATCH", "/{entityId}", "patch_one"),
    ("DELETE", "/{entityId}", "delete_one"),
)


async def read_json_body(request: Request) -> Any:
    """Parsed JSON body; an empty body reads as ``{}``."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError as e:
        raise RequestValidationError("Request body must be valid JSON.") from e


async def build_request_view(request: Request) -> RequestView:
    return RequestView.build(
        url_params=dict(request.path_params),
        query=dict(request.query_params),
        body=await read_json_body(request),
        user=getattr(request.state, "user", None),
    )


def sink_to_response(sink: ResponseSink) -> Response:
    background = BackgroundTasks()
    for callback, args in sink.deferred:
        background.add_task(run_notification, callback, *args)

    return Response(
        content=sink.body(),
        status_code=sink.status or 200,
        media_type=sink.media_type,
        background=background,
    )


def _as_rest_error(handler: EndpointHandler, error: Exception) -> EntityRestError:
    status = error_status(error)
    if status is None:
        logger.exception("Unhandled error in %s %s", handler.name, handler.entity.plural_name)
        return EntityRestError("Internal server error")
    return EntityRestError(error_message(error), status=status, details=error_details(error))


def _endpoint(handler: EndpointHandler):
    async def endpoint(request: Request) -> Response:
        sink = ResponseSink()
        try:
            view = await build_request_view(request)
            await handler.handle(view, sink)
        except EntityRestError:
            raise
        except Exception as e:
            raise _as_rest_error(handler, e) from e

        if not sink.responded:
            logger.error("%s %s wrote no response", handler.name, handler.entity.plural_name)
            raise EntityRestError("Internal server error")
        return sink_to_response(sink)

    endpoint.__name__ = f"{handler.entity.plural_name}_{handler.name}"
    return endpoint


def create_entity_router(
    entity: Any,
    specs: Mapping[str, EndpointSpec] | None = None,
    options: OperationOptions = DEFAULT_OPTIONS,
) -> APIRouter:
    """Router exposing ``entity`` under ``/{plural_name}``.

    Args:
        entity: Any object implementing the Entity interface
        specs: Per-operation endpoint specifications keyed by operation
            name (``get_many``, ``patch_one``, ...)
        options: Paging and concurrency limits

    Raises:
        TypeError: If ``entity`` lacks a required Entity method
    """
    capabilities = EntityCapabilities.bind(entity)
    specs = specs or {}
    unknown = set(specs) - set(OPERATIONS)
    if unknown:
        raise ValueError(f"Unknown operation(s) in endpoint specs: {sorted(unknown)}")

    router = APIRouter(prefix=f"/{capabilities.plural_name}", tags=[capabilities.plural_name])
    for method, path, name in ROUTES:
        handler = EndpointHandler(OPERATIONS[name], capabilities, specs.get(name), options)
        router.add_api_route(
            path,
            _endpoint(handler),
            methods=[method],
            name=f"{capabilities.plural_name}.{name}",
        )
    return router


async def entity_rest_error_handler(request: Request, exc: EntityRestError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(EntityRestError, entity_rest_error_handler)
